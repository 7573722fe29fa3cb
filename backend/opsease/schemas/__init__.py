"""Expose Pydantic schemas for convenient imports."""

from .common import ApiModel, PaginatedResponse
from .dashboard import DashboardStats, HealthStatus
from .employee import (
    AttendanceCreate,
    AttendanceRead,
    AttendanceUpdate,
    EmployeeCreate,
    EmployeeListResponse,
    EmployeeRead,
    EmployeeUpdate,
    WorkerPaymentCreate,
    WorkerPaymentListResponse,
    WorkerPaymentRead,
    WorkerPaymentUpdate,
)
from .expense import ExpenseCreate, ExpenseListResponse, ExpenseRead, ExpenseUpdate
from .invoice import (
    InvoiceCreate,
    InvoiceItem,
    InvoiceItemRead,
    InvoiceListResponse,
    InvoiceRead,
    InvoiceUpdate,
)
from .ledger import LedgerEntryCreate, LedgerEntryRead, LedgerSummary, PartyBalance
from .order import (
    OrderCreate,
    OrderListResponse,
    OrderProduct,
    OrderRead,
    OrderUpdate,
    ProductionPlanCreate,
    ProductionPlanRead,
    ProductionPlanUpdate,
)
from .party import (
    CustomerCreate,
    CustomerListResponse,
    CustomerRead,
    CustomerUpdate,
    SupplierCreate,
    SupplierListResponse,
    SupplierRead,
    SupplierUpdate,
)
from .stock import (
    StockItemCreate,
    StockItemRead,
    StockItemUpdate,
    StockTransactionCreate,
    StockTransactionRead,
)

__all__ = [
    "ApiModel",
    "PaginatedResponse",
    "DashboardStats",
    "HealthStatus",
    "AttendanceCreate",
    "AttendanceRead",
    "AttendanceUpdate",
    "EmployeeCreate",
    "EmployeeListResponse",
    "EmployeeRead",
    "EmployeeUpdate",
    "WorkerPaymentCreate",
    "WorkerPaymentListResponse",
    "WorkerPaymentRead",
    "WorkerPaymentUpdate",
    "ExpenseCreate",
    "ExpenseListResponse",
    "ExpenseRead",
    "ExpenseUpdate",
    "InvoiceCreate",
    "InvoiceItem",
    "InvoiceItemRead",
    "InvoiceListResponse",
    "InvoiceRead",
    "InvoiceUpdate",
    "LedgerEntryCreate",
    "LedgerEntryRead",
    "LedgerSummary",
    "PartyBalance",
    "OrderCreate",
    "OrderListResponse",
    "OrderProduct",
    "OrderRead",
    "OrderUpdate",
    "ProductionPlanCreate",
    "ProductionPlanRead",
    "ProductionPlanUpdate",
    "CustomerCreate",
    "CustomerListResponse",
    "CustomerRead",
    "CustomerUpdate",
    "SupplierCreate",
    "SupplierListResponse",
    "SupplierRead",
    "SupplierUpdate",
    "StockItemCreate",
    "StockItemRead",
    "StockItemUpdate",
    "StockTransactionCreate",
    "StockTransactionRead",
]
