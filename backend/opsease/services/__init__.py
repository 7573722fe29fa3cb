"""Service layer encapsulating business logic for API routers."""

from .common import RecordConflictError
from .dashboard import DashboardService
from .employees import AttendanceService, EmployeeService, WorkerPaymentService
from .expenses import ExpenseService
from .invoices import InvoiceService, InvoiceServiceError, InvoiceValidationError
from .ledger import (
    LedgerEntryView,
    LedgerService,
    LedgerServiceError,
    LedgerValidationError,
)
from .observability import MetricOutcome, ObservabilityService
from .orders import OrderService, ProductionPlanService
from .parties import CustomerService, SupplierService
from .stock import StockService, StockServiceError

__all__ = [
    "RecordConflictError",
    "DashboardService",
    "AttendanceService",
    "EmployeeService",
    "WorkerPaymentService",
    "ExpenseService",
    "InvoiceService",
    "InvoiceServiceError",
    "InvoiceValidationError",
    "LedgerEntryView",
    "LedgerService",
    "LedgerServiceError",
    "LedgerValidationError",
    "MetricOutcome",
    "ObservabilityService",
    "OrderService",
    "ProductionPlanService",
    "CustomerService",
    "SupplierService",
    "StockService",
    "StockServiceError",
]
