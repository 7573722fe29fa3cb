"""Expose SQLAlchemy models for convenient imports."""

from .employee import (
    Attendance,
    AttendanceStatus,
    Department,
    Employee,
    EmployeeType,
    PaymentType,
    WorkerPayment,
    WorkerPaymentMethod,
    WorkerPaymentStatus,
)
from .expense import Expense, ExpenseCategory, PaymentMethod
from .invoice import Invoice, InvoiceStatus, InvoiceType
from .ledger_entry import EntryType, LedgerEntry, PartyType
from .operational_metric import OperationalMetricEvent
from .order import (
    Order,
    OrderStatus,
    OrderType,
    ProductionPlan,
    ProductionStage,
    ProductionStatus,
)
from .party import Customer, Supplier
from .stock import StockCategory, StockItem, StockTransaction, StockTransactionType

__all__ = [
    "Attendance",
    "AttendanceStatus",
    "Department",
    "Employee",
    "EmployeeType",
    "PaymentType",
    "WorkerPayment",
    "WorkerPaymentMethod",
    "WorkerPaymentStatus",
    "Expense",
    "ExpenseCategory",
    "PaymentMethod",
    "Invoice",
    "InvoiceStatus",
    "InvoiceType",
    "EntryType",
    "LedgerEntry",
    "PartyType",
    "OperationalMetricEvent",
    "Order",
    "OrderStatus",
    "OrderType",
    "ProductionPlan",
    "ProductionStage",
    "ProductionStatus",
    "Customer",
    "Supplier",
    "StockCategory",
    "StockItem",
    "StockTransaction",
    "StockTransactionType",
]
