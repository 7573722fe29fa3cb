"""Routers package."""

from .attendance import router as attendance_router
from .customers import router as customers_router
from .dashboard import router as dashboard_router
from .employees import router as employees_router
from .expenses import router as expenses_router
from .invoices import router as invoices_router
from .ledger import router as ledger_router
from .orders import router as orders_router
from .payments import router as payments_router
from .production_plans import router as production_plans_router
from .stock import router as stock_router
from .suppliers import router as suppliers_router

__all__ = [
    "attendance_router",
    "customers_router",
    "dashboard_router",
    "employees_router",
    "expenses_router",
    "invoices_router",
    "ledger_router",
    "orders_router",
    "payments_router",
    "production_plans_router",
    "stock_router",
    "suppliers_router",
]
