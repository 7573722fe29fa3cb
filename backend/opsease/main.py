"""Expose the OpsEase backend FastAPI app and its CORS configuration."""

import logging
import os
import re
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Iterable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import schemas
from .migrations import run_database_migrations
from .routers import (
    attendance_router,
    customers_router,
    dashboard_router,
    employees_router,
    expenses_router,
    invoices_router,
    ledger_router,
    orders_router,
    payments_router,
    production_plans_router,
    stock_router,
    suppliers_router,
)

RUN_MIGRATIONS_ENV = "RUN_MIGRATIONS_ON_STARTUP"

LOCAL_DEVELOPMENT_ORIGINS = {
    "http://localhost:5000",
    "http://localhost:5173",
}
LOCALHOST_ORIGIN_REGEX = r"https?://(localhost|127\.0\.0\.1|0\.0\.0\.0)(:\d+)?$"

DEFAULT_ALLOWED_ORIGINS = {
    *LOCAL_DEVELOPMENT_ORIGINS,
    "http://127.0.0.1:5000",
    "http://127.0.0.1:5173",
    "http://0.0.0.0:5000",
    "http://0.0.0.0:5173",
    "http://localhost:4173",
    "http://127.0.0.1:4173",
}


def _normalize_origin(origin: str) -> str | None:
    stripped = origin.strip()
    if not stripped:
        return None
    return stripped.rstrip("/")


def _read_allowed_origins(raw_origins: Iterable[str]) -> list[str]:
    normalized = {_normalize_origin(origin) for origin in raw_origins}
    return sorted({origin for origin in normalized if origin})


def _split_raw_origins(raw_value: str) -> list[str]:
    """Split a raw origin string using commas or whitespace as separators."""

    return [origin for origin in re.split(r"[\s,]+", raw_value) if origin]


def _load_allowed_origins_from_env() -> list[str]:
    raw_value = os.getenv("BACKEND_ALLOWED_ORIGINS")
    if not raw_value:
        return []
    return _read_allowed_origins(_split_raw_origins(raw_value))


def _resolve_allowed_origins() -> list[str]:
    env_origins = _load_allowed_origins_from_env()
    if env_origins:
        origins = list(env_origins)
    else:
        origins = _read_allowed_origins(DEFAULT_ALLOWED_ORIGINS)

    missing_dev_origins = [
        origin for origin in LOCAL_DEVELOPMENT_ORIGINS if origin not in origins
    ]
    if missing_dev_origins:
        # The local frontend dev servers are always allowed.
        origins = _read_allowed_origins([*origins, *missing_dev_origins])

    return origins


def _read_bool_env(name: str, default: bool = True) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


LOGGER = logging.getLogger(__name__)


def ensure_database_is_ready() -> None:
    """Apply pending database migrations when the service starts."""

    if not _read_bool_env(RUN_MIGRATIONS_ENV, True):
        LOGGER.info("Skipping database migrations (%s disabled)", RUN_MIGRATIONS_ENV)
        return
    LOGGER.info("Ensuring database schema is up to date before serving requests")
    run_database_migrations()


@asynccontextmanager
async def lifespan(_: FastAPI):
    ensure_database_is_ready()
    yield


app = FastAPI(title="OpsEase Operations API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_resolve_allowed_origins(),
    allow_origin_regex=LOCALHOST_ORIGIN_REGEX,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(customers_router, prefix="/api/customers", tags=["customers"])
app.include_router(suppliers_router, prefix="/api/suppliers", tags=["suppliers"])
app.include_router(orders_router, prefix="/api/orders", tags=["orders"])
app.include_router(
    production_plans_router,
    prefix="/api/production-plans",
    tags=["production-plans"],
)
app.include_router(expenses_router, prefix="/api/expenses", tags=["expenses"])
app.include_router(stock_router, prefix="/api/stock", tags=["stock"])
app.include_router(employees_router, prefix="/api/employees", tags=["employees"])
app.include_router(attendance_router, prefix="/api/attendance", tags=["attendance"])
app.include_router(payments_router, prefix="/api/payments", tags=["payments"])
app.include_router(invoices_router, prefix="/api/invoices", tags=["invoices"])
app.include_router(ledger_router, prefix="/api/ledger", tags=["ledger"])
app.include_router(dashboard_router, prefix="/api/dashboard", tags=["dashboard"])


@app.get("/api/health", response_model=schemas.HealthStatus, tags=["health"])
def health_check() -> schemas.HealthStatus:
    """Return a simple health check response."""
    return schemas.HealthStatus(status="ok", timestamp=datetime.now(timezone.utc))
