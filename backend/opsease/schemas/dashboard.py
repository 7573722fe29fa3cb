from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import Field

from .common import ApiModel


class DashboardStats(ApiModel):
    """Headline figures for the operations dashboard."""

    active_orders: int = Field(..., ge=0, description="Orders currently in progress")
    today_expenses: Decimal = Field(..., description="Sum of expenses dated today")
    low_stock_items: int = Field(..., ge=0)
    present_today: int = Field(..., ge=0, description="Employees marked present or late today")
    total_employees: int = Field(..., ge=0, description="Active employees")


class HealthStatus(ApiModel):
    status: str
    timestamp: datetime
