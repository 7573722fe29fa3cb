from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from ..models.expense import ExpenseCategory, PaymentMethod
from .common import ApiModel, PaginatedResponse


class ExpenseBase(ApiModel):
    category: ExpenseCategory = Field(..., description="Category of the expense")
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2, description="Monetary value of the expense")
    description: str = Field(..., min_length=1, description="Detailed description of the expense")
    paid_by: Optional[str] = Field(default=None, max_length=120)
    paid_to: Optional[str] = Field(default=None, max_length=200)
    payment_method: PaymentMethod = PaymentMethod.CASH
    expense_date: date = Field(..., description="Date when the expense occurred")
    receipt_url: Optional[str] = None


class ExpenseCreate(ExpenseBase):
    """Schema used to create new expenses."""

    pass


class ExpenseUpdate(ApiModel):
    category: Optional[ExpenseCategory] = None
    amount: Optional[Decimal] = Field(default=None, gt=0, max_digits=12, decimal_places=2)
    description: Optional[str] = Field(default=None, min_length=1)
    paid_by: Optional[str] = Field(default=None, max_length=120)
    paid_to: Optional[str] = Field(default=None, max_length=200)
    payment_method: Optional[PaymentMethod] = None
    expense_date: Optional[date] = None
    receipt_url: Optional[str] = None


class ExpenseRead(ExpenseBase):
    """Schema representing stored expenses."""

    id: str
    created_at: datetime


class ExpenseListResponse(PaginatedResponse[ExpenseRead]):
    """Paginated expense listing."""
