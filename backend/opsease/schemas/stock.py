from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from ..models.stock import StockCategory, StockTransactionType
from .common import ApiModel


class StockItemBase(ApiModel):
    item_name: str = Field(..., min_length=1, max_length=200)
    category: StockCategory
    current_stock: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    unit: str = Field(..., min_length=1, max_length=20, description="Unit of measure, e.g. meters or pieces")
    reorder_level: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    unit_cost: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    supplier: Optional[str] = Field(default=None, max_length=200)
    location: Optional[str] = Field(default=None, max_length=120)


class StockItemCreate(StockItemBase):
    pass


class StockItemUpdate(ApiModel):
    item_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    category: Optional[StockCategory] = None
    current_stock: Optional[Decimal] = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    unit: Optional[str] = Field(default=None, min_length=1, max_length=20)
    reorder_level: Optional[Decimal] = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    unit_cost: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    supplier: Optional[str] = Field(default=None, max_length=200)
    location: Optional[str] = Field(default=None, max_length=120)


class StockItemRead(StockItemBase):
    id: str
    created_at: datetime
    updated_at: datetime


class StockTransactionCreate(ApiModel):
    transaction_type: StockTransactionType
    quantity: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    reason: Optional[str] = None
    reference: Optional[str] = Field(default=None, max_length=100)


class StockTransactionRead(StockTransactionCreate):
    id: str
    stock_item_id: str
    created_at: datetime
