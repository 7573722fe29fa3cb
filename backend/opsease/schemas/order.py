from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from ..models.order import OrderStatus, OrderType, ProductionStage, ProductionStatus
from .common import ApiModel, PaginatedResponse


class OrderProduct(ApiModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    quantity: int = Field(..., gt=0)
    unit_price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)


class OrderBase(ApiModel):
    order_code: str = Field(..., min_length=1, max_length=50, description="Business order identifier")
    order_type: OrderType
    customer_id: Optional[str] = None
    supplier_id: Optional[str] = None
    party_name: str = Field(..., min_length=1, max_length=200)
    party_email: Optional[str] = Field(default=None, max_length=200)
    party_phone: Optional[str] = Field(default=None, max_length=40)
    products: List[OrderProduct] = Field(..., min_length=1)
    delivery_date: date
    order_date: date
    status: OrderStatus = OrderStatus.PLANNING
    notes: Optional[str] = None


class OrderCreate(OrderBase):
    """Schema used to create orders; totals are derived from ``products``."""

    pass


class OrderUpdate(ApiModel):
    order_code: Optional[str] = Field(default=None, min_length=1, max_length=50)
    customer_id: Optional[str] = None
    supplier_id: Optional[str] = None
    party_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    party_email: Optional[str] = Field(default=None, max_length=200)
    party_phone: Optional[str] = Field(default=None, max_length=40)
    products: Optional[List[OrderProduct]] = Field(default=None, min_length=1)
    delivery_date: Optional[date] = None
    order_date: Optional[date] = None
    status: Optional[OrderStatus] = None
    notes: Optional[str] = None


class OrderRead(OrderBase):
    id: str
    total_quantity: int
    total_value: Decimal
    created_at: datetime
    updated_at: datetime


class OrderListResponse(PaginatedResponse[OrderRead]):
    """Paginated order listing."""


class ProductionPlanBase(ApiModel):
    order_id: str
    stage: ProductionStage
    target_quantity: int = Field(..., gt=0)
    completed_quantity: int = Field(default=0, ge=0)
    assigned_team: Optional[str] = Field(default=None, max_length=120)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: ProductionStatus = ProductionStatus.PENDING
    notes: Optional[str] = None


class ProductionPlanCreate(ProductionPlanBase):
    pass


class ProductionPlanUpdate(ApiModel):
    stage: Optional[ProductionStage] = None
    target_quantity: Optional[int] = Field(default=None, gt=0)
    completed_quantity: Optional[int] = Field(default=None, ge=0)
    assigned_team: Optional[str] = Field(default=None, max_length=120)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[ProductionStatus] = None
    notes: Optional[str] = None


class ProductionPlanRead(ProductionPlanBase):
    id: str
    created_at: datetime
    updated_at: datetime
