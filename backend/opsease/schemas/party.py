from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from .common import ApiModel, PaginatedResponse


class PartyBase(ApiModel):
    company_name: str = Field(..., min_length=1, max_length=200)
    contact_person: Optional[str] = Field(default=None, max_length=120)
    email: Optional[str] = Field(default=None, max_length=200)
    phone: Optional[str] = Field(default=None, max_length=40)
    gst_number: Optional[str] = Field(default=None, max_length=20)
    address: Optional[str] = None
    city: Optional[str] = Field(default=None, max_length=100)
    state: Optional[str] = Field(default=None, max_length=100)
    country: str = Field(default="India", max_length=100)
    pincode: Optional[str] = Field(default=None, max_length=12)
    payment_terms: int = Field(default=30, ge=0, description="Payment terms in days")
    is_active: bool = True


class PartyUpdate(ApiModel):
    company_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    contact_person: Optional[str] = Field(default=None, max_length=120)
    email: Optional[str] = Field(default=None, max_length=200)
    phone: Optional[str] = Field(default=None, max_length=40)
    gst_number: Optional[str] = Field(default=None, max_length=20)
    address: Optional[str] = None
    city: Optional[str] = Field(default=None, max_length=100)
    state: Optional[str] = Field(default=None, max_length=100)
    country: Optional[str] = Field(default=None, max_length=100)
    pincode: Optional[str] = Field(default=None, max_length=12)
    payment_terms: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None


class CustomerBase(PartyBase):
    customer_code: str = Field(..., min_length=1, max_length=50)
    credit_limit: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)


class CustomerCreate(CustomerBase):
    """Schema used to create customers."""

    pass


class CustomerUpdate(PartyUpdate):
    customer_code: Optional[str] = Field(default=None, min_length=1, max_length=50)
    credit_limit: Optional[Decimal] = Field(default=None, ge=0, max_digits=12, decimal_places=2)


class CustomerRead(CustomerBase):
    id: str
    created_at: datetime
    updated_at: datetime


class CustomerListResponse(PaginatedResponse[CustomerRead]):
    """Paginated customer listing."""


class SupplierBase(PartyBase):
    supplier_code: str = Field(..., min_length=1, max_length=50)
    category: Optional[str] = Field(default=None, max_length=100)


class SupplierCreate(SupplierBase):
    """Schema used to create suppliers."""

    pass


class SupplierUpdate(PartyUpdate):
    supplier_code: Optional[str] = Field(default=None, min_length=1, max_length=50)
    category: Optional[str] = Field(default=None, max_length=100)


class SupplierRead(SupplierBase):
    id: str
    created_at: datetime
    updated_at: datetime


class SupplierListResponse(PaginatedResponse[SupplierRead]):
    """Paginated supplier listing."""
