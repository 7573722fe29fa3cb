from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from ..models.invoice import InvoiceStatus, InvoiceType
from .common import ApiModel, PaginatedResponse


class InvoiceItem(ApiModel):
    description: str = Field(..., min_length=1)
    hsn_code: Optional[str] = Field(default=None, max_length=20)
    quantity: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    rate: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)


class InvoiceItemRead(InvoiceItem):
    amount: Decimal


class InvoiceBase(ApiModel):
    invoice_type: InvoiceType = InvoiceType.SALES_INVOICE
    order_id: Optional[str] = None
    customer_id: Optional[str] = None
    supplier_id: Optional[str] = None
    buyer_name: str = Field(..., min_length=1, max_length=200, description="Counterparty named on the invoice")
    buyer_address: Optional[str] = None
    buyer_gst: Optional[str] = Field(default=None, max_length=20)
    buyer_phone: Optional[str] = Field(default=None, max_length=40)
    buyer_email: Optional[str] = Field(default=None, max_length=200)
    tax_rate: Decimal = Field(default=Decimal("0"), ge=0, le=100, max_digits=5, decimal_places=2)
    shipping_cost: Decimal = Field(default=Decimal("0"), ge=0, max_digits=10, decimal_places=2)
    discount: Decimal = Field(default=Decimal("0"), ge=0, max_digits=10, decimal_places=2)
    currency: str = Field(default="INR", min_length=3, max_length=3)
    invoice_date: date
    due_date: Optional[date] = None
    status: InvoiceStatus = InvoiceStatus.DRAFT


class InvoiceCreate(InvoiceBase):
    """Payload for issuing an invoice; totals are computed from ``items``."""

    invoice_number: Optional[str] = Field(default=None, min_length=1, max_length=50)
    items: List[InvoiceItem] = Field(..., min_length=1)


class InvoiceUpdate(ApiModel):
    buyer_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    buyer_address: Optional[str] = None
    buyer_gst: Optional[str] = Field(default=None, max_length=20)
    buyer_phone: Optional[str] = Field(default=None, max_length=40)
    buyer_email: Optional[str] = Field(default=None, max_length=200)
    items: Optional[List[InvoiceItem]] = Field(default=None, min_length=1)
    tax_rate: Optional[Decimal] = Field(default=None, ge=0, le=100, max_digits=5, decimal_places=2)
    shipping_cost: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    discount: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    invoice_date: Optional[date] = None
    due_date: Optional[date] = None
    status: Optional[InvoiceStatus] = None


class InvoiceRead(InvoiceBase):
    id: str
    invoice_number: str
    items: List[InvoiceItemRead]
    subtotal: Decimal
    tax_amount: Decimal
    total_amount: Decimal
    created_at: datetime
    updated_at: datetime


class InvoiceListResponse(PaginatedResponse[InvoiceRead]):
    """Paginated invoice listing."""
