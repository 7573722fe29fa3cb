"""GST invoices issued to buyers or received from suppliers."""

from __future__ import annotations

import enum
import uuid

from sqlalchemy import (
    Column,
    Date,
    Enum as SAEnum,
    ForeignKey,
    Index,
    JSON,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.sqlite import JSON as SQLiteJSON
from sqlalchemy.orm import relationship

from ..database import Base
from ..db_types import GUID, UTCDateTime, utcnow


class InvoiceType(str, enum.Enum):
    SALES_INVOICE = "sales_invoice"
    PURCHASE_INVOICE = "purchase_invoice"


class InvoiceStatus(str, enum.Enum):
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"


INVOICE_TYPE_ENUM = SAEnum(
    InvoiceType,
    name="invoice_type_enum",
    values_callable=lambda enum_cls: [member.value for member in enum_cls],
    native_enum=False,
    validate_strings=True,
)

INVOICE_STATUS_ENUM = SAEnum(
    InvoiceStatus,
    name="invoice_status_enum",
    values_callable=lambda enum_cls: [member.value for member in enum_cls],
    native_enum=False,
    validate_strings=True,
)


class Invoice(Base):
    """An invoice and its computed totals.

    ``buyer_name`` names the counterparty for both invoice types and is the
    party name used for the ledger entries the invoice generates.
    """

    __tablename__ = "invoices"
    __table_args__ = (
        UniqueConstraint("user_id", "invoice_number", name="uq_invoices_user_number"),
    )

    id = Column("invoice_id", GUID(), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(64), nullable=False)
    invoice_number = Column(String(50), nullable=False)
    invoice_type = Column(INVOICE_TYPE_ENUM, nullable=False, default=InvoiceType.SALES_INVOICE)
    order_id = Column(GUID(), ForeignKey("orders.order_id", ondelete="SET NULL"), nullable=True)
    customer_id = Column(
        GUID(), ForeignKey("customers.customer_id", ondelete="SET NULL"), nullable=True
    )
    supplier_id = Column(
        GUID(), ForeignKey("suppliers.supplier_id", ondelete="SET NULL"), nullable=True
    )
    buyer_name = Column(String(200), nullable=False)
    buyer_address = Column(Text, nullable=True)
    buyer_gst = Column(String(20), nullable=True)
    buyer_phone = Column(String(40), nullable=True)
    buyer_email = Column(String(200), nullable=True)
    items = Column(JSON().with_variant(SQLiteJSON(), "sqlite"), nullable=False, default=list)
    subtotal = Column(Numeric(12, 2), nullable=False)
    tax_rate = Column(Numeric(5, 2), nullable=False, default=0)
    tax_amount = Column(Numeric(12, 2), nullable=False, default=0)
    shipping_cost = Column(Numeric(10, 2), nullable=False, default=0)
    discount = Column(Numeric(10, 2), nullable=False, default=0)
    total_amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="INR")
    invoice_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=True)
    status = Column(INVOICE_STATUS_ENUM, nullable=False, default=InvoiceStatus.DRAFT)
    created_at = Column(UTCDateTime(), default=utcnow, nullable=False)
    updated_at = Column(UTCDateTime(), default=utcnow, onupdate=utcnow, nullable=False)

    order = relationship("Order", back_populates="invoices")
    customer = relationship("Customer", back_populates="invoices")
    supplier = relationship("Supplier", back_populates="invoices")


Index("invoices_user_status_idx", Invoice.user_id, Invoice.status)
