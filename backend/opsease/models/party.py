"""Customer and supplier master records."""

from __future__ import annotations

import uuid

from sqlalchemy import (
    Boolean,
    Column,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from ..database import Base
from ..db_types import GUID, UTCDateTime, utcnow


class Customer(Base):
    """A buyer the business sells to."""

    __tablename__ = "customers"
    __table_args__ = (
        UniqueConstraint("user_id", "customer_code", name="uq_customers_user_code"),
    )

    id = Column("customer_id", GUID(), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(64), nullable=False, index=True)
    customer_code = Column(String(50), nullable=False)
    company_name = Column(String(200), nullable=False)
    contact_person = Column(String(120), nullable=True)
    email = Column(String(200), nullable=True)
    phone = Column(String(40), nullable=True)
    gst_number = Column(String(20), nullable=True)
    address = Column(Text, nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    country = Column(String(100), nullable=False, default="India", server_default="India")
    pincode = Column(String(12), nullable=True)
    payment_terms = Column(Integer, nullable=False, default=30, server_default="30")
    credit_limit = Column(Numeric(12, 2), nullable=False, default=0, server_default="0")
    is_active = Column(Boolean, nullable=False, default=True, server_default="1")
    created_at = Column(UTCDateTime(), default=utcnow, nullable=False)
    updated_at = Column(UTCDateTime(), default=utcnow, onupdate=utcnow, nullable=False)

    orders = relationship("Order", back_populates="customer")
    invoices = relationship("Invoice", back_populates="customer")


class Supplier(Base):
    """A vendor the business buys materials or services from."""

    __tablename__ = "suppliers"
    __table_args__ = (
        UniqueConstraint("user_id", "supplier_code", name="uq_suppliers_user_code"),
    )

    id = Column("supplier_id", GUID(), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(64), nullable=False, index=True)
    supplier_code = Column(String(50), nullable=False)
    company_name = Column(String(200), nullable=False)
    contact_person = Column(String(120), nullable=True)
    email = Column(String(200), nullable=True)
    phone = Column(String(40), nullable=True)
    gst_number = Column(String(20), nullable=True)
    address = Column(Text, nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    country = Column(String(100), nullable=False, default="India", server_default="India")
    pincode = Column(String(12), nullable=True)
    payment_terms = Column(Integer, nullable=False, default=30, server_default="30")
    category = Column(String(100), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, server_default="1")
    created_at = Column(UTCDateTime(), default=utcnow, nullable=False)
    updated_at = Column(UTCDateTime(), default=utcnow, onupdate=utcnow, nullable=False)

    orders = relationship("Order", back_populates="supplier")
    invoices = relationship("Invoice", back_populates="supplier")
