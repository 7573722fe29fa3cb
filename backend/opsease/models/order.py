"""Sales/purchase orders and their production plans."""

from __future__ import annotations

import enum
import uuid

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    Enum as SAEnum,
    ForeignKey,
    Index,
    Integer,
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


class OrderType(str, enum.Enum):
    SALES_ORDER = "sales_order"
    PURCHASE_ORDER = "purchase_order"


class OrderStatus(str, enum.Enum):
    PLANNING = "planning"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    DELAYED = "delayed"
    CANCELLED = "cancelled"


class ProductionStage(str, enum.Enum):
    """Shop-floor stages a garment order moves through."""

    CUTTING = "cutting"
    STITCHING = "stitching"
    QUALITY_CHECK = "quality_check"
    PACKAGING = "packaging"


class ProductionStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    DELAYED = "delayed"


ORDER_TYPE_ENUM = SAEnum(
    OrderType,
    name="order_type_enum",
    values_callable=lambda enum_cls: [member.value for member in enum_cls],
    native_enum=False,
    validate_strings=True,
)

ORDER_STATUS_ENUM = SAEnum(
    OrderStatus,
    name="order_status_enum",
    values_callable=lambda enum_cls: [member.value for member in enum_cls],
    native_enum=False,
    validate_strings=True,
)

PRODUCTION_STAGE_ENUM = SAEnum(
    ProductionStage,
    name="production_stage_enum",
    values_callable=lambda enum_cls: [member.value for member in enum_cls],
    native_enum=False,
    validate_strings=True,
)

PRODUCTION_STATUS_ENUM = SAEnum(
    ProductionStatus,
    name="production_status_enum",
    values_callable=lambda enum_cls: [member.value for member in enum_cls],
    native_enum=False,
    validate_strings=True,
)


class Order(Base):
    """A customer sales order or a supplier purchase order."""

    __tablename__ = "orders"
    __table_args__ = (
        UniqueConstraint("user_id", "order_code", name="uq_orders_user_code"),
    )

    id = Column("order_id", GUID(), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(64), nullable=False)
    order_code = Column(String(50), nullable=False)
    order_type = Column(ORDER_TYPE_ENUM, nullable=False)
    customer_id = Column(
        GUID(), ForeignKey("customers.customer_id", ondelete="SET NULL"), nullable=True
    )
    supplier_id = Column(
        GUID(), ForeignKey("suppliers.supplier_id", ondelete="SET NULL"), nullable=True
    )
    party_name = Column(String(200), nullable=False)
    party_email = Column(String(200), nullable=True)
    party_phone = Column(String(40), nullable=True)
    products = Column(JSON().with_variant(SQLiteJSON(), "sqlite"), nullable=False, default=list)
    total_quantity = Column(Integer, nullable=False, default=0)
    total_value = Column(Numeric(12, 2), nullable=False, default=0)
    delivery_date = Column(Date, nullable=False)
    order_date = Column(Date, nullable=False)
    status = Column(ORDER_STATUS_ENUM, nullable=False, default=OrderStatus.PLANNING)
    notes = Column(Text, nullable=True)
    created_at = Column(UTCDateTime(), default=utcnow, nullable=False)
    updated_at = Column(UTCDateTime(), default=utcnow, onupdate=utcnow, nullable=False)

    customer = relationship("Customer", back_populates="orders")
    supplier = relationship("Supplier", back_populates="orders")
    production_plans = relationship(
        "ProductionPlan",
        back_populates="order",
        cascade="all, delete-orphan",
    )
    invoices = relationship("Invoice", back_populates="order")


class ProductionPlan(Base):
    """Target and progress of one production stage for an order."""

    __tablename__ = "production_plans"
    __table_args__ = (
        CheckConstraint("target_quantity > 0", name="ck_production_plans_target_positive"),
        CheckConstraint(
            "completed_quantity >= 0 AND completed_quantity <= target_quantity",
            name="ck_production_plans_completed_range",
        ),
    )

    id = Column("production_plan_id", GUID(), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(64), nullable=False)
    order_id = Column(
        GUID(), ForeignKey("orders.order_id", ondelete="CASCADE"), nullable=False
    )
    stage = Column(PRODUCTION_STAGE_ENUM, nullable=False)
    target_quantity = Column(Integer, nullable=False)
    completed_quantity = Column(Integer, nullable=False, default=0)
    assigned_team = Column(String(120), nullable=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    status = Column(PRODUCTION_STATUS_ENUM, nullable=False, default=ProductionStatus.PENDING)
    notes = Column(Text, nullable=True)
    created_at = Column(UTCDateTime(), default=utcnow, nullable=False)
    updated_at = Column(UTCDateTime(), default=utcnow, onupdate=utcnow, nullable=False)

    order = relationship("Order", back_populates="production_plans")


Index("orders_user_status_idx", Order.user_id, Order.status)
Index("production_plans_user_order_idx", ProductionPlan.user_id, ProductionPlan.order_id)
