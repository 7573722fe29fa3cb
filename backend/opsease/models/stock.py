"""Raw material and finished goods stock with its movement history."""

from __future__ import annotations

import enum
import uuid

from sqlalchemy import (
    CheckConstraint,
    Column,
    Enum as SAEnum,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from ..database import Base
from ..db_types import GUID, UTCDateTime, utcnow


class StockCategory(str, enum.Enum):
    RAW_MATERIALS = "raw_materials"
    FINISHED_GOODS = "finished_goods"
    ACCESSORIES = "accessories"


class StockTransactionType(str, enum.Enum):
    """Direction of a stock movement."""

    IN = "in"
    OUT = "out"


STOCK_CATEGORY_ENUM = SAEnum(
    StockCategory,
    name="stock_category_enum",
    values_callable=lambda enum_cls: [member.value for member in enum_cls],
    native_enum=False,
    validate_strings=True,
)

STOCK_TRANSACTION_TYPE_ENUM = SAEnum(
    StockTransactionType,
    name="stock_transaction_type_enum",
    values_callable=lambda enum_cls: [member.value for member in enum_cls],
    native_enum=False,
    validate_strings=True,
)


class StockItem(Base):
    """A stocked material or product and its quantity on hand."""

    __tablename__ = "stock_items"
    __table_args__ = (
        CheckConstraint("current_stock >= 0", name="ck_stock_items_current_non_negative"),
        CheckConstraint("reorder_level >= 0", name="ck_stock_items_reorder_non_negative"),
    )

    id = Column("stock_item_id", GUID(), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(64), nullable=False)
    item_name = Column(String(200), nullable=False)
    category = Column(STOCK_CATEGORY_ENUM, nullable=False)
    current_stock = Column(Numeric(12, 2), nullable=False, default=0)
    unit = Column(String(20), nullable=False)
    reorder_level = Column(Numeric(12, 2), nullable=False, default=0)
    unit_cost = Column(Numeric(10, 2), nullable=True)
    supplier = Column(String(200), nullable=True)
    location = Column(String(120), nullable=True)
    created_at = Column(UTCDateTime(), default=utcnow, nullable=False)
    updated_at = Column(UTCDateTime(), default=utcnow, onupdate=utcnow, nullable=False)

    transactions = relationship(
        "StockTransaction",
        back_populates="stock_item",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="StockTransaction.created_at",
    )


class StockTransaction(Base):
    """Records a quantity moving into or out of a stock item."""

    __tablename__ = "stock_transactions"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_stock_transactions_quantity_positive"),
    )

    id = Column("stock_transaction_id", GUID(), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(64), nullable=False)
    stock_item_id = Column(
        GUID(), ForeignKey("stock_items.stock_item_id", ondelete="CASCADE"), nullable=False
    )
    transaction_type = Column(STOCK_TRANSACTION_TYPE_ENUM, nullable=False)
    quantity = Column(Numeric(12, 2), nullable=False)
    reason = Column(Text, nullable=True)
    reference = Column(String(100), nullable=True)
    created_at = Column(UTCDateTime(), default=utcnow, nullable=False)

    stock_item = relationship("StockItem", back_populates="transactions")


Index("stock_items_user_name_idx", StockItem.user_id, StockItem.item_name)
Index("stock_transactions_item_idx", StockTransaction.stock_item_id, StockTransaction.created_at)
