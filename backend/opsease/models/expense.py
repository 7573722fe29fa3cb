"""SQLAlchemy model definitions for operating expenses."""

from __future__ import annotations

import enum
import uuid

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    Enum as SAEnum,
    Index,
    Numeric,
    String,
    Text,
)

from ..database import Base
from ..db_types import GUID, UTCDateTime, utcnow


class ExpenseCategory(str, enum.Enum):
    """Reporting buckets for operating expenses."""

    RAW_MATERIALS = "raw_materials"
    WAGES = "wages"
    UTILITIES = "utilities"
    MAINTENANCE = "maintenance"
    TRANSPORTATION = "transportation"
    OTHER = "other"


class PaymentMethod(str, enum.Enum):
    CASH = "cash"
    BANK_TRANSFER = "bank_transfer"
    CHEQUE = "cheque"


EXPENSE_CATEGORY_ENUM = SAEnum(
    ExpenseCategory,
    name="expense_category_enum",
    values_callable=lambda enum_cls: [member.value for member in enum_cls],
    native_enum=False,
    validate_strings=True,
)

EXPENSE_PAYMENT_METHOD_ENUM = SAEnum(
    PaymentMethod,
    name="expense_payment_method_enum",
    values_callable=lambda enum_cls: [member.value for member in enum_cls],
    native_enum=False,
    validate_strings=True,
)


class Expense(Base):
    """Represents a single operating expense paid by the business."""

    __tablename__ = "expenses"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_expenses_amount_positive"),
    )

    id = Column("expense_id", GUID(), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(64), nullable=False)
    category = Column(EXPENSE_CATEGORY_ENUM, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(Text, nullable=False)
    paid_by = Column(String(120), nullable=True)
    paid_to = Column(String(200), nullable=True)
    payment_method = Column(EXPENSE_PAYMENT_METHOD_ENUM, nullable=False, default=PaymentMethod.CASH)
    expense_date = Column(Date, nullable=False)
    receipt_url = Column(String, nullable=True)
    created_at = Column(UTCDateTime(), default=utcnow, nullable=False)
    updated_at = Column(UTCDateTime(), default=utcnow, onupdate=utcnow, nullable=False)


Index("expenses_user_date_idx", Expense.user_id, Expense.expense_date)
Index("expenses_user_category_idx", Expense.user_id, Expense.category)
