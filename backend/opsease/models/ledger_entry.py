"""Buyer and supplier ledger entries."""

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


class PartyType(str, enum.Enum):
    """Counterparty kinds; they decide the sign of each movement."""

    BUYER = "buyer"
    SUPPLIER = "supplier"


class EntryType(str, enum.Enum):
    """Direction of a ledger movement."""

    DEBIT = "debit"
    CREDIT = "credit"


PARTY_TYPE_ENUM = SAEnum(
    PartyType,
    name="ledger_party_type_enum",
    values_callable=lambda enum_cls: [member.value for member in enum_cls],
    native_enum=False,
    validate_strings=True,
)

ENTRY_TYPE_ENUM = SAEnum(
    EntryType,
    name="ledger_entry_type_enum",
    values_callable=lambda enum_cls: [member.value for member in enum_cls],
    native_enum=False,
    validate_strings=True,
)


class LedgerEntry(Base):
    """A single financial movement between the business and a counterparty.

    ``balance`` is the party's running balance as of and including this entry,
    computed when the row is written. Listings re-derive it from the full
    history, so the stored value is advisory.
    """

    __tablename__ = "ledger_entries"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_ledger_entries_amount_positive"),
    )

    id = Column("ledger_entry_id", GUID(), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(64), nullable=False)
    party_name = Column(String(200), nullable=False)
    party_type = Column(PARTY_TYPE_ENUM, nullable=False)
    entry_type = Column(ENTRY_TYPE_ENUM, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(Text, nullable=False)
    reference = Column(String(100), nullable=True)
    entry_date = Column(Date, nullable=False)
    balance = Column(Numeric(14, 2), nullable=False)
    created_at = Column(UTCDateTime(), default=utcnow, nullable=False)


Index(
    "ledger_entries_user_party_date_idx",
    LedgerEntry.user_id,
    LedgerEntry.party_name,
    LedgerEntry.entry_date,
    LedgerEntry.created_at,
)
Index("ledger_entries_reference_idx", LedgerEntry.user_id, LedgerEntry.reference)
