from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from ..models.ledger_entry import EntryType, PartyType
from .common import ApiModel


class LedgerEntryBase(ApiModel):
    party_name: str = Field(..., min_length=1, max_length=200, description="Counterparty name")
    party_type: PartyType = Field(..., description="Whether the counterparty is a buyer or a supplier")
    entry_type: EntryType = Field(..., description="Direction of the movement")
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    description: str = Field(..., min_length=1)
    reference: Optional[str] = Field(default=None, max_length=100)
    entry_date: date


class LedgerEntryCreate(LedgerEntryBase):
    """Payload accepted by ``POST /api/ledger``.

    Unknown fields such as a client supplied ``balance`` are ignored.
    """

    pass


class LedgerEntryRead(LedgerEntryBase):
    id: str
    balance: Decimal
    created_at: datetime


class LedgerSummary(ApiModel):
    total_debits: Decimal
    total_credits: Decimal
    net_balance: Decimal
    entry_count: int = Field(..., ge=0)


class PartyBalance(ApiModel):
    party_name: str
    party_type: PartyType
    balance: Decimal
    last_entry_date: date
    entry_count: int = Field(..., ge=1)
