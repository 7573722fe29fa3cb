"""Buyer and supplier ledger: running balances and derived views.

Every entry contributes to its party's balance according to the party type
of that entry:

============  ==========  ============
party type    entry type  contribution
============  ==========  ============
buyer         debit       +amount
buyer         credit      -amount
supplier      debit       -amount
supplier      credit      +amount
============  ==========  ============

A buyer balance is what the buyer owes the business; a supplier balance is
what the business owes the supplier.

Balances are written when an entry is appended, but ``list_entries`` always
re-derives them from the full history in ``(entry_date, created_at)`` order
and is the authoritative source. On engines without ``SELECT ... FOR UPDATE``
(SQLite) concurrent appends for one party can persist a stale balance; see
``opsease.scripts.reconcile_ledger``.
"""

from __future__ import annotations

import logging
import uuid
from collections import OrderedDict
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from time import perf_counter
from typing import Any, Iterable, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import models, schemas
from ..db_types import utcnow
from .common import CENTS, MAX_AMOUNT, lock_for_update
from .observability import ObservabilityService

LOGGER = logging.getLogger(__name__)

ZERO = Decimal("0.00")


class LedgerValidationError(ValueError):
    """Raised when a candidate entry is malformed."""


class LedgerServiceError(RuntimeError):
    """Raised when ledger entries cannot be persisted."""


@dataclass(frozen=True)
class LedgerEntryView:
    """Read-only ledger entry carrying the re-derived running balance."""

    id: str
    user_id: str
    party_name: str
    party_type: models.PartyType
    entry_type: models.EntryType
    amount: Decimal
    description: str
    reference: Optional[str]
    entry_date: date
    balance: Decimal
    created_at: datetime


@dataclass(frozen=True)
class _Candidate:
    party_name: str
    party_type: models.PartyType
    entry_type: models.EntryType
    amount: Decimal
    description: str
    reference: Optional[str]
    entry_date: date


def signed_amount(
    party_type: models.PartyType | str,
    entry_type: models.EntryType | str,
    amount: Decimal,
) -> Decimal:
    """Return ``amount`` with the sign it contributes to the party balance."""

    party_type = models.PartyType(party_type)
    entry_type = models.EntryType(entry_type)
    if party_type == models.PartyType.BUYER:
        return amount if entry_type == models.EntryType.DEBIT else -amount
    return -amount if entry_type == models.EntryType.DEBIT else amount


def _chronological_key(entry: Any) -> tuple[date, datetime]:
    return entry.entry_date, entry.created_at


def derive_balances(entries: Iterable[models.LedgerEntry]) -> list[tuple[models.LedgerEntry, Decimal]]:
    """Pair each entry with its party's cumulative balance.

    Entries may span several parties and arrive in any order; the result is in
    ``(entry_date, created_at)`` ascending order.
    """

    running: dict[str, Decimal] = {}
    derived: list[tuple[models.LedgerEntry, Decimal]] = []
    for entry in sorted(entries, key=_chronological_key):
        balance = running.get(entry.party_name, ZERO) + signed_amount(
            entry.party_type, entry.entry_type, Decimal(entry.amount)
        )
        running[entry.party_name] = balance
        derived.append((entry, balance.quantize(CENTS)))
    return derived


def _view(entry: models.LedgerEntry, balance: Decimal) -> LedgerEntryView:
    return LedgerEntryView(
        id=entry.id,
        user_id=entry.user_id,
        party_name=entry.party_name,
        party_type=models.PartyType(entry.party_type),
        entry_type=models.EntryType(entry.entry_type),
        amount=Decimal(entry.amount),
        description=entry.description,
        reference=entry.reference,
        entry_date=entry.entry_date,
        balance=balance,
        created_at=entry.created_at,
    )


class LedgerService:
    """Appends ledger entries and serves balance views over them."""

    @staticmethod
    def _validate(
        *,
        party_name: Any,
        party_type: Any,
        entry_type: Any,
        amount: Any,
        description: Any,
        entry_date: Any,
        reference: Any = None,
    ) -> _Candidate:
        if not isinstance(party_name, str) or not party_name.strip():
            raise LedgerValidationError("Party name is required")
        try:
            party_type = models.PartyType(party_type)
        except ValueError as exc:
            raise LedgerValidationError("Party type must be 'buyer' or 'supplier'") from exc
        try:
            entry_type = models.EntryType(entry_type)
        except ValueError as exc:
            raise LedgerValidationError("Entry type must be 'debit' or 'credit'") from exc

        if amount is None or isinstance(amount, (bool, float)):
            raise LedgerValidationError("Amount must be a decimal string")
        try:
            parsed_amount = amount if isinstance(amount, Decimal) else Decimal(str(amount).strip())
        except InvalidOperation as exc:
            raise LedgerValidationError(f"Invalid amount: {amount!r}") from exc
        if not parsed_amount.is_finite() or parsed_amount <= 0:
            raise LedgerValidationError("Amount must be greater than zero")
        if parsed_amount > MAX_AMOUNT:
            raise LedgerValidationError(f"Amount cannot exceed {MAX_AMOUNT}")
        if parsed_amount != parsed_amount.quantize(CENTS):
            raise LedgerValidationError("Amount cannot have more than two decimal places")

        if isinstance(entry_date, datetime):
            entry_date = entry_date.date()
        elif isinstance(entry_date, str):
            try:
                entry_date = date.fromisoformat(entry_date)
            except ValueError as exc:
                raise LedgerValidationError(f"Invalid entry date: {entry_date!r}") from exc
        if not isinstance(entry_date, date):
            raise LedgerValidationError("Entry date is required")

        if not isinstance(description, str) or not description.strip():
            raise LedgerValidationError("Description is required")
        if reference is not None:
            reference = str(reference).strip() or None

        return _Candidate(
            party_name=party_name.strip(),
            party_type=party_type,
            entry_type=entry_type,
            amount=parsed_amount.quantize(CENTS),
            description=description.strip(),
            reference=reference,
            entry_date=entry_date,
        )

    @staticmethod
    def record_entry(
        db: Session,
        user_id: str,
        *,
        party_name: Any,
        party_type: Any,
        entry_type: Any,
        amount: Any,
        description: Any,
        entry_date: Any,
        reference: Any = None,
    ) -> models.LedgerEntry:
        """Stage a new entry in the caller's transaction without committing.

        The party's history is read (and locked where supported) and folded
        together with the candidate, so the stored balance reflects every
        earlier entry regardless of the order they were written in.
        """

        if not user_id:
            raise LedgerValidationError("User id is required")
        candidate = LedgerService._validate(
            party_name=party_name,
            party_type=party_type,
            entry_type=entry_type,
            amount=amount,
            description=description,
            entry_date=entry_date,
            reference=reference,
        )

        query = (
            db.query(models.LedgerEntry)
            .filter(
                models.LedgerEntry.user_id == user_id,
                models.LedgerEntry.party_name == candidate.party_name,
            )
            .order_by(
                models.LedgerEntry.entry_date.desc(),
                models.LedgerEntry.created_at.desc(),
            )
        )
        history = lock_for_update(db, query).all()

        balance = sum(
            (
                signed_amount(entry.party_type, entry.entry_type, Decimal(entry.amount))
                for entry in history
            ),
            ZERO,
        )
        balance += signed_amount(candidate.party_type, candidate.entry_type, candidate.amount)

        created_at = utcnow()
        if history:
            latest_created = max(entry.created_at for entry in history)
            if created_at <= latest_created:
                created_at = latest_created + timedelta(microseconds=1)

        entry = models.LedgerEntry(
            id=str(uuid.uuid4()),
            user_id=user_id,
            party_name=candidate.party_name,
            party_type=candidate.party_type,
            entry_type=candidate.entry_type,
            amount=candidate.amount,
            description=candidate.description,
            reference=candidate.reference,
            entry_date=candidate.entry_date,
            balance=balance.quantize(CENTS),
            created_at=created_at,
        )
        db.add(entry)
        db.flush()
        LOGGER.debug(
            "Staged ledger entry %s for %s (%s %s %s), balance %s",
            entry.id,
            candidate.party_name,
            candidate.party_type.value,
            candidate.entry_type.value,
            candidate.amount,
            entry.balance,
        )
        return entry

    @staticmethod
    def append_entry(
        db: Session,
        user_id: str,
        data: schemas.LedgerEntryCreate,
    ) -> models.LedgerEntry:
        """Validate, balance and persist a single ledger entry."""

        start = perf_counter()
        tags = {"party_type": str(getattr(data.party_type, "value", data.party_type))}
        try:
            entry = LedgerService.record_entry(
                db,
                user_id,
                party_name=data.party_name,
                party_type=data.party_type,
                entry_type=data.entry_type,
                amount=data.amount,
                description=data.description,
                entry_date=data.entry_date,
                reference=data.reference,
            )
            db.commit()
        except LedgerValidationError as exc:
            ObservabilityService.record_rejection(
                db, "ledger.validation_failed", exc, started_at=start, tags=tags
            )
            raise
        except SQLAlchemyError as exc:
            db.rollback()
            LOGGER.exception("Failed to persist ledger entry for user %s", user_id)
            ObservabilityService.record_failure(
                db, "ledger.persistence_failed", exc, started_at=start, tags=tags
            )
            raise LedgerServiceError("Unable to record ledger entry at this time.") from exc
        db.refresh(entry)
        return entry

    @staticmethod
    def list_entries(
        db: Session,
        user_id: str,
        party_name: Optional[str] = None,
    ) -> list[LedgerEntryView]:
        """Return the user's entries, newest first, with re-derived balances.

        Stored balances are not consulted and the session is not modified.
        """

        query = db.query(models.LedgerEntry).filter(models.LedgerEntry.user_id == user_id)
        if party_name is not None:
            query = query.filter(models.LedgerEntry.party_name == party_name)
        entries = query.order_by(
            models.LedgerEntry.entry_date.asc(),
            models.LedgerEntry.created_at.asc(),
        ).all()

        views = [_view(entry, balance) for entry, balance in derive_balances(entries)]
        views.sort(key=_chronological_key, reverse=True)
        return views

    @staticmethod
    def filter_entries(
        entries: Iterable[LedgerEntryView],
        *,
        search: Optional[str] = None,
        party_type: Optional[models.PartyType] = None,
    ) -> list[LedgerEntryView]:
        """Apply the ledger screen filters to already derived entries."""

        needle = search.strip().lower() if search and search.strip() else None
        selected = []
        for entry in entries:
            if party_type is not None and entry.party_type != party_type:
                continue
            if needle is not None:
                haystacks = (entry.party_name, entry.description, entry.reference or "")
                if not any(needle in value.lower() for value in haystacks):
                    continue
            selected.append(entry)
        return selected

    @staticmethod
    def summarize(entries: Sequence[LedgerEntryView]) -> schemas.LedgerSummary:
        total_debits = sum(
            (entry.amount for entry in entries if entry.entry_type == models.EntryType.DEBIT),
            ZERO,
        )
        total_credits = sum(
            (entry.amount for entry in entries if entry.entry_type == models.EntryType.CREDIT),
            ZERO,
        )
        return schemas.LedgerSummary(
            total_debits=total_debits.quantize(CENTS),
            total_credits=total_credits.quantize(CENTS),
            net_balance=(total_credits - total_debits).quantize(CENTS),
            entry_count=len(entries),
        )

    @staticmethod
    def party_balances(
        db: Session,
        user_id: str,
        party_type: Optional[models.PartyType] = None,
    ) -> list[schemas.PartyBalance]:
        """Return one balance per party, taken from its most recent entry.

        A party is classified by the party type of its latest entry.
        """

        latest: "OrderedDict[str, LedgerEntryView]" = OrderedDict()
        counts: dict[str, int] = {}
        # Newest first, so the first entry seen for a party is its latest.
        for entry in LedgerService.list_entries(db, user_id):
            counts[entry.party_name] = counts.get(entry.party_name, 0) + 1
            latest.setdefault(entry.party_name, entry)

        balances = []
        for name in sorted(latest):
            entry = latest[name]
            if party_type is not None and entry.party_type != party_type:
                continue
            balances.append(
                schemas.PartyBalance(
                    party_name=name,
                    party_type=entry.party_type,
                    balance=entry.balance,
                    last_entry_date=entry.entry_date,
                    entry_count=counts[name],
                )
            )
        return balances

    @staticmethod
    def find_drift(
        db: Session,
        user_id: Optional[str] = None,
    ) -> list[tuple[models.LedgerEntry, Decimal]]:
        """Return stored entries whose balance differs from the re-derived one."""

        query = db.query(models.LedgerEntry)
        if user_id is not None:
            query = query.filter(models.LedgerEntry.user_id == user_id)
        by_owner: dict[str, list[models.LedgerEntry]] = {}
        for entry in query.all():
            by_owner.setdefault(entry.user_id, []).append(entry)

        drifted = []
        for owner in sorted(by_owner):
            for entry, balance in derive_balances(by_owner[owner]):
                if Decimal(entry.balance) != balance:
                    drifted.append((entry, balance))
        return drifted
