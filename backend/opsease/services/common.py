"""Helpers shared by the service layer."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

from sqlalchemy.orm import Query, Session

CENTS = Decimal("0.01")
# Largest value a Numeric(12, 2) amount column holds.
MAX_AMOUNT = Decimal("9999999999.99")


class RecordConflictError(ValueError):
    """Raised when a business key is already taken by another record of the user."""


def normalize_money(value: Decimal | int | str) -> Decimal:
    """Quantize ``value`` to cents using half-up rounding."""

    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ValueError(f"Invalid monetary amount: {value!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"Invalid monetary amount: {value!r}")
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def lock_for_update(db: Session, query: Query) -> Query:
    """Apply ``FOR UPDATE`` unless the bound engine is SQLite, which has no row locks."""

    if db.get_bind().dialect.name == "sqlite":
        return query
    return query.with_for_update()


def apply_updates(instance: Any, updates: dict[str, Any]) -> None:
    for field, value in updates.items():
        setattr(instance, field, value)
