"""Operational metrics for ledger postings, invoices and reconciliation runs."""

from __future__ import annotations

import enum
import logging
from contextlib import contextmanager
from decimal import Decimal
from time import perf_counter
from typing import Any, Iterator, Optional

from sqlalchemy.orm import Session

from .. import models

LOGGER = logging.getLogger(__name__)


class MetricOutcome(str, enum.Enum):
    SUCCESS = "success"
    REJECTED = "rejected"
    ERROR = "error"


def _elapsed_ms(started_at: Optional[float]) -> Optional[Decimal]:
    if started_at is None:
        return None
    return Decimal(str(round((perf_counter() - started_at) * 1000, 3)))


class ObservabilityService:
    """Writes ``OperationalMetricEvent`` rows outside the caller's transaction.

    Rejections (bad input the user can fix) and errors (persistence failures)
    are kept apart so alerting can ignore the former.
    """

    @staticmethod
    def record_event(
        db: Session,
        event_type: str,
        outcome: MetricOutcome,
        *,
        started_at: Optional[float] = None,
        tags: Optional[dict[str, Any]] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        event = models.OperationalMetricEvent(
            event_type=event_type,
            outcome=MetricOutcome(outcome).value,
            duration_ms=_elapsed_ms(started_at),
            tags=tags or {},
            details=details or None,
        )
        ObservabilityService._persist(db, event)

    @staticmethod
    def record_rejection(
        db: Session,
        event_type: str,
        exc: Exception,
        *,
        started_at: Optional[float] = None,
        tags: Optional[dict[str, Any]] = None,
    ) -> None:
        ObservabilityService.record_event(
            db,
            event_type,
            MetricOutcome.REJECTED,
            started_at=started_at,
            tags={"reason": str(exc), **(tags or {})},
            details={"rejection_reason": str(exc)},
        )

    @staticmethod
    def record_failure(
        db: Session,
        event_type: str,
        exc: Exception,
        *,
        started_at: Optional[float] = None,
        tags: Optional[dict[str, Any]] = None,
    ) -> None:
        ObservabilityService.record_event(
            db,
            event_type,
            MetricOutcome.ERROR,
            started_at=started_at,
            tags=tags,
            details={"error": exc.__class__.__name__, "message": str(exc)},
        )

    @staticmethod
    @contextmanager
    def timed_event(
        db: Session, event_type: str, *, tags: Optional[dict[str, Any]] = None
    ) -> Iterator[dict[str, Any]]:
        """Time the block and record its outcome.

        The yielded dict is stored as the event details, so callers can attach
        counters such as the number of repaired entries.
        """

        started_at = perf_counter()
        details: dict[str, Any] = {}
        try:
            yield details
        except Exception as exc:
            details["exception"] = str(exc)
            ObservabilityService.record_event(
                db,
                event_type,
                MetricOutcome.ERROR,
                started_at=started_at,
                tags=tags,
                details=details,
            )
            raise
        ObservabilityService.record_event(
            db,
            event_type,
            MetricOutcome.SUCCESS,
            started_at=started_at,
            tags=tags,
            details=details,
        )

    @staticmethod
    def _persist(db: Session, event: models.OperationalMetricEvent) -> None:
        # Own session: the caller's transaction may already be rolled back.
        try:
            with Session(bind=db.get_bind()) as metrics_session:
                metrics_session.add(event)
                metrics_session.commit()
        except Exception:  # pragma: no cover - a lost metric must not fail the request
            LOGGER.exception("Failed to persist %s metric event", event.event_type)
