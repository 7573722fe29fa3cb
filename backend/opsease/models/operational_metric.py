"""Metric events written by the ledger, invoice and reconcile flows."""

from __future__ import annotations

import uuid

from sqlalchemy import Column, Index, JSON, Numeric, String
from sqlalchemy.dialects.sqlite import JSON as SQLiteJSON

from ..database import Base
from ..db_types import GUID, UTCDateTime, utcnow

_JSON = JSON().with_variant(SQLiteJSON(), "sqlite")


class OperationalMetricEvent(Base):
    """One outcome of a tracked operation.

    ``event_type`` is dotted (``ledger.validation_failed``,
    ``invoices.persistence_failed``, ``ledger.reconcile``) and ``outcome`` is a
    ``MetricOutcome`` value. ``tags`` holds low-cardinality labels such as the
    party or invoice type; ``details`` carries the rejection reason or run
    counters.
    """

    __tablename__ = "operational_metric_events"
    __table_args__ = (
        Index("ix_operational_metric_events_type_created", "event_type", "created_at"),
    )

    id = Column("event_id", GUID(), primary_key=True, default=uuid.uuid4)
    event_type = Column(String(120), nullable=False)
    outcome = Column(String(32), nullable=False, index=True)
    duration_ms = Column(Numeric(14, 3), nullable=True)
    tags = Column("labels", _JSON, nullable=False, default=dict)
    details = Column(_JSON, nullable=True)
    created_at = Column(UTCDateTime(), default=utcnow, nullable=False, index=True)
