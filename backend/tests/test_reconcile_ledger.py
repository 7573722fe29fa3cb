from __future__ import annotations

from contextlib import contextmanager
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.orm import Session

from backend.opsease import models
from backend.opsease.scripts import reconcile_ledger
from backend.opsease.services.ledger import LedgerService


@pytest.fixture
def drifted_ledger(db_session: Session, monkeypatch) -> Session:
    @contextmanager
    def _scope():
        yield db_session
        db_session.commit()

    monkeypatch.setattr(reconcile_ledger, "session_scope", _scope)

    for amount, entry_date in (("100.00", date(2024, 3, 10)), ("50.00", date(2024, 3, 5))):
        LedgerService.record_entry(
            db_session,
            "user-1",
            party_name="Sharma Textiles",
            party_type="buyer",
            entry_type="debit",
            amount=amount,
            description="Back-dated",
            entry_date=entry_date,
        )
    db_session.commit()
    return db_session


def test_reconcile_reports_drift_without_changing_rows(drifted_ledger: Session):
    assert reconcile_ledger.main([]) == 1

    assert len(LedgerService.find_drift(drifted_ledger)) == 2


def test_reconcile_apply_rewrites_stored_balances(drifted_ledger: Session):
    assert reconcile_ledger.main(["--apply", "--user-id", "user-1"]) == 0

    assert LedgerService.find_drift(drifted_ledger) == []
    stored = {
        entry.entry_date: entry.balance
        for entry in drifted_ledger.query(models.LedgerEntry).all()
    }
    assert stored == {date(2024, 3, 5): Decimal("50.00"), date(2024, 3, 10): Decimal("150.00")}

    events = (
        drifted_ledger.query(models.OperationalMetricEvent)
        .filter(models.OperationalMetricEvent.event_type == "ledger.reconcile")
        .all()
    )
    assert [event.outcome for event in events] == ["success"]
    assert events[0].details == {"drifted": 2}
    assert events[0].tags == {"apply": True}


def test_reconcile_ignores_other_users(drifted_ledger: Session):
    assert reconcile_ledger.main(["--user-id", "user-2"]) == 0
