from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.orm import Session

from backend.opsease import models
from backend.opsease.services.ledger import (
    LedgerService,
    LedgerValidationError,
    derive_balances,
    signed_amount,
)


def _record(db: Session, user_id: str = "user-1", **overrides) -> models.LedgerEntry:
    payload = {
        "party_name": "Sharma Textiles",
        "party_type": models.PartyType.BUYER,
        "entry_type": models.EntryType.DEBIT,
        "amount": Decimal("1000.00"),
        "description": "Opening balance",
        "entry_date": date(2024, 1, 10),
    }
    payload.update(overrides)
    entry = LedgerService.record_entry(db, user_id, **payload)
    db.commit()
    return entry


@pytest.mark.parametrize(
    ("party_type", "entry_type", "expected"),
    [
        ("buyer", "debit", Decimal("10.00")),
        ("buyer", "credit", Decimal("-10.00")),
        ("supplier", "debit", Decimal("-10.00")),
        ("supplier", "credit", Decimal("10.00")),
    ],
)
def test_signed_amount_follows_party_and_entry_type(party_type, entry_type, expected):
    assert signed_amount(party_type, entry_type, Decimal("10.00")) == expected


def test_buyer_balance_accumulates_debits_and_credits(db_session: Session):
    first = _record(db_session)
    second = _record(
        db_session,
        entry_type=models.EntryType.CREDIT,
        amount=Decimal("300.00"),
        description="Part payment",
        entry_date=date(2024, 1, 15),
    )

    assert first.balance == Decimal("1000.00")
    assert second.balance == Decimal("700.00")


def test_supplier_balance_grows_with_credits(db_session: Session):
    _record(
        db_session,
        party_name="Fabric Mills",
        party_type=models.PartyType.SUPPLIER,
        entry_type=models.EntryType.CREDIT,
        amount=Decimal("2500.00"),
        description="Purchase invoice",
    )
    payment = _record(
        db_session,
        party_name="Fabric Mills",
        party_type=models.PartyType.SUPPLIER,
        entry_type=models.EntryType.DEBIT,
        amount=Decimal("1000.00"),
        description="Payment made",
        entry_date=date(2024, 1, 20),
    )

    assert payment.balance == Decimal("1500.00")


def test_balances_are_tracked_per_party(db_session: Session):
    _record(db_session, party_name="Alpha Exports", amount=Decimal("100.00"))
    entry = _record(db_session, party_name="Beta Garments", amount=Decimal("40.00"))

    assert entry.balance == Decimal("40.00")


def test_party_name_is_trimmed_before_matching(db_session: Session):
    _record(db_session, party_name="Sharma Textiles")
    entry = _record(db_session, party_name="  Sharma Textiles  ", amount=Decimal("5.00"))

    assert entry.party_name == "Sharma Textiles"
    assert entry.balance == Decimal("1005.00")


def test_latest_balance_equals_sum_of_signed_amounts(db_session: Session):
    movements = [
        ("debit", "1200.50", date(2024, 2, 1)),
        ("credit", "200.25", date(2024, 2, 3)),
        ("debit", "99.75", date(2024, 2, 3)),
        ("credit", "1000.00", date(2024, 2, 9)),
    ]
    for entry_type, amount, entry_date in movements:
        _record(
            db_session,
            entry_type=entry_type,
            amount=amount,
            entry_date=entry_date,
            description=f"{entry_type} {amount}",
        )

    expected = sum(
        (signed_amount("buyer", entry_type, Decimal(amount)) for entry_type, amount, _ in movements),
        Decimal("0"),
    )
    newest = LedgerService.list_entries(db_session, "user-1", "Sharma Textiles")[0]
    assert newest.balance == expected == Decimal("100.00")


def test_same_day_entries_are_ordered_by_creation(db_session: Session):
    first = _record(db_session, amount=Decimal("10.00"), description="first")
    second = _record(db_session, amount=Decimal("20.00"), description="second")
    third = _record(db_session, amount=Decimal("30.00"), description="third")

    assert first.created_at < second.created_at < third.created_at

    listed = LedgerService.list_entries(db_session, "user-1")
    assert [entry.description for entry in listed] == ["third", "second", "first"]
    assert [entry.balance for entry in listed] == [
        Decimal("60.00"),
        Decimal("30.00"),
        Decimal("10.00"),
    ]


def test_back_dated_entry_is_placed_by_entry_date_when_listing(db_session: Session):
    _record(db_session, amount=Decimal("100.00"), entry_date=date(2024, 3, 10), description="later")
    _record(db_session, amount=Decimal("50.00"), entry_date=date(2024, 3, 5), description="earlier")

    listed = LedgerService.list_entries(db_session, "user-1")

    assert [(entry.description, entry.balance) for entry in listed] == [
        ("later", Decimal("150.00")),
        ("earlier", Decimal("50.00")),
    ]


def test_listing_does_not_modify_stored_balances(db_session: Session):
    later = _record(db_session, amount=Decimal("100.00"), entry_date=date(2024, 3, 10))
    _record(db_session, amount=Decimal("50.00"), entry_date=date(2024, 3, 5))

    LedgerService.list_entries(db_session, "user-1")

    assert not db_session.dirty
    db_session.expire_all()
    assert db_session.get(models.LedgerEntry, later.id).balance == Decimal("100.00")


def test_entries_are_isolated_per_user(db_session: Session):
    _record(db_session, user_id="user-1", amount=Decimal("500.00"))
    other = _record(db_session, user_id="user-2", amount=Decimal("70.00"))

    assert other.balance == Decimal("70.00")
    assert [entry.user_id for entry in LedgerService.list_entries(db_session, "user-2")] == [
        "user-2"
    ]


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"party_name": "   "}, "Party name is required"),
        ({"party_type": "vendor"}, "Party type"),
        ({"entry_type": "transfer"}, "Entry type"),
        ({"amount": Decimal("0")}, "greater than zero"),
        ({"amount": "-5.00"}, "greater than zero"),
        ({"amount": 10.5}, "decimal string"),
        ({"amount": "ten"}, "Invalid amount"),
        ({"amount": "1.005"}, "two decimal places"),
        ({"amount": "10000000000.00"}, "cannot exceed"),
        ({"amount": Decimal("1e30")}, "cannot exceed"),
        ({"description": " "}, "Description is required"),
        ({"entry_date": "2024-13-40"}, "Invalid entry date"),
    ],
)
def test_record_entry_rejects_malformed_candidates(db_session: Session, overrides, message):
    with pytest.raises(LedgerValidationError, match=message):
        _record(db_session, **overrides)

    assert db_session.query(models.LedgerEntry).count() == 0


def test_append_entry_records_rejections_as_metrics(db_session: Session):
    from backend.opsease import schemas

    payload = schemas.LedgerEntryCreate(
        party_name="   ",
        party_type="buyer",
        entry_type="debit",
        amount=Decimal("10.00"),
        description="Whitespace party",
        entry_date=date(2024, 1, 1),
    )

    with pytest.raises(LedgerValidationError):
        LedgerService.append_entry(db_session, "user-1", payload)

    events = (
        db_session.query(models.OperationalMetricEvent)
        .filter(models.OperationalMetricEvent.event_type == "ledger.validation_failed")
        .all()
    )
    assert len(events) == 1
    assert events[0].outcome == "rejected"


def test_summary_nets_credits_against_debits(db_session: Session):
    for entry_type, amount in (("credit", "900.00"), ("debit", "400.00"), ("credit", "100.00")):
        _record(
            db_session,
            party_name="Fabric Mills",
            party_type="supplier",
            entry_type=entry_type,
            amount=amount,
        )

    entries = LedgerService.list_entries(db_session, "user-1")
    summary = LedgerService.summarize(entries)

    assert summary.total_debits == Decimal("400.00")
    assert summary.total_credits == Decimal("1000.00")
    assert summary.net_balance == Decimal("600.00")
    assert summary.net_balance == entries[0].balance
    assert summary.entry_count == 3


def test_filter_entries_matches_reference_and_party_type(db_session: Session):
    _record(db_session, reference="SI12345678")
    _record(db_session, party_name="Fabric Mills", party_type="supplier", entry_type="credit")

    entries = LedgerService.list_entries(db_session, "user-1")

    by_reference = LedgerService.filter_entries(entries, search="si1234")
    assert [entry.reference for entry in by_reference] == ["SI12345678"]

    suppliers = LedgerService.filter_entries(entries, party_type=models.PartyType.SUPPLIER)
    assert [entry.party_name for entry in suppliers] == ["Fabric Mills"]


def test_party_balances_use_latest_entry(db_session: Session):
    _record(db_session, party_name="Zenith Apparel", amount=Decimal("300.00"))
    _record(
        db_session,
        party_name="Zenith Apparel",
        entry_type="credit",
        amount=Decimal("100.00"),
        entry_date=date(2024, 1, 12),
    )
    _record(
        db_session,
        party_name="Anand Yarns",
        party_type="supplier",
        entry_type="credit",
        amount=Decimal("80.00"),
    )

    balances = LedgerService.party_balances(db_session, "user-1")

    assert [(row.party_name, row.balance, row.entry_count) for row in balances] == [
        ("Anand Yarns", Decimal("80.00"), 1),
        ("Zenith Apparel", Decimal("200.00"), 2),
    ]
    buyers = LedgerService.party_balances(db_session, "user-1", models.PartyType.BUYER)
    assert [row.party_name for row in buyers] == ["Zenith Apparel"]
    assert buyers[0].last_entry_date == date(2024, 1, 12)


def test_find_drift_reports_stale_stored_balances(db_session: Session):
    _record(db_session, amount=Decimal("100.00"), entry_date=date(2024, 3, 10))
    assert LedgerService.find_drift(db_session) == []

    _record(db_session, amount=Decimal("50.00"), entry_date=date(2024, 3, 5))

    drifted = {entry.entry_date: derived for entry, derived in LedgerService.find_drift(db_session)}
    assert drifted == {
        date(2024, 3, 5): Decimal("50.00"),
        date(2024, 3, 10): Decimal("150.00"),
    }


def test_derive_balances_accepts_unsorted_input(db_session: Session):
    first = _record(db_session, amount=Decimal("10.00"), entry_date=date(2024, 1, 1))
    second = _record(db_session, amount=Decimal("5.00"), entry_date=date(2024, 1, 2))

    derived = derive_balances([second, first])

    assert [(entry.id, balance) for entry, balance in derived] == [
        (first.id, Decimal("10.00")),
        (second.id, Decimal("15.00")),
    ]


@pytest.mark.parametrize(
    ("party_type", "expected"),
    [
        ("buyer", [Decimal("1000.00"), Decimal("600.00")]),
        ("supplier", [Decimal("-1000.00"), Decimal("-600.00")]),
    ],
)
def test_debit_then_credit_balances_by_party_type(db_session: Session, party_type, expected):
    _record(db_session, party_type=party_type, entry_type="debit", amount="1000.00")
    _record(
        db_session,
        party_type=party_type,
        entry_type="credit",
        amount="400.00",
        entry_date=date(2024, 1, 11),
    )

    listed = LedgerService.list_entries(db_session, "user-1", "Sharma Textiles")

    assert [entry.balance for entry in reversed(listed)] == expected


def test_listing_twice_returns_identical_results(db_session: Session):
    _record(db_session, amount=Decimal("100.00"), entry_date=date(2024, 3, 10))
    _record(db_session, amount=Decimal("50.00"), entry_date=date(2024, 3, 5))

    assert LedgerService.list_entries(db_session, "user-1") == LedgerService.list_entries(
        db_session, "user-1"
    )


def test_unknown_party_has_no_entries(db_session: Session):
    _record(db_session)

    assert LedgerService.list_entries(db_session, "user-1", "Nobody Ltd") == []
