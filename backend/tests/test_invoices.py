from __future__ import annotations

import re
from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from backend.opsease import models


class FixedDate(date):
    @classmethod
    def today(cls):
        return cls(2024, 2, 15)


@pytest.fixture
def fixed_today(monkeypatch):
    monkeypatch.setattr("backend.opsease.services.invoices.date", FixedDate)
    return FixedDate.today()


def _invoice_payload(**overrides) -> dict:
    payload = {
        "invoiceNumber": "SI00000001",
        "invoiceType": "sales_invoice",
        "buyerName": "Sharma Textiles",
        "invoiceDate": "2024-01-10",
        "items": [{"description": "Cotton shirts", "quantity": "100", "rate": "50.00"}],
    }
    payload.update(overrides)
    return payload


def _ledger(client: TestClient) -> list[dict]:
    response = client.get("/api/ledger")
    assert response.status_code == 200
    return response.json()


def test_issuing_a_sales_invoice_debits_the_buyer(client: TestClient):
    response = client.post("/api/invoices", json=_invoice_payload())

    assert response.status_code == 201
    invoice = response.json()
    assert invoice["invoiceNumber"] == "SI00000001"
    assert invoice["subtotal"] == "5000.00"
    assert invoice["totalAmount"] == "5000.00"
    assert invoice["items"][0]["amount"] == "5000.00"
    assert invoice["status"] == "draft"

    entries = _ledger(client)
    assert len(entries) == 1
    entry = entries[0]
    assert entry["partyName"] == "Sharma Textiles"
    assert entry["partyType"] == "buyer"
    assert entry["entryType"] == "debit"
    assert entry["amount"] == "5000.00"
    assert entry["balance"] == "5000.00"
    assert entry["reference"] == "SI00000001"
    assert entry["entryDate"] == "2024-01-10"
    assert entry["description"] == "Sales Invoice SI00000001 - Cotton shirts"


def test_marking_paid_settles_the_buyer_once(client: TestClient, fixed_today):
    invoice = client.post("/api/invoices", json=_invoice_payload()).json()

    paid = client.put(f"/api/invoices/{invoice['id']}", json={"status": "paid"})
    assert paid.status_code == 200
    assert paid.json()["status"] == "paid"

    entries = _ledger(client)
    assert len(entries) == 2
    settlement = entries[0]
    assert settlement["entryType"] == "credit"
    assert settlement["amount"] == "5000.00"
    assert settlement["balance"] == "0.00"
    assert settlement["entryDate"] == fixed_today.isoformat()
    assert settlement["description"] == "Payment received for Invoice SI00000001"
    assert settlement["reference"] == "SI00000001"

    again = client.put(f"/api/invoices/{invoice['id']}", json={"status": "paid"})
    assert again.status_code == 200
    assert len(_ledger(client)) == 2


def test_purchase_invoice_credits_the_supplier(client: TestClient, fixed_today):
    created = client.post(
        "/api/invoices",
        json=_invoice_payload(
            invoiceNumber="PI00000001",
            invoiceType="purchase_invoice",
            buyerName="Fabric Mills",
            items=[{"description": "Denim roll", "quantity": "4", "rate": "250.00"}],
        ),
    )
    assert created.status_code == 201
    invoice = created.json()

    issuance = _ledger(client)[0]
    assert issuance["partyType"] == "supplier"
    assert issuance["entryType"] == "credit"
    assert issuance["balance"] == "1000.00"
    assert issuance["description"] == "Purchase Invoice PI00000001 - Denim roll"

    client.put(f"/api/invoices/{invoice['id']}", json={"status": "paid"})

    payment = _ledger(client)[0]
    assert payment["entryType"] == "debit"
    assert payment["description"] == "Payment made for Invoice PI00000001"
    assert payment["balance"] == "0.00"


def test_settlement_uses_total_before_the_update(client: TestClient, fixed_today):
    invoice = client.post("/api/invoices", json=_invoice_payload()).json()

    updated = client.put(
        f"/api/invoices/{invoice['id']}",
        json={"status": "paid", "discount": "1000.00"},
    )

    assert updated.json()["totalAmount"] == "4000.00"
    assert _ledger(client)[0]["amount"] == "5000.00"


def test_settlement_posts_to_the_buyer_billed_at_issuance(client: TestClient, fixed_today):
    invoice = client.post("/api/invoices", json=_invoice_payload()).json()

    updated = client.put(
        f"/api/invoices/{invoice['id']}",
        json={"status": "paid", "buyerName": "Sharma Textiles Pvt Ltd"},
    )

    assert updated.status_code == 200
    assert updated.json()["buyerName"] == "Sharma Textiles Pvt Ltd"
    assert [entry["partyName"] for entry in _ledger(client)] == [
        "Sharma Textiles",
        "Sharma Textiles",
    ]
    balances = client.get("/api/ledger/parties").json()
    assert [(party["partyName"], party["balance"]) for party in balances] == [
        ("Sharma Textiles", "0.00")
    ]


def test_invoice_total_beyond_ledger_capacity_is_rejected(client: TestClient):
    response = client.post(
        "/api/invoices",
        json=_invoice_payload(
            items=[{"description": "Bulk yarn", "quantity": "1000000", "rate": "100000.00"}]
        ),
    )

    assert response.status_code == 400
    assert "cannot exceed" in response.json()["detail"]
    assert _ledger(client) == []
    assert client.get("/api/invoices").json()["total"] == 0


def test_totals_include_tax_shipping_and_discount(client: TestClient):
    response = client.post(
        "/api/invoices",
        json=_invoice_payload(
            items=[
                {"description": "Kurtas", "hsnCode": "6206", "quantity": "10", "rate": "80.00"},
                {"description": "Dupattas", "quantity": "5", "rate": "40.00"},
            ],
            taxRate="18",
            shippingCost="50.00",
            discount="30.00",
        ),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["subtotal"] == "1000.00"
    assert body["taxAmount"] == "180.00"
    assert body["totalAmount"] == "1200.00"
    assert body["items"][0]["hsnCode"] == "6206"
    assert _ledger(client)[0]["description"] == "Sales Invoice SI00000001 - Kurtas, Dupattas"


def test_invoice_number_is_generated_when_omitted(client: TestClient):
    payload = _invoice_payload()
    payload.pop("invoiceNumber")

    sales = client.post("/api/invoices", json=payload).json()
    purchase = client.post(
        "/api/invoices",
        json={**payload, "invoiceType": "purchase_invoice", "buyerName": "Fabric Mills"},
    ).json()

    assert re.fullmatch(r"SI\d{8}", sales["invoiceNumber"])
    assert re.fullmatch(r"PI\d{8}", purchase["invoiceNumber"])


def test_duplicate_invoice_number_is_a_conflict(client: TestClient):
    assert client.post("/api/invoices", json=_invoice_payload()).status_code == 201

    duplicate = client.post("/api/invoices", json=_invoice_payload(buyerName="Other Buyer"))

    assert duplicate.status_code == 409
    assert len(_ledger(client)) == 1


def test_zero_total_invoice_is_rejected(client: TestClient, db_session):
    response = client.post(
        "/api/invoices",
        json=_invoice_payload(items=[{"description": "Samples", "quantity": "3", "rate": "0"}]),
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Invoice total must be greater than zero"
    assert _ledger(client) == []
    events = (
        db_session.query(models.OperationalMetricEvent)
        .filter(models.OperationalMetricEvent.event_type == "invoices.validation_failed")
        .count()
    )
    assert events == 1


def test_unknown_customer_link_is_rejected(client: TestClient):
    response = client.post(
        "/api/invoices",
        json=_invoice_payload(customerId="00000000-0000-4000-8000-000000000000"),
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Customer not found"


def test_invoice_without_items_fails_validation(client: TestClient):
    assert client.post("/api/invoices", json=_invoice_payload(items=[])).status_code == 422


def test_deleting_an_invoice_keeps_its_ledger_entries(client: TestClient):
    invoice = client.post("/api/invoices", json=_invoice_payload()).json()

    response = client.delete(f"/api/invoices/{invoice['id']}")

    assert response.status_code == 204
    assert client.get(f"/api/invoices/{invoice['id']}").status_code == 404
    assert [entry["reference"] for entry in _ledger(client)] == ["SI00000001"]


def test_list_invoices_filters_and_paginates(client: TestClient):
    client.post("/api/invoices", json=_invoice_payload())
    client.post(
        "/api/invoices",
        json=_invoice_payload(
            invoiceNumber="PI00000009",
            invoiceType="purchase_invoice",
            buyerName="Fabric Mills",
        ),
    )

    everything = client.get("/api/invoices").json()
    assert everything["total"] == 2
    assert everything["limit"] == 50
    assert everything["skip"] == 0

    purchases = client.get("/api/invoices", params={"invoiceType": "purchase_invoice"}).json()
    assert [row["invoiceNumber"] for row in purchases["items"]] == ["PI00000009"]

    searched = client.get("/api/invoices", params={"search": "sharma"}).json()
    assert [row["buyerName"] for row in searched["items"]] == ["Sharma Textiles"]


def test_invoices_are_scoped_to_the_authenticated_user(client: TestClient, auth_headers):
    invoice = client.post("/api/invoices", json=_invoice_payload()).json()

    response = client.get(f"/api/invoices/{invoice['id']}", headers=auth_headers("user-2"))

    assert response.status_code == 404

    same_number = client.post(
        "/api/invoices", json=_invoice_payload(), headers=auth_headers("user-2")
    )
    assert same_number.status_code == 201


def test_stored_totals_match_computed_values(db_session):
    from backend.opsease import schemas
    from backend.opsease.services.invoices import InvoiceService

    totals = InvoiceService.compute_totals(
        [schemas.InvoiceItem(description="Buttons", quantity=Decimal("3"), rate=Decimal("0.35"))],
        tax_rate=Decimal("5"),
        shipping_cost=Decimal("0"),
        discount=Decimal("0"),
    )

    assert totals["subtotal"] == Decimal("1.05")
    assert totals["tax_amount"] == Decimal("0.05")
    assert totals["total_amount"] == Decimal("1.10")
