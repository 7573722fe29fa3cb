from __future__ import annotations

from decimal import Decimal

from fastapi.testclient import TestClient

OTHER_USER_ID = "user-2"


def _entry_payload(**overrides) -> dict:
    payload = {
        "partyName": "Sharma Textiles",
        "partyType": "buyer",
        "entryType": "debit",
        "amount": "1000.00",
        "description": "Opening balance",
        "entryDate": "2024-01-10",
    }
    payload.update(overrides)
    return payload


def test_create_entry_returns_camel_case_with_server_balance(client: TestClient):
    response = client.post("/api/ledger", json=_entry_payload(balance="999999.00"))

    assert response.status_code == 201
    body = response.json()
    assert body["partyName"] == "Sharma Textiles"
    assert body["partyType"] == "buyer"
    assert body["entryType"] == "debit"
    assert body["amount"] == "1000.00"
    assert body["balance"] == "1000.00"
    assert body["entryDate"] == "2024-01-10"
    assert body["reference"] is None
    assert body["id"]
    assert "createdAt" in body


def test_list_entries_newest_first_with_running_balance(client: TestClient):
    client.post("/api/ledger", json=_entry_payload())
    client.post(
        "/api/ledger",
        json=_entry_payload(entryType="credit", amount="250.50", entryDate="2024-01-20"),
    )

    response = client.get("/api/ledger")

    assert response.status_code == 200
    body = response.json()
    assert [row["balance"] for row in body] == ["749.50", "1000.00"]


def test_list_entries_filters_by_party_name(client: TestClient):
    client.post("/api/ledger", json=_entry_payload())
    client.post("/api/ledger", json=_entry_payload(partyName="Beta Garments", amount="10.00"))

    response = client.get("/api/ledger", params={"partyName": "Beta Garments"})

    assert [row["partyName"] for row in response.json()] == ["Beta Garments"]


def test_whitespace_party_name_is_rejected_with_400(client: TestClient):
    response = client.post("/api/ledger", json=_entry_payload(partyName="   "))

    assert response.status_code == 400
    assert response.json()["detail"] == "Party name is required"


def test_schema_violations_are_rejected_with_422(client: TestClient):
    for payload in (
        _entry_payload(amount="0"),
        _entry_payload(amount="-10.00"),
        _entry_payload(partyType="vendor"),
        _entry_payload(description=""),
        {key: value for key, value in _entry_payload().items() if key != "entryDate"},
    ):
        response = client.post("/api/ledger", json=payload)
        assert response.status_code == 422, payload

    assert client.get("/api/ledger").json() == []


def test_summary_and_party_balances(client: TestClient):
    client.post("/api/ledger", json=_entry_payload(reference="SI00000001"))
    client.post(
        "/api/ledger",
        json=_entry_payload(
            partyName="Fabric Mills",
            partyType="supplier",
            entryType="credit",
            amount="400.00",
        ),
    )

    summary = client.get("/api/ledger/summary").json()
    assert summary == {
        "totalDebits": "1000.00",
        "totalCredits": "400.00",
        "netBalance": "-600.00",
        "entryCount": 2,
    }

    searched = client.get("/api/ledger/summary", params={"search": "si0000"}).json()
    assert searched["entryCount"] == 1
    assert Decimal(searched["totalDebits"]) == Decimal("1000.00")

    suppliers = client.get("/api/ledger/parties", params={"partyType": "supplier"}).json()
    assert suppliers == [
        {
            "partyName": "Fabric Mills",
            "partyType": "supplier",
            "balance": "400.00",
            "lastEntryDate": "2024-01-10",
            "entryCount": 1,
        }
    ]


def test_ledger_is_scoped_to_the_authenticated_user(client: TestClient, auth_headers):
    client.post("/api/ledger", json=_entry_payload())

    other = client.get("/api/ledger", headers=auth_headers(OTHER_USER_ID))
    assert other.status_code == 200
    assert other.json() == []

    created = client.post(
        "/api/ledger",
        json=_entry_payload(amount="5.00"),
        headers=auth_headers(OTHER_USER_ID),
    )
    assert created.json()["balance"] == "5.00"


def test_ledger_requires_a_bearer_token(anonymous_client: TestClient):
    assert anonymous_client.get("/api/ledger").status_code == 401
    assert anonymous_client.post("/api/ledger", json=_entry_payload()).status_code == 401
