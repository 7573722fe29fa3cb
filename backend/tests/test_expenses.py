from __future__ import annotations

from fastapi.testclient import TestClient


def _expense(client: TestClient, **overrides) -> dict:
    payload = {
        "category": "utilities",
        "amount": "1250.00",
        "description": "Electricity bill",
        "expenseDate": "2024-01-31",
    }
    payload.update(overrides)
    response = client.post("/api/expenses", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_expense_defaults_to_cash(client: TestClient):
    expense = _expense(client)

    assert expense["paymentMethod"] == "cash"
    assert expense["amount"] == "1250.00"


def test_list_expenses_filters_by_category_and_dates(client: TestClient):
    _expense(client)
    _expense(client, category="wages", amount="9000.00", expenseDate="2024-02-07")
    _expense(client, category="transportation", amount="300.00", expenseDate="2024-02-20")

    february = client.get(
        "/api/expenses", params={"startDate": "2024-02-01", "endDate": "2024-02-29"}
    ).json()
    assert february["total"] == 2
    assert [row["expenseDate"] for row in february["items"]] == ["2024-02-20", "2024-02-07"]

    wages = client.get("/api/expenses", params={"category": "wages"}).json()
    assert [row["amount"] for row in wages["items"]] == ["9000.00"]


def test_inverted_date_range_is_rejected(client: TestClient):
    response = client.get(
        "/api/expenses", params={"startDate": "2024-03-01", "endDate": "2024-02-01"}
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "start_date cannot be after end_date"


def test_expense_amount_must_be_positive(client: TestClient):
    response = client.post(
        "/api/expenses",
        json={
            "category": "other",
            "amount": "0",
            "description": "Nothing",
            "expenseDate": "2024-01-01",
        },
    )

    assert response.status_code == 422


def test_update_and_delete_expense(client: TestClient, auth_headers):
    expense = _expense(client)

    updated = client.put(
        f"/api/expenses/{expense['id']}",
        json={"amount": "1300.00", "paymentMethod": "bank_transfer"},
    )
    assert updated.status_code == 200
    assert updated.json()["amount"] == "1300.00"
    assert updated.json()["paymentMethod"] == "bank_transfer"

    foreign = client.delete(f"/api/expenses/{expense['id']}", headers=auth_headers("user-2"))
    assert foreign.status_code == 404

    assert client.delete(f"/api/expenses/{expense['id']}").status_code == 204
    assert client.get("/api/expenses").json()["total"] == 0
