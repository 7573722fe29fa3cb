from __future__ import annotations

from fastapi.testclient import TestClient


def _item(client: TestClient, **overrides) -> dict:
    payload = {
        "itemName": "Cotton fabric",
        "category": "raw_materials",
        "currentStock": "500.00",
        "unit": "meters",
        "reorderLevel": "100.00",
        "unitCost": "85.00",
    }
    payload.update(overrides)
    response = client.post("/api/stock", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def test_stock_in_and_out_adjust_quantity(client: TestClient):
    item = _item(client)

    received = client.post(
        f"/api/stock/{item['id']}/transactions",
        json={"transactionType": "in", "quantity": "50.00", "reference": "PO-2024-001"},
    )
    assert received.status_code == 201
    issued = client.post(
        f"/api/stock/{item['id']}/transactions",
        json={"transactionType": "out", "quantity": "200.00", "reason": "Cutting floor"},
    )
    assert issued.status_code == 201

    assert client.get(f"/api/stock/{item['id']}").json()["currentStock"] == "350.00"

    history = client.get(f"/api/stock/{item['id']}/transactions").json()
    assert [row["transactionType"] for row in history] == ["out", "in"]
    assert history[1]["reference"] == "PO-2024-001"


def test_issuing_more_than_on_hand_is_rejected(client: TestClient):
    item = _item(client, currentStock="10.00")

    response = client.post(
        f"/api/stock/{item['id']}/transactions",
        json={"transactionType": "out", "quantity": "10.50"},
    )

    assert response.status_code == 400
    assert response.json()["detail"].startswith("Insufficient stock for Cotton fabric")
    assert client.get(f"/api/stock/{item['id']}").json()["currentStock"] == "10.00"


def test_low_stock_lists_items_at_or_below_reorder_level(client: TestClient):
    _item(client)
    _item(client, itemName="Buttons", category="accessories", currentStock="100.00", unit="pieces")
    _item(client, itemName="Zippers", category="accessories", currentStock="20.00", unit="pieces")

    low = client.get("/api/stock/low-stock").json()

    assert [row["itemName"] for row in low] == ["Buttons", "Zippers"]


def test_list_stock_searches_by_name(client: TestClient):
    _item(client)
    _item(client, itemName="Polyester thread", unit="spools")

    response = client.get("/api/stock", params={"search": "THREAD"})

    assert [row["itemName"] for row in response.json()] == ["Polyester thread"]


def test_update_stock_item(client: TestClient):
    item = _item(client)

    response = client.put(
        f"/api/stock/{item['id']}", json={"reorderLevel": "600.00", "location": "Rack B"}
    )

    assert response.status_code == 200
    assert response.json()["location"] == "Rack B"
    assert [row["id"] for row in client.get("/api/stock/low-stock").json()] == [item["id"]]
