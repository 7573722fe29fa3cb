from __future__ import annotations

from fastapi.testclient import TestClient


def _order_payload(**overrides) -> dict:
    payload = {
        "orderCode": "SO-2024-001",
        "orderType": "sales_order",
        "partyName": "Sharma Textiles",
        "products": [
            {"name": "Polo shirt", "quantity": 200, "unitPrice": "180.00"},
            {"name": "Track pants", "quantity": 100, "unitPrice": "250.50"},
        ],
        "deliveryDate": "2024-03-01",
        "orderDate": "2024-01-15",
    }
    payload.update(overrides)
    return payload


def _create_order(client: TestClient, **overrides) -> dict:
    response = client.post("/api/orders", json=_order_payload(**overrides))
    assert response.status_code == 201, response.text
    return response.json()


def test_create_order_derives_totals_from_products(client: TestClient):
    order = _create_order(client)

    assert order["totalQuantity"] == 300
    assert order["totalValue"] == "61050.00"
    assert order["status"] == "planning"
    assert order["products"][1]["unitPrice"] == "250.50"


def test_order_can_link_to_an_existing_customer(client: TestClient):
    customer = client.post(
        "/api/customers",
        json={"customerCode": "C-001", "companyName": "Sharma Textiles"},
    ).json()

    order = _create_order(client, customerId=customer["id"])

    assert order["customerId"] == customer["id"]


def test_order_with_unknown_customer_is_rejected(client: TestClient):
    response = client.post(
        "/api/orders",
        json=_order_payload(customerId="00000000-0000-4000-8000-000000000000"),
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Customer not found"


def test_duplicate_order_code_is_a_conflict(client: TestClient):
    _create_order(client)

    assert client.post("/api/orders", json=_order_payload()).status_code == 409


def test_update_order_recomputes_totals_and_filters(client: TestClient):
    order = _create_order(client)
    _create_order(client, orderCode="PO-2024-001", orderType="purchase_order")

    response = client.put(
        f"/api/orders/{order['id']}",
        json={
            "status": "in_progress",
            "products": [{"name": "Polo shirt", "quantity": 10, "unitPrice": "100.00"}],
        },
    )
    assert response.status_code == 200
    assert response.json()["totalQuantity"] == 10
    assert response.json()["totalValue"] == "1000.00"

    in_progress = client.get("/api/orders", params={"status": "in_progress"}).json()
    assert [row["orderCode"] for row in in_progress["items"]] == ["SO-2024-001"]

    purchases = client.get("/api/orders", params={"orderType": "purchase_order"}).json()
    assert purchases["total"] == 1


def test_delete_order_removes_production_plans(client: TestClient):
    order = _create_order(client)
    client.post(
        "/api/production-plans",
        json={"orderId": order["id"], "stage": "cutting", "targetQuantity": 300},
    )

    assert client.delete(f"/api/orders/{order['id']}").status_code == 204
    assert client.get(f"/api/orders/{order['id']}").status_code == 404
    assert client.get("/api/production-plans").json() == []


def test_production_plan_lifecycle(client: TestClient):
    order = _create_order(client)

    created = client.post(
        "/api/production-plans",
        json={
            "orderId": order["id"],
            "stage": "stitching",
            "targetQuantity": 300,
            "assignedTeam": "Line A",
            "startDate": "2024-01-20",
            "endDate": "2024-02-10",
        },
    )
    assert created.status_code == 201
    plan = created.json()
    assert plan["completedQuantity"] == 0
    assert plan["status"] == "pending"

    progressed = client.put(
        f"/api/production-plans/{plan['id']}",
        json={"completedQuantity": 120, "status": "in_progress"},
    )
    assert progressed.status_code == 200
    assert progressed.json()["completedQuantity"] == 120

    listed = client.get("/api/production-plans", params={"orderId": order["id"]}).json()
    assert [row["id"] for row in listed] == [plan["id"]]


def test_production_plan_rejects_overcompletion_and_unknown_order(client: TestClient):
    order = _create_order(client)

    over = client.post(
        "/api/production-plans",
        json={
            "orderId": order["id"],
            "stage": "packaging",
            "targetQuantity": 10,
            "completedQuantity": 11,
        },
    )
    assert over.status_code == 400

    missing = client.post(
        "/api/production-plans",
        json={
            "orderId": "00000000-0000-4000-8000-000000000000",
            "stage": "packaging",
            "targetQuantity": 10,
        },
    )
    assert missing.status_code == 400
    assert missing.json()["detail"] == "Order not found"

    bad_dates = client.post(
        "/api/production-plans",
        json={
            "orderId": order["id"],
            "stage": "cutting",
            "targetQuantity": 10,
            "startDate": "2024-02-10",
            "endDate": "2024-02-01",
        },
    )
    assert bad_dates.status_code == 400
