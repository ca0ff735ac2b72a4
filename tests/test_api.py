from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from context_manager.context import get_notifier, get_store
from main import app
from modules.notifications import StatusNotificationService

from conftest import FakeStore, make_request, make_service


REQUESTS = "laundry_requests"
LINES = "request_services"
SERVICES = "laundry_services"


@pytest.fixture
def api_store():
    return FakeStore(
        tables={
            SERVICES: [
                make_service("Wash & Fold", price_per_item=2.50, service_id="00000000-0000-4000-8000-000000000001"),
                make_service("Archived", price_per_item=1, is_active=False, service_id="00000000-0000-4000-8000-000000000002"),
            ]
        }
    )


@pytest.fixture
def client(api_store):
    app.dependency_overrides[get_store] = lambda: api_store
    app.dependency_overrides[get_notifier] = lambda: StatusNotificationService()
    yield TestClient(app)
    app.dependency_overrides.clear()


def submission(**fields):
    body = {
        "customer_name": "Jane Doe",
        "customer_email": "jane@example.com",
        "customer_phone": "555-123-4567",
        "pickup_address": "12 Main Street, Springfield",
        "pickup_date": (date.today() + timedelta(days=3)).isoformat(),
        "pickup_time_slot": "afternoon",
        "quantities": {"00000000-0000-4000-8000-000000000001": 4},
    }
    body.update(fields)
    return body


def test_status_and_landing(client):
    assert client.get("/status").json() == {"status": "OK"}
    assert "Welcome" in client.get("/").json()


def test_public_services_are_active_only(client):
    response = client.get("/api/v1/services")

    assert response.status_code == 200
    assert [s["name"] for s in response.json()["data"]] == ["Wash & Fold"]


def test_submit_request(client, api_store):
    response = client.post("/api/v1/requests", json=submission())

    assert response.status_code == 201
    body = response.json()
    assert body["status"] is True
    assert body["data"]["state"] == "committed"
    assert body["data"]["pricing"]["total"] == 10.0
    assert len(api_store.tables[LINES]) == 1


def test_submit_invalid_request(client, api_store):
    response = client.post("/api/v1/requests", json=submission(customer_email="nope"))

    assert response.status_code == 422
    assert response.json()["data"]["errors"] == {"customer_email": "Please enter a valid email address"}
    assert REQUESTS not in api_store.tables


def test_submit_archived_service_only(client):
    response = client.post(
        "/api/v1/requests",
        json=submission(quantities={"00000000-0000-4000-8000-000000000002": 1}),
    )

    assert response.status_code == 422
    assert response.json()["data"]["errors"] == {"services": "Please select at least one service"}


@pytest.mark.parametrize("quantity", ["1e30", 1000])
def test_submit_quantity_over_the_limit(client, api_store, quantity):
    response = client.post(
        "/api/v1/requests",
        json=submission(quantities={"00000000-0000-4000-8000-000000000001": quantity}),
    )

    assert response.status_code == 422
    assert response.json()["data"]["errors"] == {"services": "Quantity cannot exceed 999 per service"}
    assert REQUESTS not in api_store.tables


def test_submit_store_rejection(client, api_store):
    api_store.fail_when = lambda operation, table, record: "offline" if table == REQUESTS else None

    response = client.post("/api/v1/requests", json=submission())

    assert response.status_code == 502
    assert response.json()["status"] is False


def test_submit_partial_failure(client, api_store):
    api_store.fail_when = lambda operation, table, record: "offline" if table == LINES else None

    response = client.post("/api/v1/requests", json=submission())

    assert response.status_code == 207
    data = response.json()["data"]
    assert data["state"] == "partially_failed"
    assert data["request_id"] == api_store.tables[REQUESTS][0]["id"]


def test_admin_list_and_detail(client, api_store):
    request = make_request(customer_name="Ann Lee")
    api_store.tables[REQUESTS] = [request, make_request(status="completed")]

    listed = client.get("/api/v1/admin/requests", params={"status": "pending", "search": "ann"})
    assert [r["id"] for r in listed.json()["data"]] == [request["id"]]

    detail = client.get(f"/api/v1/admin/requests/{request['id']}")
    assert detail.status_code == 200
    assert detail.json()["data"]["lines"] == []

    assert client.get("/api/v1/admin/requests/missing").status_code == 404


def test_admin_list_rejects_unknown_status(client):
    response = client.get("/api/v1/admin/requests", params={"status": "lost"})

    assert response.status_code == 422


def test_admin_export(client, api_store):
    api_store.tables[REQUESTS] = [make_request(special_instructions='Say "hi", please')]

    response = client.get("/api/v1/admin/requests/export")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "attachment" in response.headers["content-disposition"]
    assert '"Say ""hi"", please"' in response.text


def test_admin_update_and_batch(client, api_store):
    first, second = make_request(), make_request()
    api_store.tables[REQUESTS] = [first, second]

    response = client.patch(f"/api/v1/admin/requests/{first['id']}", json={"status": "confirmed"})
    assert response.status_code == 200
    assert response.json()["data"]["status_changed"] is True
    assert response.json()["data"]["notification_sent"] is True

    batch = client.post(
        "/api/v1/admin/requests/batch-update",
        json={"request_ids": [first["id"], "missing", second["id"]], "status": "in_progress"},
    )
    assert batch.status_code == 207
    assert batch.json()["data"]["succeeded"] == [first["id"], second["id"]]
    assert batch.json()["data"]["failed"][0]["request_id"] == "missing"


def test_admin_update_rejects_unknown_status(client, api_store):
    request = make_request()
    api_store.tables[REQUESTS] = [request]

    response = client.patch(f"/api/v1/admin/requests/{request['id']}", json={"status": "lost"})

    assert response.status_code == 422
    assert "status" in response.json()["data"]["fields"]


def test_admin_services_crud(client, api_store):
    created = client.post("/api/v1/admin/services", json={"name": "Ironing", "price_per_item": 3})
    assert created.status_code == 201
    service_id = created.json()["data"]["id"]

    invalid = client.post("/api/v1/admin/services", json={"name": "X"})
    assert invalid.status_code == 422
    assert "name" in invalid.json()["data"]["fields"]

    ampersand = client.post("/api/v1/admin/services", json={"name": "Wash & Fold Express", "price_per_item": "4.50"})
    assert ampersand.status_code == 201
    assert ampersand.json()["data"]["name"] == "Wash & Fold Express"

    updated = client.put(f"/api/v1/admin/services/{service_id}", json={"name": "Pressing", "price_per_pound": "1.5"})
    assert updated.json()["data"]["price_per_pound"] == 1.5

    archived = client.patch(f"/api/v1/admin/services/{service_id}/active", json={"is_active": False})
    assert archived.json()["data"]["is_active"] is False

    assert len(client.get("/api/v1/admin/services").json()["data"]) == 4
    assert client.delete(f"/api/v1/admin/services/{service_id}").status_code == 200
    assert client.delete(f"/api/v1/admin/services/{service_id}").status_code == 404


def test_delete_referenced_service_conflicts(client, api_store):
    api_store.tables[LINES] = [
        {"id": "l1", "request_id": "r1", "service_id": "00000000-0000-4000-8000-000000000001", "quantity": 1}
    ]

    response = client.delete("/api/v1/admin/services/00000000-0000-4000-8000-000000000001")

    assert response.status_code == 409


def test_dashboard(client, api_store):
    api_store.tables[REQUESTS] = [make_request(), make_request(status="completed")]

    response = client.get("/api/v1/admin/dashboard")

    assert response.status_code == 200
    assert response.json()["data"]["pending_count"] == 1
