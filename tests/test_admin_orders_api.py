import httpx
import pytest
from fastapi.testclient import TestClient

from shop_admin.api.v1.deps import get_gateway
from shop_admin.core.database import get_session_factory
from shop_admin.main import create_app
from shop_admin.models import LoginUser, Order, OrderStatus
from shop_admin.services.payment_gateway import EpayGatewayClient

from factories import fetch, make_order, make_user

ADMIN = {"X-Admin-Token": "test-token"}


@pytest.fixture
def gateway_replies():
    return {"payload": {"code": 1, "status": 1}}


@pytest.fixture
def client(session_factory, gateway_replies):
    app = create_app()

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=gateway_replies["payload"])

    def override_gateway():
        return EpayGatewayClient(
            "1001",
            "secret",
            http_client=httpx.Client(transport=httpx.MockTransport(handler)),
        )

    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_gateway] = override_gateway

    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.parametrize("headers", [{}, {"X-Admin-Token": "wrong"}])
def test_requests_without_admin_token_are_rejected(client, seed, session_factory, headers):
    seed(make_order("API-1"))

    response = client.post("/api/v1/admin/orders/API-1/paid", headers=headers)

    assert response.status_code == 401
    assert fetch(session_factory, Order, "API-1").status == OrderStatus.PENDING


def test_order_lifecycle_over_http(client, seed, session_factory):
    seed(make_user("u-1", points=0), make_order("API-2", user_id="u-1", points_used=6, card_key="KEY"))

    assert client.post("/api/v1/admin/orders/API-2/paid", headers=ADMIN).status_code == 204
    assert client.post("/api/v1/admin/orders/API-2/delivered", headers=ADMIN).status_code == 204

    detail = client.get("/api/v1/admin/orders/API-2", headers=ADMIN)
    assert detail.status_code == 200
    assert detail.json()["status"] == "delivered"

    assert client.post("/api/v1/admin/orders/API-2/cancel", headers=ADMIN).status_code == 204
    assert fetch(session_factory, LoginUser, "u-1").points == 6

    history = client.get("/api/v1/admin/invalidations", headers=ADMIN).json()["paths"]
    assert history[-3:] == ["/admin/orders", "/admin/orders/API-2", "/order/API-2"]


def test_delivery_without_card_maps_to_conflict(client, seed):
    seed(make_order("API-3", status=OrderStatus.PAID))

    response = client.post("/api/v1/admin/orders/API-3/delivered", headers=ADMIN)

    assert response.status_code == 409
    assert response.json()["detail"] == "Missing card key; cannot mark delivered"


def test_missing_order_maps_to_not_found(client):
    assert client.get("/api/v1/admin/orders/none", headers=ADMIN).status_code == 404
    assert client.post("/api/v1/admin/orders/none/delivered", headers=ADMIN).status_code == 404


def test_update_email_and_list(client, seed, session_factory):
    seed(make_order("API-4"))

    response = client.put("/api/v1/admin/orders/API-4/email", json={"email": "  buyer@example.com "}, headers=ADMIN)

    assert response.status_code == 204
    assert fetch(session_factory, Order, "API-4").email == "buyer@example.com"
    listing = client.get("/api/v1/admin/orders", params={"status": "pending"}, headers=ADMIN)
    assert [row["order_id"] for row in listing.json()] == ["API-4"]


def test_delete_endpoints(client, seed, session_factory):
    seed(make_order("API-5"), make_order("API-6"), make_order("API-7"))

    assert client.delete("/api/v1/admin/orders/API-5", headers=ADMIN).status_code == 204
    response = client.post(
        "/api/v1/admin/orders/bulk-delete",
        json={"order_ids": ["API-6", " API-7 ", ""]},
        headers=ADMIN,
    )

    assert response.status_code == 204
    for order_id in ("API-5", "API-6", "API-7"):
        assert fetch(session_factory, Order, order_id) is None


def test_verify_refund_endpoint(client, seed, session_factory, gateway_replies):
    seed(make_order("API-8", status=OrderStatus.PAID))
    gateway_replies["payload"] = {"code": 1, "status": 0}

    response = client.post("/api/v1/admin/orders/API-8/verify-refund", headers=ADMIN)

    assert response.status_code == 200
    assert response.json() == {"success": True, "status": 0, "msg": "Refunded (Verified)", "error": None}
    assert fetch(session_factory, Order, "API-8").status == OrderStatus.REFUNDED


def test_verify_refund_reports_gateway_errors_in_body(client, seed, gateway_replies):
    seed(make_order("API-9", status=OrderStatus.PAID))
    gateway_replies["payload"] = {"code": 0, "msg": "bad pid"}

    response = client.post("/api/v1/admin/orders/API-9/verify-refund", headers=ADMIN)

    assert response.status_code == 200
    assert response.json()["success"] is False
    assert response.json()["error"] == "bad pid"
