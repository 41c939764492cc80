"""Integration tests for Order API endpoints.

Covers:
- CRUD via /api/orders (camelCase payloads).
- Validation messages (400) and missing orders (404).
- Online payment success, decline persisted as PAYMENT_FAILED, PAID guard.
- Offline settlement and the status override.
- Authentication enforcement (401 without token).
"""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest

from modules.core.models import OutboxEvent
from modules.orders.models import Order, OrderItem
from modules.products.models import Product

pytestmark = pytest.mark.integration

ORDERS_URL = "/api/orders"


# ---------------------------------------------------------------------------
# Fixtures / helpers
# ---------------------------------------------------------------------------


@pytest.fixture()
def order_payload(product_a, product_b):
    return {
        "buyerEmail": "passenger@example.com",
        "seatLetter": "A",
        "seatNumber": 12,
        "items": [
            {"productId": str(product_a.id), "quantity": 2},
            {"productId": str(product_b.id), "quantity": 1},
        ],
    }


@pytest.fixture()
def created_order(auth_client, order_payload):
    response = auth_client.post(ORDERS_URL, order_payload, format="json")
    assert response.status_code == 201
    return response.json()


def _pay(client, order_id, token):
    return client.post(f"{ORDERS_URL}/{order_id}/payment?cardToken={token}")


# ===========================================================================
# Authentication
# ===========================================================================


class TestOrderAPIAuth:
    def test_unauthenticated_returns_401(self, api_client):
        assert api_client.get(ORDERS_URL).status_code == 401

    def test_jwt_token_grants_access(self, api_client, django_user_model):
        django_user_model.objects.create_user(username="purser", password="s3cret-pw")
        token = api_client.post(
            "/api/auth/token",
            {"username": "purser", "password": "s3cret-pw"},
            format="json",
        ).json()["access"]

        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        assert api_client.get(ORDERS_URL).status_code == 200


# ===========================================================================
# Create / Read
# ===========================================================================


class TestCreateOrder:
    def test_creates_open_unpaid_order(self, created_order, product_a):
        assert created_order["totalPrice"] == "40.00"
        assert created_order["status"] == "OPEN"
        assert created_order["paymentStatus"] == "PAYMENT_FAILED"
        assert created_order["paymentGateway"] == ""
        assert created_order["cardToken"] is None
        assert created_order["paymentDate"] is None
        assert created_order["seatLetter"] == "A"
        assert created_order["seatNumber"] == 12
        first = created_order["items"][0]
        assert first["productId"] == str(product_a.id)
        assert first["productName"] == "Orange Juice"
        assert first["unitPrice"] == "10.00"
        assert first["subtotal"] == "20.00"

    def test_caller_cannot_choose_payment_state(self, auth_client, order_payload):
        order_payload.update({"status": "FINISHED", "paymentStatus": "PAID"})

        data = auth_client.post(ORDERS_URL, order_payload, format="json").json()

        assert data["status"] == "OPEN"
        assert data["paymentStatus"] == "PAYMENT_FAILED"

    def test_empty_items_returns_400(self, auth_client, order_payload):
        order_payload["items"] = []

        response = auth_client.post(ORDERS_URL, order_payload, format="json")

        assert response.status_code == 400
        assert response.json()["detail"] == "order must have at least one item"
        assert Order.objects.count() == 0

    def test_missing_seat_returns_400(self, auth_client, order_payload):
        del order_payload["seatLetter"]

        response = auth_client.post(ORDERS_URL, order_payload, format="json")

        assert response.status_code == 400
        assert response.json()["detail"] == "missing seat position"

    def test_duplicate_product_returns_400(self, auth_client, order_payload, product_a):
        order_payload["items"] = [
            {"productId": str(product_a.id), "quantity": 1},
            {"productId": str(product_a.id), "quantity": 3},
        ]

        response = auth_client.post(ORDERS_URL, order_payload, format="json")

        assert response.status_code == 400
        assert response.json()["detail"] == "duplicate product"

    def test_unknown_product_returns_400(self, auth_client, order_payload):
        order_payload["items"] = [{"productId": str(uuid4()), "quantity": 1}]

        response = auth_client.post(ORDERS_URL, order_payload, format="json")

        assert response.status_code == 400
        assert response.json()["detail"] == "invalid product reference"

    def test_zero_quantity_returns_400(self, auth_client, order_payload, product_a):
        order_payload["items"] = [{"productId": str(product_a.id), "quantity": 0}]

        response = auth_client.post(ORDERS_URL, order_payload, format="json")

        assert response.status_code == 400
        assert response.json()["detail"] == "non-positive quantity"

    def test_non_positive_seat_number_returns_400(self, auth_client, order_payload):
        order_payload["seatNumber"] = 0

        response = auth_client.post(ORDERS_URL, order_payload, format="json")

        assert response.status_code == 400
        assert response.json()["detail"] == "missing seat position"

    def test_total_beyond_amount_column_returns_400(self, auth_client, order_payload):
        pricey = Product.objects.create(name="Private Jet", price=Decimal("99999.99"))
        order_payload["items"] = [{"productId": str(pricey.id), "quantity": 10**6}]

        response = auth_client.post(ORDERS_URL, order_payload, format="json")

        assert response.status_code == 400
        assert response.json()["detail"] == "order total exceeds the maximum amount"
        assert Order.objects.count() == 0

    def test_quantity_beyond_integer_column_returns_400(
        self, auth_client, order_payload, product_a
    ):
        order_payload["items"] = [{"productId": str(product_a.id), "quantity": 10**20}]

        response = auth_client.post(ORDERS_URL, order_payload, format="json")

        assert response.status_code == 400
        assert "items" in response.json()
        assert Order.objects.count() == 0

    def test_invalid_email_returns_400(self, auth_client, order_payload):
        order_payload["buyerEmail"] = "not-an-email"

        response = auth_client.post(ORDERS_URL, order_payload, format="json")

        assert response.status_code == 400
        assert "buyerEmail" in response.json()

    def test_creation_writes_outbox_event(self, created_order):
        events = OutboxEvent.objects.filter(
            event_type="OrderCreated", aggregate_id=created_order["id"]
        )
        assert events.count() == 1
        assert events.first().topic == "orders"


class TestReadOrders:
    def test_retrieve(self, auth_client, created_order):
        response = auth_client.get(f"{ORDERS_URL}/{created_order['id']}")

        assert response.status_code == 200
        assert response.json() == created_order

    def test_retrieve_missing_returns_404(self, auth_client):
        response = auth_client.get(f"{ORDERS_URL}/{uuid4()}")
        assert response.status_code == 404

    def test_retrieve_malformed_id_returns_404(self, auth_client):
        response = auth_client.get(f"{ORDERS_URL}/not-a-uuid")
        assert response.status_code == 404

    def test_list_returns_plain_list(self, auth_client, created_order):
        response = auth_client.get(ORDERS_URL)

        assert response.status_code == 200
        assert [o["id"] for o in response.json()] == [created_order["id"]]

    def test_list_filters_by_payment_status(self, auth_client, created_order):
        auth_client.post(f"{ORDERS_URL}/{created_order['id']}/offline-payment")

        unpaid = auth_client.get(ORDERS_URL, {"paymentStatus": "PAYMENT_FAILED"})
        settled = auth_client.get(ORDERS_URL, {"paymentStatus": "OFFLINE_PAYMENT"})

        assert unpaid.json() == []
        assert [o["id"] for o in settled.json()] == [created_order["id"]]


# ===========================================================================
# Update / Delete
# ===========================================================================


class TestUpdateOrder:
    def test_replacing_items_recomputes_total(
        self, auth_client, created_order, product_b
    ):
        payload = {
            "buyerEmail": "other@example.com",
            "seatLetter": "F",
            "seatNumber": 30,
            "items": [{"productId": str(product_b.id), "quantity": 1}],
        }

        response = auth_client.put(
            f"{ORDERS_URL}/{created_order['id']}", payload, format="json"
        )

        assert response.status_code == 200
        data = response.json()
        assert data["totalPrice"] == "20.00"
        assert data["buyerEmail"] == "other@example.com"
        assert data["seatLetter"] == "F"
        assert data["seatNumber"] == 30
        assert len(data["items"]) == 1
        assert OrderItem.objects.filter(order_id=created_order["id"]).count() == 1

    def test_duplicate_products_rejected(
        self, auth_client, created_order, order_payload, product_a
    ):
        order_payload["items"] = [
            {"productId": str(product_a.id), "quantity": 1},
            {"productId": str(product_a.id), "quantity": 1},
        ]

        response = auth_client.put(
            f"{ORDERS_URL}/{created_order['id']}", order_payload, format="json"
        )

        assert response.status_code == 400
        stored = auth_client.get(f"{ORDERS_URL}/{created_order['id']}").json()
        assert stored["totalPrice"] == "40.00"

    def test_update_missing_returns_404(self, auth_client, order_payload):
        response = auth_client.put(f"{ORDERS_URL}/{uuid4()}", order_payload, format="json")
        assert response.status_code == 404


class TestDeleteOrder:
    def test_delete_removes_order_and_items(self, auth_client, created_order):
        response = auth_client.delete(f"{ORDERS_URL}/{created_order['id']}")

        assert response.status_code == 200
        assert not Order.objects.filter(id=created_order["id"]).exists()
        assert OrderItem.objects.count() == 0
        assert OutboxEvent.objects.filter(event_type="OrderDeleted").count() == 1

    def test_delete_missing_returns_404(self, auth_client):
        assert auth_client.delete(f"{ORDERS_URL}/{uuid4()}").status_code == 404


# ===========================================================================
# Payment
# ===========================================================================


class TestOnlinePayment:
    def test_successful_payment_finishes_order(self, auth_client, created_order):
        response = _pay(auth_client, created_order["id"], "4111111111111111")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "FINISHED"
        assert data["paymentStatus"] == "PAID"
        assert data["paymentGateway"] == "ONLINE_PAYMENT"
        assert data["cardToken"] == "4111111111111111"
        assert data["paymentDate"] is not None

    def test_declined_card_is_recorded(self, auth_client, created_order):
        response = _pay(auth_client, created_order["id"], "9999000011112222")

        assert response.status_code == 400
        assert response.json()["detail"] == "Payment processing failed: Card declined"
        stored = auth_client.get(f"{ORDERS_URL}/{created_order['id']}").json()
        assert stored["status"] == "OPEN"
        assert stored["paymentStatus"] == "PAYMENT_FAILED"
        assert stored["cardToken"] is None
        assert OutboxEvent.objects.filter(event_type="OrderPaymentFailed").count() == 1

    def test_blank_token_fails_payment(self, auth_client, created_order):
        response = _pay(auth_client, created_order["id"], "")

        assert response.status_code == 400
        assert "Invalid card token" in response.json()["detail"]

    def test_missing_token_returns_400(self, auth_client, created_order):
        response = auth_client.post(f"{ORDERS_URL}/{created_order['id']}/payment")

        assert response.status_code == 400
        assert "cardToken" in response.json()

    def test_second_payment_rejected(self, auth_client, created_order):
        _pay(auth_client, created_order["id"], "4111")
        first = auth_client.get(f"{ORDERS_URL}/{created_order['id']}").json()

        response = _pay(auth_client, created_order["id"], "5500")

        assert response.status_code == 400
        assert response.json()["detail"] == "Order is already paid"
        assert auth_client.get(f"{ORDERS_URL}/{created_order['id']}").json() == first

    def test_retry_after_decline_succeeds(self, auth_client, created_order):
        _pay(auth_client, created_order["id"], "9999")

        response = _pay(auth_client, created_order["id"], "4111")

        assert response.status_code == 200
        assert response.json()["paymentStatus"] == "PAID"

    def test_payment_on_missing_order_returns_404(self, auth_client):
        assert _pay(auth_client, uuid4(), "4111").status_code == 404


class TestOfflinePayment:
    def test_offline_payment_finishes_order(self, auth_client, created_order):
        response = auth_client.post(
            f"{ORDERS_URL}/{created_order['id']}/offline-payment"
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "FINISHED"
        assert data["paymentStatus"] == "OFFLINE_PAYMENT"
        assert data["paymentGateway"] == "OFFLINE_PAYMENT"
        assert data["cardToken"] is None
        assert data["paymentDate"] is not None

    def test_offline_payment_on_paid_order_rejected(self, auth_client, created_order):
        _pay(auth_client, created_order["id"], "4111")

        response = auth_client.post(
            f"{ORDERS_URL}/{created_order['id']}/offline-payment"
        )

        assert response.status_code == 400


class TestStatusOverride:
    def test_overwrites_status(self, auth_client, created_order):
        response = auth_client.put(
            f"{ORDERS_URL}/{created_order['id']}/status?status=FINISHED"
        )

        assert response.status_code == 200
        assert response.json()["status"] == "FINISHED"
        assert response.json()["paymentStatus"] == "PAYMENT_FAILED"

    def test_paid_order_can_be_reopened(self, auth_client, created_order):
        _pay(auth_client, created_order["id"], "4111")

        response = auth_client.put(
            f"{ORDERS_URL}/{created_order['id']}/status?status=OPEN"
        )

        assert response.json()["status"] == "OPEN"
        assert response.json()["paymentStatus"] == "PAID"

    def test_unknown_status_returns_400(self, auth_client, created_order):
        response = auth_client.put(
            f"{ORDERS_URL}/{created_order['id']}/status?status=SHIPPED"
        )
        assert response.status_code == 400

    def test_missing_order_returns_404(self, auth_client):
        response = auth_client.put(f"{ORDERS_URL}/{uuid4()}/status?status=OPEN")
        assert response.status_code == 404
