"""Integration tests for the order endpoints via TestClient."""

import pytest

CUSTOMER = {"X-User-ID": "cust-api-001", "X-User-Role": "customer"}
OTHER_CUSTOMER = {"X-User-ID": "cust-api-002", "X-User-Role": "customer"}
STAFF = {"X-User-ID": "staff-api-001", "X-User-Role": "staff"}

SHIPPING = {
    "shippingName": "Nguyen Van A",
    "shippingPhone": "0901234567",
    "shippingAddress": "12 Le Loi, District 1",
}


def _fill_cart(client, variant_id, quantity=1, headers=CUSTOMER):
    response = client.post("/cart/items", json={"variantId": variant_id, "quantity": quantity}, headers=headers)
    assert response.status_code == 201


def _checkout(client, headers=CUSTOMER, **extra):
    return client.post("/orders", json={**SHIPPING, **extra}, headers=headers)


@pytest.fixture()
def order_id(client, api_variant):
    _fill_cart(client, api_variant(), quantity=2)
    response = _checkout(client)
    assert response.status_code == 201
    return response.json()["orderId"]


class TestPlaceOrder:
    def test_checkout_returns_totals(self, client, api_variant):
        _fill_cart(client, api_variant(base_price=300_000.0), quantity=2)

        response = _checkout(client)

        assert response.status_code == 201
        body = response.json()
        assert body["orderCode"].startswith("ORD")
        assert body["totalAmount"] == 600_000.0
        assert body["discountAmount"] == 0.0
        assert body["shippingFee"] == 30_000.0
        assert body["finalAmount"] == 630_000.0

    def test_checkout_empties_the_cart(self, client, order_id):
        response = client.get("/cart/count", headers=CUSTOMER)
        assert response.json() == {"count": 0}

    def test_invalid_phone_is_rejected(self, client, api_variant):
        _fill_cart(client, api_variant())

        response = _checkout(client, shippingPhone="12ab")

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert "shippingPhone" in response.json()["errors"]

    def test_empty_cart(self, client):
        response = _checkout(client)

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Cart is empty", "errors": {"cart": ["Cart is empty"]}}

    def test_insufficient_stock(self, client, api_variant):
        variant_id = api_variant(stock_quantity=2)
        _fill_cart(client, variant_id, quantity=2)
        client.put(f"/variants/{variant_id}/stock", json={"stockQuantity": 1}, headers=STAFF)

        response = _checkout(client)

        assert response.status_code == 400
        assert "has only 1 left in stock" in response.json()["message"]

    def test_idempotency_key_replays_the_order(self, client, api_variant):
        _fill_cart(client, api_variant())
        headers = {**CUSTOMER, "Idempotency-Key": "checkout-1"}

        first = _checkout(client, headers=headers)
        second = _checkout(client, headers=headers)

        assert first.status_code == 201
        assert second.status_code == 201
        assert second.json()["orderId"] == first.json()["orderId"]

    def test_missing_identity(self, client):
        response = client.post("/orders", json=SHIPPING)
        assert response.status_code == 401


class TestReadOrders:
    def test_owner_reads_order(self, client, order_id):
        response = client.get(f"/orders/{order_id}", headers=CUSTOMER)

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "pending"
        assert body["paymentStatus"] == "pending"
        assert body["items"][0]["quantity"] == 2

    def test_other_customer_gets_not_found(self, client, order_id):
        response = client.get(f"/orders/{order_id}", headers=OTHER_CUSTOMER)
        assert response.status_code == 404

    def test_list_my_orders(self, client, order_id):
        response = client.get("/orders", headers=CUSTOMER)

        assert response.status_code == 200
        assert response.json()["total"] == 1
        assert response.json()["orders"][0]["orderId"] == order_id

        assert client.get("/orders", headers=OTHER_CUSTOMER).json()["total"] == 0

    def test_admin_listing_requires_staff(self, client, order_id):
        assert client.get("/orders/admin/all", headers=CUSTOMER).status_code == 403

        response = client.get("/orders/admin/all", params={"status": "pending"}, headers=STAFF)
        assert response.status_code == 200
        assert response.json()["total"] == 1


class TestOrderStatus:
    def test_staff_moves_order_forward(self, client, order_id):
        response = client.put(f"/orders/{order_id}/status", json={"status": "confirmed"}, headers=STAFF)

        assert response.status_code == 200
        assert client.get(f"/orders/{order_id}", headers=CUSTOMER).json()["status"] == "confirmed"

    def test_customer_cannot_change_status(self, client, order_id):
        response = client.put(f"/orders/{order_id}/status", json={"status": "confirmed"}, headers=CUSTOMER)
        assert response.status_code == 403

    def test_illegal_transition(self, client, order_id):
        for status in ("confirmed", "processing", "shipped"):
            client.put(f"/orders/{order_id}/status", json={"status": status}, headers=STAFF)

        response = client.put(f"/orders/{order_id}/status", json={"status": "pending"}, headers=STAFF)

        assert response.status_code == 400
        assert response.json()["message"] == 'Cannot change order status from "shipped" to "pending"'

    def test_unknown_status_value(self, client, order_id):
        response = client.put(f"/orders/{order_id}/status", json={"status": "lost"}, headers=STAFF)
        assert response.status_code == 400


class TestCancelOrder:
    def test_customer_cancels(self, client, order_id):
        response = client.put(f"/orders/{order_id}/cancel", json={"reason": "Changed my mind"}, headers=CUSTOMER)

        assert response.status_code == 200
        body = client.get(f"/orders/{order_id}", headers=CUSTOMER).json()
        assert body["status"] == "cancelled"
        assert body["cancelReason"] == "Changed my mind"

    def test_cancel_without_body(self, client, order_id):
        response = client.put(f"/orders/{order_id}/cancel", headers=CUSTOMER)
        assert response.status_code == 200

    def test_cancel_someone_elses_order(self, client, order_id):
        response = client.put(f"/orders/{order_id}/cancel", headers=OTHER_CUSTOMER)
        assert response.status_code == 404

    def test_cancel_after_processing_started(self, client, order_id):
        client.put(f"/orders/{order_id}/status", json={"status": "confirmed"}, headers=STAFF)
        client.put(f"/orders/{order_id}/status", json={"status": "processing"}, headers=STAFF)

        response = client.put(f"/orders/{order_id}/cancel", headers=CUSTOMER)

        assert response.status_code == 400
