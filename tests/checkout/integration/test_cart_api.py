"""Integration tests for the cart endpoints via TestClient."""

CUSTOMER = {"X-User-ID": "cust-api-001", "X-User-Role": "customer"}


def _add(client, variant_id, quantity=1):
    return client.post("/cart/items", json={"variantId": variant_id, "quantity": quantity}, headers=CUSTOMER)


class TestCartApi:
    def test_empty_cart_is_created_on_read(self, client):
        response = client.get("/cart", headers=CUSTOMER)

        assert response.status_code == 200
        body = response.json()
        assert body["items"] == []
        assert body["totalItems"] == 0
        assert body["totalAmount"] == 0

    def test_add_and_read_items(self, client, api_variant):
        variant_id = api_variant(base_price=250_000.0, stock_quantity=5)

        response = _add(client, variant_id, quantity=2)
        assert response.status_code == 201
        assert response.json()["itemId"]

        body = client.get("/cart", headers=CUSTOMER).json()
        assert body["totalItems"] == 2
        assert body["totalAmount"] == 500_000.0
        item = body["items"][0]
        assert item["variantId"] == variant_id
        assert item["price"] == 250_000.0
        assert item["stock"] == 5
        assert item["isAvailable"] is True

    def test_add_more_than_stock(self, client, api_variant):
        variant_id = api_variant(stock_quantity=1)

        response = _add(client, variant_id, quantity=2)

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_quantity_must_be_positive(self, client, api_variant):
        response = _add(client, api_variant(), quantity=0)
        assert response.status_code == 400

    def test_update_and_remove_item(self, client, api_variant):
        item_id = _add(client, api_variant(stock_quantity=5)).json()["itemId"]

        response = client.put(f"/cart/items/{item_id}", json={"quantity": 4}, headers=CUSTOMER)
        assert response.status_code == 200
        assert client.get("/cart/count", headers=CUSTOMER).json() == {"count": 4}

        response = client.delete(f"/cart/items/{item_id}", headers=CUSTOMER)
        assert response.status_code == 200
        assert client.get("/cart/count", headers=CUSTOMER).json() == {"count": 0}

    def test_clear_cart(self, client, api_variant):
        _add(client, api_variant())
        _add(client, api_variant(product_name="Court Classic"))

        response = client.delete("/cart", headers=CUSTOMER)

        assert response.status_code == 200
        assert client.get("/cart", headers=CUSTOMER).json()["items"] == []
