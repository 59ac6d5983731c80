"""Checkout load test scenarios.

CheckoutUser walks a shopper from an empty cart to a placed order and,
sometimes, a cancellation. LastPairsUser sends many shoppers after the
last few pairs of a single variant, so exactly that many checkouts should
succeed and the rest come back 400. OrderDeskUser plays the staff side,
moving pending orders along the status machine.
"""

import random

from gevent.lock import Semaphore
from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    admin_headers,
    cart_item_data,
    checkout_data,
    headers_for,
    idempotency_headers,
    promotion_data,
    shopper_id,
    staff_headers,
    variant_data,
)
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import ShopperState

NEXT_STATUS = {"pending": "confirmed", "confirmed": "processing", "processing": "shipped", "shipped": "delivered"}


def register_variant(client, stock_quantity=None) -> str | None:
    with client.post(
        "/variants",
        json=variant_data(stock_quantity),
        headers=admin_headers(),
        catch_response=True,
        name="POST /variants",
    ) as resp:
        if resp.status_code == 201:
            return resp.json()["variantId"]
        resp.failure(f"Register variant failed: {resp.status_code} — {extract_error_detail(resp)}")
        return None


class CheckoutJourney(SequentialTaskSet):
    """Register Variants -> Add Items -> Update Quantity -> View Cart ->
    Verify Promotion -> Place Order -> View Order -> (Cancel).

    Generates events: CartItemAdded (x2), CartQuantityUpdated, OrderPlaced,
    StockDecremented (x2), CartCleared and, for one journey in four,
    OrderStatusChanged with the stock restored.
    """

    def on_start(self):
        self.state = ShopperState(customer_id=shopper_id())
        self.headers = headers_for(self.state.customer_id)

    @task
    def register_variants(self):
        for _ in range(2):
            variant_id = register_variant(self.client)
            if variant_id is None:
                self.interrupt()
            self.state.variant_ids.append(variant_id)

    @task
    def add_items(self):
        for variant_id in self.state.variant_ids:
            with self.client.post(
                "/cart/items",
                json=cart_item_data(variant_id),
                headers=self.headers,
                catch_response=True,
                name="POST /cart/items",
            ) as resp:
                if resp.status_code == 201:
                    self.state.item_ids.append(resp.json()["itemId"])
                else:
                    resp.failure(f"Add cart item failed: {resp.status_code} — {extract_error_detail(resp)}")
                    self.interrupt()

    @task
    def update_quantity(self):
        item_id = random.choice(self.state.item_ids)
        with self.client.put(
            f"/cart/items/{item_id}",
            json={"quantity": random.randint(1, 4)},
            headers=self.headers,
            catch_response=True,
            name="PUT /cart/items/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Update quantity failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def view_cart(self):
        self.client.get("/cart", headers=self.headers, name="GET /cart")

    @task
    def verify_promotion(self):
        if random.random() < 0.5:
            return
        payload = promotion_data(usage_limit=random.choice([None, 10, 100]))
        with self.client.post(
            "/promotions",
            json=payload,
            headers=admin_headers(),
            catch_response=True,
            name="POST /promotions",
        ) as resp:
            if resp.status_code != 201:
                resp.failure(f"Create promotion failed: {resp.status_code} — {extract_error_detail(resp)}")
                return
        self.state.promotion_code = payload["code"]
        # A 400 here is an expected answer (minimum order, exhausted), not a failure
        with self.client.post(
            "/promotions/verify",
            json={"code": self.state.promotion_code, "orderAmount": 1_000_000},
            headers=self.headers,
            catch_response=True,
            name="POST /promotions/verify",
        ) as resp:
            if resp.status_code in (200, 400):
                resp.success()

    @task
    def place_order(self):
        with self.client.post(
            "/orders",
            json=checkout_data(self.state.promotion_code),
            headers=idempotency_headers(self.state.customer_id),
            catch_response=True,
            name="POST /orders",
        ) as resp:
            if resp.status_code == 201:
                body = resp.json()
                self.state.order_id = body["orderId"]
                self.state.order_code = body["orderCode"]
            else:
                resp.failure(f"Place order failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def view_order(self):
        self.client.get(f"/orders/{self.state.order_id}", headers=self.headers, name="GET /orders/{id}")

    @task
    def maybe_cancel(self):
        if random.random() >= 0.25:
            return
        with self.client.put(
            f"/orders/{self.state.order_id}/cancel",
            json={"reason": "Changed my mind"},
            headers=self.headers,
            catch_response=True,
            name="PUT /orders/{id}/cancel",
        ) as resp:
            # Staff may have moved the order past the cancellable states already
            if resp.status_code in (200, 400):
                resp.success()

    @task
    def done(self):
        self.interrupt()


class CheckoutUser(HttpUser):
    tasks = [CheckoutJourney]
    wait_time = between(0.5, 2)


class LastPairsUser(HttpUser):
    """Many shoppers, one variant with a handful of pairs left.

    The first user to start registers the variant; everyone else joins the
    race for it. Refusals (400) are the expected outcome for all but the
    winners and are not counted as failures.
    """

    wait_time = between(0.1, 0.5)
    pairs_left = 5

    _variant_id = None
    _registration = Semaphore()

    def on_start(self):
        with LastPairsUser._registration:
            if LastPairsUser._variant_id is None:
                LastPairsUser._variant_id = register_variant(self.client, stock_quantity=self.pairs_left)
        self.customer_id = shopper_id()
        self.headers = headers_for(self.customer_id)

    @task
    def race_for_last_pairs(self):
        if LastPairsUser._variant_id is None:
            return
        resp = self.client.post(
            "/cart/items",
            json=cart_item_data(LastPairsUser._variant_id, quantity=1),
            headers=self.headers,
            name="POST /cart/items [contended]",
        )
        if resp.status_code != 201:
            return

        with self.client.post(
            "/orders",
            json=checkout_data(),
            headers=self.headers,
            catch_response=True,
            name="POST /orders",
        ) as resp:
            if resp.status_code in (201, 400):
                resp.success()


class OrderDeskUser(HttpUser):
    """Staff working through the order queue."""

    wait_time = between(1, 3)

    def on_start(self):
        self.headers = staff_headers()

    @task(3)
    def advance_orders(self):
        status = random.choice(list(NEXT_STATUS))
        resp = self.client.get(
            "/orders/admin/all",
            params={"status": status, "limit": 5},
            headers=self.headers,
            name="GET /orders/admin/all",
        )
        if resp.status_code != 200:
            return

        for order in resp.json()["orders"]:
            with self.client.put(
                f"/orders/{order['orderId']}/status",
                json={"status": NEXT_STATUS[status]},
                headers=self.headers,
                catch_response=True,
                name="PUT /orders/{id}/status",
            ) as update:
                # Another desk user may have moved it first
                if update.status_code in (200, 400, 409):
                    update.success()

    @task(1)
    def cancel_one(self):
        resp = self.client.get(
            "/orders/admin/all",
            params={"status": "processing", "limit": 1},
            headers=self.headers,
            name="GET /orders/admin/all",
        )
        if resp.status_code != 200 or not resp.json()["orders"]:
            return

        order_id = resp.json()["orders"][0]["orderId"]
        with self.client.put(
            f"/orders/{order_id}/status",
            json={"status": "cancelled", "note": "Out of stock at warehouse"},
            headers=self.headers,
            catch_response=True,
            name="PUT /orders/{id}/status",
        ) as update:
            if update.status_code in (200, 400, 409):
                update.success()
