"""Tests for Order state machine — valid transitions and invalid transition guards."""

import pytest
from checkout.errors import IllegalTransition, OrderNotCancellable
from checkout.order.events import OrderStatusChanged
from checkout.order.order import Order, OrderStatus, PaymentStatus
from checkout.order.pricing import OrderTotals

_PATH = {
    OrderStatus.PENDING: [],
    OrderStatus.CONFIRMED: ["confirmed"],
    OrderStatus.PROCESSING: ["confirmed", "processing"],
    OrderStatus.SHIPPED: ["confirmed", "processing", "shipped"],
    OrderStatus.DELIVERED: ["confirmed", "processing", "shipped", "delivered"],
    OrderStatus.CANCELLED: ["cancelled"],
    OrderStatus.RETURNED: ["confirmed", "processing", "shipped", "returned"],
}


def _make_order():
    return Order.place(
        order_code="ORD260615ABC123",
        customer_id="cust-001",
        lines=[
            {
                "variant_id": "var-001",
                "product_id": "prod-001",
                "product_name": "Runner 2",
                "size": "42",
                "color": "Black",
                "quantity": 1,
                "unit_price": 500_000.0,
            }
        ],
        totals=OrderTotals(total_amount=500_000.0, discount_amount=0.0, shipping_fee=30_000.0),
        shipping_name="Nguyen Van A",
        shipping_phone="0901234567",
        shipping_address="12 Le Loi",
    )


def _order_at_state(target_status):
    order = _make_order()
    for status in _PATH[target_status]:
        order.transition_to(status, actor_id="staff-001")
    order._events.clear()
    return order


class TestValidTransitions:
    @pytest.mark.parametrize(
        "source,target",
        [
            (OrderStatus.PENDING, OrderStatus.CONFIRMED),
            (OrderStatus.PENDING, OrderStatus.CANCELLED),
            (OrderStatus.CONFIRMED, OrderStatus.PROCESSING),
            (OrderStatus.CONFIRMED, OrderStatus.CANCELLED),
            (OrderStatus.PROCESSING, OrderStatus.SHIPPED),
            (OrderStatus.PROCESSING, OrderStatus.CANCELLED),
            (OrderStatus.SHIPPED, OrderStatus.DELIVERED),
            (OrderStatus.SHIPPED, OrderStatus.RETURNED),
            (OrderStatus.DELIVERED, OrderStatus.RETURNED),
        ],
    )
    def test_transition_is_allowed(self, source, target):
        order = _order_at_state(source)
        order.transition_to(target.value, actor_id="staff-001")
        assert order.status == target.value
        assert order.processed_by == "staff-001"

    def test_transition_raises_status_changed_event(self):
        order = _order_at_state(OrderStatus.PENDING)
        order.transition_to("confirmed", actor_id="staff-001", note="Phone verified")

        assert len(order._events) == 1
        event = order._events[0]
        assert isinstance(event, OrderStatusChanged)
        assert event.from_status == "pending"
        assert event.to_status == "confirmed"
        assert event.customer_id == "cust-001"
        assert event.note == "Phone verified"


class TestInvalidTransitions:
    def test_shipped_back_to_pending_is_rejected(self):
        order = _order_at_state(OrderStatus.SHIPPED)
        with pytest.raises(IllegalTransition) as exc:
            order.transition_to("pending", actor_id="staff-001")

        assert exc.value.from_status == "shipped"
        assert exc.value.to_status == "pending"
        assert order.status == "shipped"
        assert order._events == []

    @pytest.mark.parametrize("terminal", [OrderStatus.CANCELLED, OrderStatus.RETURNED])
    @pytest.mark.parametrize("target", list(OrderStatus))
    def test_terminal_states_have_no_exits(self, terminal, target):
        order = _order_at_state(terminal)
        with pytest.raises(IllegalTransition):
            order.transition_to(target.value)

    def test_delivered_cannot_be_cancelled(self):
        order = _order_at_state(OrderStatus.DELIVERED)
        with pytest.raises(IllegalTransition):
            order.transition_to("cancelled")

    def test_pending_cannot_skip_to_shipped(self):
        order = _order_at_state(OrderStatus.PENDING)
        assert order.can_transition_to("shipped") is False
        with pytest.raises(IllegalTransition):
            order.transition_to("shipped")


class TestTransitionSideEffects:
    def test_confirmed_stamps_confirmed_at(self):
        order = _order_at_state(OrderStatus.PENDING)
        order.transition_to("confirmed")
        assert order.confirmed_at is not None

    def test_shipped_stamps_shipped_at(self):
        order = _order_at_state(OrderStatus.PROCESSING)
        order.transition_to("shipped")
        assert order.shipped_at is not None

    def test_delivered_completes_payment(self):
        order = _order_at_state(OrderStatus.SHIPPED)
        assert order.payment_status == PaymentStatus.PENDING.value

        order.transition_to("delivered")

        assert order.delivered_at is not None
        assert order.payment_status == PaymentStatus.COMPLETED.value

    def test_staff_cancellation_uses_default_reason(self):
        order = _order_at_state(OrderStatus.CONFIRMED)
        order.transition_to("cancelled", actor_id="staff-001")
        assert order.cancelled_at is not None
        assert order.cancel_reason == "Cancelled by staff"

    def test_staff_cancellation_keeps_given_note(self):
        order = _order_at_state(OrderStatus.PROCESSING)
        order.transition_to("cancelled", actor_id="staff-001", note="Out of stock at warehouse")
        assert order.cancel_reason == "Out of stock at warehouse"


class TestCustomerCancellation:
    @pytest.mark.parametrize("status", [OrderStatus.PENDING, OrderStatus.CONFIRMED])
    def test_customer_can_cancel_early_orders(self, status):
        order = _order_at_state(status)
        order.cancel_by_customer(reason="Changed my mind")
        assert order.status == "cancelled"
        assert order.cancel_reason == "Changed my mind"
        assert order.processed_by == "cust-001"

    def test_customer_cancellation_default_reason(self):
        order = _order_at_state(OrderStatus.PENDING)
        order.cancel_by_customer()
        assert order.cancel_reason == "Cancelled by customer"

    @pytest.mark.parametrize(
        "status",
        [OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELLED],
    )
    def test_customer_cannot_cancel_later_orders(self, status):
        order = _order_at_state(status)
        with pytest.raises(OrderNotCancellable):
            order.cancel_by_customer()
        assert order.status == status.value
