"""Order aggregate (CQRS) — an immutable record of a checkout and its lifecycle.

Lines and amounts are frozen when the order is placed: prices come from
the catalogue at that moment and never change afterwards. Only the status,
its timestamps and the payment status move.

State machine:
    pending → confirmed → processing → shipped → delivered
    pending / confirmed / processing → cancelled
    shipped / delivered → returned
    cancelled and returned are terminal.

Customers may only cancel their own orders while pending or confirmed;
staff drive every other transition.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text

from checkout.domain import checkout
from checkout.errors import IllegalTransition, OrderNotCancellable
from checkout.order.events import OrderPlaced, OrderStatusChanged

# Amounts are floats; sums are compared to within one hundredth
_TOLERANCE = 0.01


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    RETURNED = "returned"


class PaymentStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class PaymentMethod(Enum):
    COD = "COD"
    BANK_TRANSFER = "BANK_TRANSFER"
    VNPAY = "VNPAY"
    MOMO = "MOMO"


# State machine transition map
VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.RETURNED},
    OrderStatus.DELIVERED: {OrderStatus.RETURNED},
    OrderStatus.CANCELLED: set(),  # Terminal
    OrderStatus.RETURNED: set(),  # Terminal
}

# States from which the customer may cancel
CUSTOMER_CANCELLABLE_STATES = {OrderStatus.PENDING, OrderStatus.CONFIRMED}

DEFAULT_STAFF_CANCEL_REASON = "Cancelled by staff"
DEFAULT_CUSTOMER_CANCEL_REASON = "Cancelled by customer"


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@checkout.entity(part_of="Order")
class OrderItem:
    """A priced line copied from the cart at checkout.

    Product name, size, color and unit price are snapshots; later catalogue
    edits do not reach placed orders.
    """

    variant_id = Identifier(required=True)
    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    size = String(max_length=20)
    color = String(max_length=50)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    subtotal = Float(required=True, min_value=0.0)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@checkout.aggregate
class Order:
    order_code = String(required=True, max_length=20)
    customer_id = Identifier(required=True)
    items = HasMany(OrderItem)
    total_amount = Float(required=True, min_value=0.0)
    discount_amount = Float(default=0.0, min_value=0.0)
    shipping_fee = Float(default=0.0, min_value=0.0)
    final_amount = Float(required=True, min_value=0.0)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.COD.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    shipping_name = String(required=True, max_length=100)
    shipping_phone = String(required=True, max_length=20)
    shipping_address = String(required=True, max_length=500)
    notes = Text()
    promotion_code = String(max_length=50)
    cancel_reason = String(max_length=500)
    processed_by = Identifier()
    idempotency_key = String(max_length=255)
    created_at = DateTime()
    confirmed_at = DateTime()
    shipped_at = DateTime()
    delivered_at = DateTime()
    cancelled_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def lines_must_add_up(self):
        for item in self.items:
            if abs(item.subtotal - item.unit_price * item.quantity) > _TOLERANCE:
                raise ValidationError({"items": ["Line subtotal must equal unit price times quantity"]})
        if abs(self.total_amount - sum(item.subtotal for item in self.items)) > _TOLERANCE:
            raise ValidationError({"total_amount": ["Total amount must equal the sum of line subtotals"]})

    @invariant.post
    def final_amount_must_match_components(self):
        expected = self.total_amount - (self.discount_amount or 0.0) + (self.shipping_fee or 0.0)
        if abs(self.final_amount - expected) > _TOLERANCE:
            raise ValidationError({"final_amount": ["Final amount must equal total - discount + shipping fee"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        order_code,
        customer_id,
        lines,
        totals,
        shipping_name,
        shipping_phone,
        shipping_address,
        payment_method=PaymentMethod.COD.value,
        promotion_code=None,
        notes=None,
        idempotency_key=None,
    ):
        """Create a pending order from priced cart lines.

        Args:
            lines: List of dicts with variant_id, product_id, product_name,
                   size, color, quantity and unit_price.
            totals: ``OrderTotals`` computed for these lines.
        """
        now = datetime.now(UTC)
        items = [
            OrderItem(
                variant_id=line["variant_id"],
                product_id=line["product_id"],
                product_name=line["product_name"],
                size=line.get("size"),
                color=line.get("color"),
                quantity=line["quantity"],
                unit_price=line["unit_price"],
                subtotal=line["unit_price"] * line["quantity"],
            )
            for line in lines
        ]

        order = cls(
            order_code=order_code,
            customer_id=customer_id,
            items=items,
            total_amount=totals.total_amount,
            discount_amount=totals.discount_amount,
            shipping_fee=totals.shipping_fee,
            final_amount=totals.final_amount,
            status=OrderStatus.PENDING.value,
            payment_method=PaymentMethod(payment_method or PaymentMethod.COD.value).value,
            payment_status=PaymentStatus.PENDING.value,
            shipping_name=shipping_name,
            shipping_phone=shipping_phone,
            shipping_address=shipping_address,
            notes=notes,
            promotion_code=promotion_code,
            idempotency_key=idempotency_key,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_code=order_code,
                customer_id=str(customer_id),
                item_count=len(items),
                total_amount=order.total_amount,
                discount_amount=order.discount_amount,
                shipping_fee=order.shipping_fee,
                final_amount=order.final_amount,
                payment_method=order.payment_method,
                promotion_code=promotion_code,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def can_transition_to(self, target_status) -> bool:
        return OrderStatus(target_status) in VALID_TRANSITIONS[OrderStatus(self.status)]

    def transition_to(self, target_status, actor_id=None, note=None):
        """Move the order to ``target_status``, stamping the matching timestamp.

        Stock restoration for cancellations is the caller's job; the order
        only records the change.
        """
        current = OrderStatus(self.status)
        target = OrderStatus(target_status)
        if not self.can_transition_to(target):
            raise IllegalTransition(current.value, target.value)

        now = datetime.now(UTC)
        with atomic_change(self):
            self.status = target.value
            self.processed_by = actor_id
            self.updated_at = now

            if target == OrderStatus.CONFIRMED:
                self.confirmed_at = now
            elif target == OrderStatus.SHIPPED:
                self.shipped_at = now
            elif target == OrderStatus.DELIVERED:
                self.delivered_at = now
                self.payment_status = PaymentStatus.COMPLETED.value
            elif target == OrderStatus.CANCELLED:
                self.cancelled_at = now
                self.cancel_reason = note or DEFAULT_STAFF_CANCEL_REASON

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                order_code=self.order_code,
                customer_id=str(self.customer_id),
                from_status=current.value,
                to_status=target.value,
                changed_by=str(actor_id) if actor_id else None,
                note=note,
                changed_at=now,
            )
        )

    def cancel_by_customer(self, reason=None):
        """Customer-initiated cancellation, allowed only before processing starts."""
        current = OrderStatus(self.status)
        if current not in CUSTOMER_CANCELLABLE_STATES:
            raise OrderNotCancellable(current.value)

        self.transition_to(
            OrderStatus.CANCELLED.value,
            actor_id=self.customer_id,
            note=reason or DEFAULT_CUSTOMER_CANCEL_REASON,
        )
