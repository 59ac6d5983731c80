"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from checkout.domain import checkout


@checkout.event(part_of="Order")
class OrderPlaced:
    """A cart was turned into an order; stock and promotion usage were taken."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_code = String(required=True)
    customer_id = Identifier(required=True)
    item_count = Integer(required=True)
    total_amount = Float(required=True)
    discount_amount = Float(required=True)
    shipping_fee = Float(required=True)
    final_amount = Float(required=True)
    payment_method = String(required=True)
    promotion_code = String()
    placed_at = DateTime(required=True)


@checkout.event(part_of="Order")
class OrderStatusChanged:
    """An order moved along its lifecycle."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_code = String(required=True)
    customer_id = Identifier(required=True)
    from_status = String(required=True)
    to_status = String(required=True)
    changed_by = Identifier()
    note = String()
    changed_at = DateTime(required=True)
