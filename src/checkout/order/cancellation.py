"""Customer-initiated order cancellation — command and handler.

A customer may cancel only their own order and only while it is pending or
confirmed. Someone else's order is reported as not found.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from checkout.domain import checkout
from checkout.errors import OrderNotFound
from checkout.order.order import Order
from checkout.order.status import load_order, restore_stock


@checkout.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    reason = String(max_length=500)


@checkout.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        order = load_order(command.order_id)
        if str(order.customer_id) != str(command.customer_id):
            raise OrderNotFound(command.order_id)

        order.cancel_by_customer(reason=command.reason)
        restore_stock(order)

        current_domain.repository_for(Order).add(order)
