"""Order status transitions driven by staff — commands and handler.

Cancelling an order puts back exactly the quantities its lines took, in the
same unit of work as the status change. ``change_order_status`` holds the
variant locks of the order while it does so, so restored stock cannot race
a concurrent checkout of the same variants.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from checkout.catalogue.variant import ProductVariant
from checkout.domain import checkout
from checkout.errors import OrderNotFound
from checkout.order.order import Order, OrderStatus
from checkout.utils.locks import checkout_locks

logger = structlog.get_logger(__name__)


@checkout.command(part_of="Order")
class TransitionOrderStatus:
    order_id = Identifier(required=True)
    status = String(choices=OrderStatus, required=True)
    actor_id = Identifier()
    note = String(max_length=500)


def load_order(order_id) -> Order:
    try:
        return current_domain.repository_for(Order).get(order_id)
    except ObjectNotFoundError as exc:
        raise OrderNotFound(order_id) from exc


def restore_stock(order: Order):
    """Give each line's quantity back to its variant."""
    variant_repo = current_domain.repository_for(ProductVariant)
    for item in order.items:
        variant = variant_repo.get(item.variant_id)
        variant.restore_stock(item.quantity, order_id=order.id)
        variant_repo.add(variant)

    logger.info(
        "Stock restored for cancelled order",
        order_id=str(order.id),
        order_code=order.order_code,
        lines=len(order.items),
    )


@checkout.command_handler(part_of=Order)
class TransitionOrderStatusHandler:
    @handle(TransitionOrderStatus)
    def transition_order_status(self, command):
        order = load_order(command.order_id)
        previous = order.status

        order.transition_to(command.status, actor_id=command.actor_id, note=command.note)
        if order.status == OrderStatus.CANCELLED.value:
            restore_stock(order)

        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order status changed",
            order_id=str(order.id),
            from_status=previous,
            to_status=order.status,
            actor_id=str(command.actor_id) if command.actor_id else None,
        )


def order_variant_ids(order_id) -> set[str]:
    return {str(item.variant_id) for item in load_order(order_id).items}


def change_order_status(command):
    """Process a status command while holding the locks of the order's variants."""
    with checkout_locks(order_variant_ids(command.order_id)):
        return current_domain.process(command, asynchronous=False)
