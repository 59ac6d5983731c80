"""Order event handler — notifies the customer about their orders.

Runs after the order's unit of work has committed. Notifications are a
side channel: a failure here is logged and never undoes the order change.
"""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from checkout.domain import checkout
from checkout.notification.messages import (
    ORDER_PLACED_TITLE,
    ORDER_UPDATE_TITLE,
    order_placed_message,
    status_message,
)
from checkout.notification.notification import Notification
from checkout.order.events import OrderPlaced, OrderStatusChanged

logger = structlog.get_logger(__name__)


def _notify(recipient_id, title, message, data):
    notification = Notification.create(recipient_id=recipient_id, title=title, message=message, data=data)
    current_domain.repository_for(Notification).add(notification)
    return notification


@checkout.event_handler(part_of=Notification, stream_category="checkout::order")
class OrderEventsHandler:
    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        try:
            _notify(
                recipient_id=str(event.customer_id),
                title=ORDER_PLACED_TITLE,
                message=order_placed_message(event.order_code),
                data={"order_id": str(event.order_id), "order_code": event.order_code},
            )
        except Exception as exc:
            logger.error(
                "Failed to create order placed notification",
                order_id=str(event.order_id),
                error=str(exc),
            )

    @handle(OrderStatusChanged)
    def on_order_status_changed(self, event: OrderStatusChanged) -> None:
        message = status_message(event.to_status)
        if message is None:
            logger.info(
                "No notification for order status",
                order_id=str(event.order_id),
                status=event.to_status,
            )
            return

        try:
            _notify(
                recipient_id=str(event.customer_id),
                title=ORDER_UPDATE_TITLE,
                message=message,
                data={"order_id": str(event.order_id), "order_code": event.order_code, "status": event.to_status},
            )
        except Exception as exc:
            logger.error(
                "Failed to create order status notification",
                order_id=str(event.order_id),
                status=event.to_status,
                error=str(exc),
            )
