"""Customer-facing wording for order notifications."""

ORDER_PLACED_TITLE = "Order placed successfully"
ORDER_UPDATE_TITLE = "Order update"

STATUS_MESSAGES = {
    "confirmed": "Your order has been confirmed",
    "processing": "Your order is being processed",
    "shipped": "Your order is being delivered",
    "delivered": "Your order was delivered successfully",
    "cancelled": "Your order has been cancelled",
    "returned": "Your order has been returned",
}


def order_placed_message(order_code: str) -> str:
    return f"Order {order_code} was created successfully"


def status_message(status: str) -> str | None:
    return STATUS_MESSAGES.get(status)
