"""Business-rule errors raised by the checkout domain.

Each error is a Protean ``ValidationError`` so that aggregates and handlers
raise them the same way they raise field validation failures, and the API
layer maps the whole family to a 400 response. ``OrderNotFound`` extends
``ObjectNotFoundError`` and is surfaced as a 404.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


class CheckoutError(ValidationError):
    """Base class for checkout business-rule violations."""

    field = "checkout"

    def __init__(self, message: str):
        self.message = message
        super().__init__({self.field: [message]})


class EmptyCart(CheckoutError):
    field = "cart"

    def __init__(self):
        super().__init__("Cart is empty")


class ProductUnavailable(CheckoutError):
    field = "items"

    def __init__(self, product_name: str):
        self.product_name = product_name
        super().__init__(f'Product "{product_name}" is currently unavailable')


class InsufficientStock(CheckoutError):
    field = "items"

    def __init__(self, product_name: str, available: int, size: str | None = None, color: str | None = None):
        self.product_name = product_name
        self.available = available
        variant = f" ({size}/{color})" if size or color else ""
        super().__init__(f'Product "{product_name}"{variant} has only {available} left in stock')


class PromotionNotApplicable(CheckoutError):
    field = "promotion_code"

    def __init__(self, code: str, reason: str):
        self.code = code
        self.reason = reason
        super().__init__(reason)


class DuplicatePromotionCode(CheckoutError):
    field = "code"

    def __init__(self, code: str):
        self.code = code
        super().__init__(f'Promotion code "{code}" already exists')


class IllegalTransition(CheckoutError):
    field = "status"

    def __init__(self, from_status: str, to_status: str):
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(f'Cannot change order status from "{from_status}" to "{to_status}"')


class OrderNotCancellable(CheckoutError):
    field = "status"

    def __init__(self, status: str):
        self.status = status
        super().__init__(f'Order cannot be cancelled in "{status}" status')


class OrderNotFound(ObjectNotFoundError):
    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order {order_id} not found")
