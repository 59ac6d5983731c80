"""Checkout bounded context — carts, orders, promotions and stock.

Handles the customer's cart, the checkout that turns it into an immutable
order (stock decrement, promotion redemption, cart clearing), and the order
status lifecycle with stock restoration on cancellation.
"""

import structlog
from protean.domain import Domain

checkout = Domain(name="checkout")

logger = structlog.get_logger(__name__)
