"""Checkout domain API package."""

from checkout.api.errors import register_error_handlers
from checkout.api.routes import (
    cart_router,
    notification_router,
    order_router,
    promotion_router,
    variant_router,
)

__all__ = [
    "cart_router",
    "notification_router",
    "order_router",
    "promotion_router",
    "register_error_handlers",
    "variant_router",
]
