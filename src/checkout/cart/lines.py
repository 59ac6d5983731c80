"""Cart lines joined with live catalogue data.

The cart stores only variant ids and quantities; prices, names, stock and
availability always come from the current ``ProductVariant`` records, both
for display and when an order is assembled.
"""

from dataclasses import dataclass

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from checkout.cart.cart import ShoppingCart
from checkout.catalogue.variant import ProductVariant
from checkout.errors import ProductUnavailable

logger = structlog.get_logger(__name__)


@dataclass
class CartLine:
    item_id: str
    quantity: int
    variant: ProductVariant

    @property
    def unit_price(self) -> float:
        return self.variant.unit_price

    @property
    def subtotal(self) -> float:
        return self.unit_price * self.quantity

    @property
    def is_available(self) -> bool:
        return self.variant.is_available and self.variant.stock_quantity >= self.quantity


def cart_for_customer(customer_id) -> ShoppingCart:
    """Return the customer's cart, creating it on first access."""
    repo = current_domain.repository_for(ShoppingCart)
    cart = repo.find_for_customer(customer_id)
    if cart is None:
        cart = ShoppingCart.create(customer_id=customer_id)
        repo.add(cart)
    return cart


def load_cart_lines(cart: ShoppingCart, skip_missing=False) -> list[CartLine]:
    """Join each cart item with its variant, in the order items were added.

    A variant that has left the catalogue makes the line unpurchasable:
    ``ProductUnavailable`` is raised, unless ``skip_missing`` asks for such
    lines to be left out (cart display).
    """
    variant_repo = current_domain.repository_for(ProductVariant)
    items = sorted(cart.items, key=lambda i: (i.added_at is None, i.added_at))

    lines = []
    for item in items:
        try:
            variant = variant_repo.get(item.variant_id)
        except ObjectNotFoundError as exc:
            if skip_missing:
                logger.warning("Cart line without variant", cart_id=str(cart.id), variant_id=str(item.variant_id))
                continue
            raise ProductUnavailable(str(item.variant_id)) from exc
        lines.append(CartLine(item_id=str(item.id), quantity=item.quantity, variant=variant))
    return lines
