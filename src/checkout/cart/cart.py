"""Shopping Cart aggregate (CQRS) — the customer's pending selection of variants.

Every customer has exactly one cart, created on first access. Lines are
keyed by variant: adding a variant that is already in the cart increases
its quantity. Checkout reads the lines and empties the cart once the order
is stored; the cart record itself is kept and reused.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer

from checkout.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartQuantityUpdated
from checkout.domain import checkout


@checkout.entity(part_of="ShoppingCart")
class CartItem:
    variant_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()


@checkout.aggregate
class ShoppingCart:
    customer_id = Identifier(required=True)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def one_line_per_variant(self):
        variant_ids = [str(item.variant_id) for item in self.items]
        if len(variant_ids) != len(set(variant_ids)):
            raise ValidationError({"items": ["A variant can appear only once in the cart"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_id):
        now = datetime.now(UTC)
        return cls(customer_id=customer_id, created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    @property
    def is_empty(self) -> bool:
        return not self.items

    def item_for_variant(self, variant_id):
        return next((i for i in self.items if str(i.variant_id) == str(variant_id)), None)

    def get_item(self, item_id):
        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            raise ValidationError({"item_id": ["Item not found in cart"]})
        return item

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, variant_id, quantity):
        """Add a variant to the cart (or increase its quantity if already present)."""
        existing = self.item_for_variant(variant_id)
        now = datetime.now(UTC)

        if existing:
            existing.quantity += quantity
            item_id = str(existing.id)
        else:
            item = CartItem(variant_id=variant_id, quantity=quantity, added_at=now)
            self.add_items(item)
            item_id = str(item.id)

        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                item_id=item_id,
                variant_id=str(variant_id),
                quantity=quantity,
            )
        )
        return item_id

    def update_item_quantity(self, item_id, new_quantity):
        item = self.get_item(item_id)

        previous_quantity = item.quantity
        item.quantity = new_quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                item_id=str(item_id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
            )
        )

    def remove_item(self, item_id):
        item = self.get_item(item_id)

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartItemRemoved(cart_id=str(self.id), item_id=str(item_id)))

    def clear(self, order_id=None):
        """Remove every line. ``order_id`` is set when checkout consumed the cart."""
        removed = len(self.items)
        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                customer_id=str(self.customer_id),
                order_id=str(order_id) if order_id else None,
                items_removed=removed,
            )
        )
