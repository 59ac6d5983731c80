"""Domain events for the ShoppingCart aggregate."""

from protean.fields import Identifier, Integer

from checkout.domain import checkout


@checkout.event(part_of="ShoppingCart")
class CartItemAdded:
    """A variant was added to the cart, or its line quantity increased."""

    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    quantity = Integer(required=True)


@checkout.event(part_of="ShoppingCart")
class CartQuantityUpdated:
    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@checkout.event(part_of="ShoppingCart")
class CartItemRemoved:
    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)


@checkout.event(part_of="ShoppingCart")
class CartCleared:
    """All lines were removed, either by the customer or by a placed order."""

    __version__ = 1

    cart_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    order_id = Identifier()  # Set when the cart was consumed by checkout
    items_removed = Integer(required=True)
