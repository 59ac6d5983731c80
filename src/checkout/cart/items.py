"""Cart item management — commands and handler.

Stock and availability are checked when a line is added or changed, so a
customer cannot put more into the cart than is on the shelf at that moment.
Checkout checks again, because stock may have moved since.
"""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from checkout.cart.cart import ShoppingCart
from checkout.cart.lines import cart_for_customer
from checkout.catalogue.variant import ProductVariant
from checkout.domain import checkout


@checkout.command(part_of="ShoppingCart")
class AddToCart:
    customer_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    quantity = Integer(default=1, min_value=1)


@checkout.command(part_of="ShoppingCart")
class UpdateCartQuantity:
    customer_id = Identifier(required=True)
    item_id = Identifier(required=True)
    new_quantity = Integer(required=True, min_value=1)


@checkout.command(part_of="ShoppingCart")
class RemoveFromCart:
    customer_id = Identifier(required=True)
    item_id = Identifier(required=True)


@checkout.command(part_of="ShoppingCart")
class ClearCart:
    customer_id = Identifier(required=True)


@checkout.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        variant = current_domain.repository_for(ProductVariant).get(command.variant_id)
        cart = cart_for_customer(command.customer_id)

        quantity = command.quantity or 1
        existing = cart.item_for_variant(command.variant_id)
        variant.check_purchasable(quantity + (existing.quantity if existing else 0))

        item_id = cart.add_item(variant_id=command.variant_id, quantity=quantity)
        current_domain.repository_for(ShoppingCart).add(cart)
        return item_id

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        cart = cart_for_customer(command.customer_id)
        item = cart.get_item(command.item_id)

        variant = current_domain.repository_for(ProductVariant).get(item.variant_id)
        variant.check_purchasable(command.new_quantity)

        cart.update_item_quantity(item_id=command.item_id, new_quantity=command.new_quantity)
        current_domain.repository_for(ShoppingCart).add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        cart = cart_for_customer(command.customer_id)
        cart.remove_item(item_id=command.item_id)
        current_domain.repository_for(ShoppingCart).add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        cart = cart_for_customer(command.customer_id)
        cart.clear()
        current_domain.repository_for(ShoppingCart).add(cart)
