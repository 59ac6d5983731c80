"""Variant management — commands and handler.

Keeps checkout's copy of the catalogue in step: registration of new
variants, stock counts and activation changes.
"""

from protean import handle
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from checkout.catalogue.variant import ProductVariant, VariantStatus
from checkout.domain import checkout


@checkout.command(part_of="ProductVariant")
class RegisterVariant:
    variant_id = Identifier()  # Optional; generated when omitted
    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    size = String(max_length=20)
    color = String(max_length=50)
    sku = String(max_length=50)
    base_price = Float(required=True, min_value=0.0)
    price = Float(min_value=0.0)
    stock_quantity = Integer(default=0, min_value=0)


@checkout.command(part_of="ProductVariant")
class AdjustStock:
    variant_id = Identifier(required=True)
    stock_quantity = Integer(required=True, min_value=0)
    reason = String(max_length=255)


@checkout.command(part_of="ProductVariant")
class ChangeVariantStatus:
    variant_id = Identifier(required=True)
    status = String(choices=VariantStatus)
    product_status = String(choices=VariantStatus)


@checkout.command_handler(part_of=ProductVariant)
class ManageVariantHandler:
    @handle(RegisterVariant)
    def register_variant(self, command):
        variant = ProductVariant.register(
            variant_id=command.variant_id,
            product_id=command.product_id,
            product_name=command.product_name,
            size=command.size,
            color=command.color,
            sku=command.sku,
            base_price=command.base_price,
            price=command.price,
            stock_quantity=command.stock_quantity or 0,
        )
        current_domain.repository_for(ProductVariant).add(variant)
        return str(variant.id)

    @handle(AdjustStock)
    def adjust_stock(self, command):
        repo = current_domain.repository_for(ProductVariant)
        variant = repo.get(command.variant_id)
        variant.adjust_stock(command.stock_quantity, reason=command.reason)
        repo.add(variant)

    @handle(ChangeVariantStatus)
    def change_status(self, command):
        repo = current_domain.repository_for(ProductVariant)
        variant = repo.get(command.variant_id)
        variant.change_status(status=command.status, product_status=command.product_status)
        repo.add(variant)
