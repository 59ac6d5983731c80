"""Domain events for the ProductVariant aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from checkout.domain import checkout


@checkout.event(part_of="ProductVariant")
class VariantRegistered:
    """A purchasable variant was registered from the catalogue."""

    __version__ = 1

    variant_id = Identifier(required=True)
    product_id = Identifier(required=True)
    product_name = String(required=True)
    size = String()
    color = String()
    stock_quantity = Integer(required=True)
    registered_at = DateTime(required=True)


@checkout.event(part_of="ProductVariant")
class StockDecremented:
    """Stock was taken for an order at checkout."""

    __version__ = 1

    variant_id = Identifier(required=True)
    order_id = Identifier(required=True)
    quantity = Integer(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@checkout.event(part_of="ProductVariant")
class StockRestored:
    """Stock was given back because an order was cancelled."""

    __version__ = 1

    variant_id = Identifier(required=True)
    order_id = Identifier(required=True)
    quantity = Integer(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@checkout.event(part_of="ProductVariant")
class StockAdjusted:
    """Stock level was set by a catalogue sync or an admin."""

    __version__ = 1

    variant_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    reason = String()


@checkout.event(part_of="ProductVariant")
class VariantStatusChanged:
    """The variant or its product was activated or deactivated."""

    __version__ = 1

    variant_id = Identifier(required=True)
    status = String(required=True)
    product_status = String(required=True)
