"""ProductVariant aggregate (CQRS) — the catalogue data checkout depends on.

The catalogue owns products; checkout keeps one record per purchasable
size/color combination with the price, the live stock counter and the
availability flags it needs. Checkout only reads these records, takes stock
when an order is placed and gives it back when the order is cancelled.

Stock is a conditional counter: ``decrement_stock`` re-checks the available
quantity at write time and refuses to go below zero.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, String

from checkout.catalogue.events import (
    StockAdjusted,
    StockDecremented,
    StockRestored,
    VariantRegistered,
    VariantStatusChanged,
)
from checkout.domain import checkout
from checkout.errors import InsufficientStock, ProductUnavailable


class VariantStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


@checkout.aggregate
class ProductVariant:
    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    size = String(max_length=20)
    color = String(max_length=50)
    sku = String(max_length=50)
    base_price = Float(required=True, min_value=0.0)
    price = Float(min_value=0.0)  # Variant override of the product price
    stock_quantity = Integer(default=0, min_value=0)
    status = String(choices=VariantStatus, default=VariantStatus.ACTIVE.value)
    product_status = String(choices=VariantStatus, default=VariantStatus.ACTIVE.value)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def register(
        cls,
        product_id,
        product_name,
        base_price,
        stock_quantity=0,
        size=None,
        color=None,
        sku=None,
        price=None,
        variant_id=None,
    ):
        now = datetime.now(UTC)
        attributes = dict(
            product_id=product_id,
            product_name=product_name,
            size=size,
            color=color,
            sku=sku,
            base_price=base_price,
            price=price,
            stock_quantity=stock_quantity,
            status=VariantStatus.ACTIVE.value,
            product_status=VariantStatus.ACTIVE.value,
            created_at=now,
            updated_at=now,
        )
        if variant_id is not None:
            attributes["id"] = variant_id

        variant = cls(**attributes)
        variant.raise_(
            VariantRegistered(
                variant_id=str(variant.id),
                product_id=str(product_id),
                product_name=product_name,
                size=size,
                color=color,
                stock_quantity=stock_quantity,
                registered_at=now,
            )
        )
        return variant

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    @property
    def unit_price(self) -> float:
        """The variant's own price when set, otherwise the product's base price."""
        return self.price if self.price else self.base_price

    @property
    def is_available(self) -> bool:
        return self.status == VariantStatus.ACTIVE.value and self.product_status == VariantStatus.ACTIVE.value

    def check_purchasable(self, quantity):
        """Raise if ``quantity`` units of this variant cannot be sold right now."""
        if not self.is_available:
            raise ProductUnavailable(self.product_name)
        if self.stock_quantity < quantity:
            raise InsufficientStock(self.product_name, self.stock_quantity, self.size, self.color)

    # -------------------------------------------------------------------
    # Stock movements
    # -------------------------------------------------------------------
    def decrement_stock(self, quantity, order_id):
        """Take ``quantity`` units for an order, never going below zero."""
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})
        self.check_purchasable(quantity)

        previous = self.stock_quantity
        self.stock_quantity = previous - quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            StockDecremented(
                variant_id=str(self.id),
                order_id=str(order_id),
                quantity=quantity,
                previous_quantity=previous,
                new_quantity=self.stock_quantity,
            )
        )

    def restore_stock(self, quantity, order_id):
        """Give back exactly what a cancelled order took, whatever the current level."""
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})

        previous = self.stock_quantity
        self.stock_quantity = previous + quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            StockRestored(
                variant_id=str(self.id),
                order_id=str(order_id),
                quantity=quantity,
                previous_quantity=previous,
                new_quantity=self.stock_quantity,
            )
        )

    def adjust_stock(self, new_quantity, reason=None):
        """Set the stock level directly (catalogue sync or stock count)."""
        if new_quantity < 0:
            raise ValidationError({"stock_quantity": ["Stock quantity cannot be negative"]})

        previous = self.stock_quantity
        self.stock_quantity = new_quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            StockAdjusted(
                variant_id=str(self.id),
                previous_quantity=previous,
                new_quantity=new_quantity,
                reason=reason,
            )
        )

    def change_status(self, status=None, product_status=None):
        if status is not None:
            self.status = VariantStatus(status).value
        if product_status is not None:
            self.product_status = VariantStatus(product_status).value
        self.updated_at = datetime.now(UTC)

        self.raise_(
            VariantStatusChanged(
                variant_id=str(self.id),
                status=self.status,
                product_status=self.product_status,
            )
        )
