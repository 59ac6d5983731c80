"""Order placement — turns a customer's cart into an order.

Everything the checkout writes happens in the command handler, inside one
Protean unit of work: the order and its lines, one stock decrement per
line, the promotion redemption and the emptied cart. Validation runs over
every line before anything is changed, and any error raised on the way
discards the whole unit of work.

``place_order`` is the entry point callers use. It holds the checkout locks
for the cart's variants, the promotion code and the customer while the
command is processed, so concurrent checkouts for the last units of a
variant cannot both succeed.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from checkout.cart.cart import ShoppingCart
from checkout.cart.lines import cart_for_customer, load_cart_lines
from checkout.catalogue.variant import ProductVariant
from checkout.domain import checkout
from checkout.errors import EmptyCart
from checkout.order.codes import generate_order_code
from checkout.order.order import Order, PaymentMethod
from checkout.order.pricing import compute_totals
from checkout.promotion.evaluation import evaluate_promotion
from checkout.promotion.promotion import Promotion
from checkout.utils.locks import checkout_locks

logger = structlog.get_logger(__name__)

# Give up if the cart keeps changing while the checkout locks are acquired
_MAX_LOCK_ATTEMPTS = 3


@checkout.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier(required=True)
    shipping_name = String(required=True, max_length=100)
    shipping_phone = String(required=True, max_length=20)
    shipping_address = String(required=True, max_length=500)
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.COD.value)
    promotion_code = String(max_length=50)
    notes = Text()
    idempotency_key = String(max_length=255)


def order_summary(order: Order) -> dict:
    return {
        "order_id": str(order.id),
        "order_code": order.order_code,
        "total_amount": order.total_amount,
        "discount_amount": order.discount_amount,
        "shipping_fee": order.shipping_fee,
        "final_amount": order.final_amount,
    }


@checkout.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        order_repo = current_domain.repository_for(Order)

        if command.idempotency_key:
            existing = order_repo.find_by_idempotency_key(command.customer_id, command.idempotency_key)
            if existing is not None:
                logger.info(
                    "Repeated checkout, returning existing order",
                    order_id=str(existing.id),
                    customer_id=str(command.customer_id),
                )
                return order_summary(existing)

        cart = cart_for_customer(command.customer_id)
        lines = load_cart_lines(cart)
        if not lines:
            raise EmptyCart()

        # Validate every line before touching any stock
        for line in lines:
            line.variant.check_purchasable(line.quantity)

        total_amount = sum(line.subtotal for line in lines)

        evaluation = None
        if command.promotion_code:
            evaluation = evaluate_promotion(command.promotion_code, total_amount)
            if not evaluation.applicable:
                # An unusable code does not block the checkout; the order is priced without it
                logger.info(
                    "Promotion code not applied",
                    customer_id=str(command.customer_id),
                    code=evaluation.code,
                    reason=evaluation.reason,
                )
                evaluation = None

        totals = compute_totals(total_amount, evaluation)

        order = Order.place(
            order_code=generate_order_code(),
            customer_id=command.customer_id,
            lines=[
                {
                    "variant_id": str(line.variant.id),
                    "product_id": str(line.variant.product_id),
                    "product_name": line.variant.product_name,
                    "size": line.variant.size,
                    "color": line.variant.color,
                    "quantity": line.quantity,
                    "unit_price": line.unit_price,
                }
                for line in lines
            ],
            totals=totals,
            shipping_name=command.shipping_name,
            shipping_phone=command.shipping_phone,
            shipping_address=command.shipping_address,
            payment_method=command.payment_method,
            promotion_code=evaluation.code if evaluation else None,
            notes=command.notes,
            idempotency_key=command.idempotency_key,
        )

        variant_repo = current_domain.repository_for(ProductVariant)
        for line in lines:
            line.variant.decrement_stock(line.quantity, order_id=order.id)
            variant_repo.add(line.variant)

        if evaluation is not None:
            promotion_repo = current_domain.repository_for(Promotion)
            promotion = promotion_repo.get(evaluation.promotion_id)
            promotion.redeem(order_id=order.id)
            promotion_repo.add(promotion)

        cart.clear(order_id=order.id)
        current_domain.repository_for(ShoppingCart).add(cart)

        order_repo.add(order)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            order_code=order.order_code,
            customer_id=str(command.customer_id),
            final_amount=order.final_amount,
            promotion_code=order.promotion_code,
        )
        return order_summary(order)


def _cart_variant_ids(customer_id) -> set[str]:
    cart = current_domain.repository_for(ShoppingCart).find_for_customer(customer_id)
    if cart is None:
        return set()
    return {str(item.variant_id) for item in cart.items}


def place_order(command: PlaceOrder) -> dict:
    """Process ``PlaceOrder`` while holding the locks for everything it touches.

    The cart is read once to learn which variants to lock and again once the
    locks are held; if the customer changed the cart in between, the locks
    are released and taken again for the new set.
    """
    for _ in range(_MAX_LOCK_ATTEMPTS):
        variant_ids = _cart_variant_ids(command.customer_id)
        with checkout_locks(variant_ids, command.promotion_code, customer_id=command.customer_id):
            if _cart_variant_ids(command.customer_id) <= variant_ids:
                try:
                    return current_domain.process(command, asynchronous=False)
                except Exception as exc:
                    logger.warning(
                        "Checkout failed",
                        customer_id=str(command.customer_id),
                        error=type(exc).__name__,
                        detail=str(exc),
                    )
                    raise

    raise RuntimeError("Cart changed repeatedly while checking out; please retry")
