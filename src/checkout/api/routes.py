"""FastAPI routes for the Checkout domain — orders, cart, promotions, variants."""

from fastapi import APIRouter, Depends, Header, Query
from protean.utils.globals import current_domain

from checkout.api.auth import Caller, admin_caller, current_caller, staff_caller
from checkout.api.schemas import (
    AddToCartRequest,
    AdjustStockRequest,
    CancelOrderRequest,
    CartItemIdResponse,
    CartItemResponse,
    CartResponse,
    ChangeVariantStatusRequest,
    CreatePromotionRequest,
    NotificationResponse,
    OrderItemResponse,
    OrderListResponse,
    OrderPlacedResponse,
    OrderResponse,
    PlaceOrderRequest,
    PromotionIdResponse,
    PromotionResponse,
    RegisterVariantRequest,
    StatusResponse,
    UpdateCartItemRequest,
    UpdateOrderStatusRequest,
    UpdatePromotionRequest,
    VariantIdResponse,
    VariantResponse,
    VerifyPromotionRequest,
    VerifyPromotionResponse,
)
from checkout.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartQuantity
from checkout.cart.lines import cart_for_customer, load_cart_lines
from checkout.catalogue.management import AdjustStock, ChangeVariantStatus, RegisterVariant
from checkout.catalogue.variant import ProductVariant
from checkout.errors import OrderNotFound, PromotionNotApplicable
from checkout.notification.notification import Notification
from checkout.notification.reading import MarkNotificationRead
from checkout.order.cancellation import CancelOrder
from checkout.order.order import Order
from checkout.order.placement import PlaceOrder, place_order
from checkout.order.status import TransitionOrderStatus, change_order_status, load_order
from checkout.promotion.evaluation import evaluate_promotion
from checkout.promotion.management import CreatePromotion, DeactivatePromotion, UpdatePromotion
from checkout.promotion.promotion import Promotion
from checkout.utils.locks import checkout_locks


def _order_response(order: Order) -> OrderResponse:
    return OrderResponse(
        order_id=str(order.id),
        order_code=order.order_code,
        customer_id=str(order.customer_id),
        status=order.status,
        payment_method=order.payment_method,
        payment_status=order.payment_status,
        total_amount=order.total_amount,
        discount_amount=order.discount_amount,
        shipping_fee=order.shipping_fee,
        final_amount=order.final_amount,
        shipping_name=order.shipping_name,
        shipping_phone=order.shipping_phone,
        shipping_address=order.shipping_address,
        notes=order.notes,
        promotion_code=order.promotion_code,
        cancel_reason=order.cancel_reason,
        created_at=order.created_at,
        confirmed_at=order.confirmed_at,
        shipped_at=order.shipped_at,
        delivered_at=order.delivered_at,
        cancelled_at=order.cancelled_at,
        items=[
            OrderItemResponse(
                item_id=str(item.id),
                variant_id=str(item.variant_id),
                product_id=str(item.product_id),
                product_name=item.product_name,
                size=item.size,
                color=item.color,
                quantity=item.quantity,
                unit_price=item.unit_price,
                subtotal=item.subtotal,
            )
            for item in order.items
        ],
    )


def _order_list_response(result, page, limit) -> OrderListResponse:
    return OrderListResponse(
        orders=[_order_response(order) for order in result.items],
        total=result.total,
        page=page,
        limit=limit,
    )


def _promotion_response(promotion: Promotion) -> PromotionResponse:
    return PromotionResponse(
        promotion_id=str(promotion.id),
        code=promotion.code,
        name=promotion.name,
        description=promotion.description,
        discount_type=promotion.discount_type,
        discount_value=promotion.discount_value,
        min_order_amount=promotion.min_order_amount or 0.0,
        max_discount_amount=promotion.max_discount_amount,
        start_date=promotion.start_date,
        end_date=promotion.end_date,
        usage_limit=promotion.usage_limit,
        used_count=promotion.used_count or 0,
        status=promotion.status,
    )


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderPlacedResponse)
async def create_order(
    body: PlaceOrderRequest,
    caller: Caller = Depends(current_caller),
    idempotency_key: str | None = Header(default=None),
) -> OrderPlacedResponse:
    """Check out the caller's cart.

    Stock, promotion usage and the cart are all updated together; a retried
    request carrying the same ``Idempotency-Key`` returns the original order.
    """
    command = PlaceOrder(
        customer_id=caller.user_id,
        shipping_name=body.shipping_name,
        shipping_phone=body.shipping_phone,
        shipping_address=body.shipping_address,
        payment_method=body.payment_method,
        promotion_code=body.promotion_code or None,
        notes=body.notes,
        idempotency_key=idempotency_key,
    )
    summary = place_order(command)
    return OrderPlacedResponse(**summary)


@order_router.get("", response_model=OrderListResponse)
async def list_my_orders(
    caller: Caller = Depends(current_caller),
    status: str | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
) -> OrderListResponse:
    result = current_domain.repository_for(Order).find_for_customer(
        caller.user_id, status=status, offset=(page - 1) * limit, limit=limit
    )
    return _order_list_response(result, page, limit)


@order_router.get("/admin/all", response_model=OrderListResponse)
async def list_all_orders(
    caller: Caller = Depends(staff_caller),
    status: str | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
) -> OrderListResponse:
    result = current_domain.repository_for(Order).find_all(status=status, offset=(page - 1) * limit, limit=limit)
    return _order_list_response(result, page, limit)


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, caller: Caller = Depends(current_caller)) -> OrderResponse:
    order = load_order(order_id)
    if not caller.is_staff and str(order.customer_id) != caller.user_id:
        raise OrderNotFound(order_id)
    return _order_response(order)


@order_router.put("/{order_id}/cancel", response_model=StatusResponse)
async def cancel_order(
    order_id: str,
    body: CancelOrderRequest | None = None,
    caller: Caller = Depends(current_caller),
) -> StatusResponse:
    command = CancelOrder(
        order_id=order_id,
        customer_id=caller.user_id,
        reason=body.reason if body else None,
    )
    change_order_status(command)
    return StatusResponse(message="Order cancelled")


@order_router.put("/{order_id}/status", response_model=StatusResponse)
async def update_order_status(
    order_id: str,
    body: UpdateOrderStatusRequest,
    caller: Caller = Depends(staff_caller),
) -> StatusResponse:
    command = TransitionOrderStatus(
        order_id=order_id,
        status=body.status,
        actor_id=caller.user_id,
        note=body.note,
    )
    change_order_status(command)
    return StatusResponse(message="Order status updated")


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def get_cart(caller: Caller = Depends(current_caller)) -> CartResponse:
    cart = cart_for_customer(caller.user_id)
    lines = load_cart_lines(cart, skip_missing=True)
    items = [
        CartItemResponse(
            item_id=line.item_id,
            variant_id=str(line.variant.id),
            product_id=str(line.variant.product_id),
            product_name=line.variant.product_name,
            size=line.variant.size,
            color=line.variant.color,
            price=line.unit_price,
            quantity=line.quantity,
            subtotal=line.subtotal,
            stock=line.variant.stock_quantity,
            is_available=line.is_available,
        )
        for line in lines
    ]
    return CartResponse(
        cart_id=str(cart.id),
        items=items,
        total_items=sum(item.quantity for item in items),
        total_amount=sum(item.subtotal for item in items),
    )


@cart_router.get("/count")
async def get_cart_count(caller: Caller = Depends(current_caller)) -> dict:
    cart = cart_for_customer(caller.user_id)
    return {"count": sum(item.quantity for item in cart.items)}


@cart_router.post("/items", status_code=201, response_model=CartItemIdResponse)
async def add_cart_item(body: AddToCartRequest, caller: Caller = Depends(current_caller)) -> CartItemIdResponse:
    command = AddToCart(
        customer_id=caller.user_id,
        variant_id=body.variant_id,
        quantity=body.quantity,
    )
    item_id = current_domain.process(command, asynchronous=False)
    return CartItemIdResponse(item_id=item_id)


@cart_router.put("/items/{item_id}", response_model=StatusResponse)
async def update_cart_item(
    item_id: str,
    body: UpdateCartItemRequest,
    caller: Caller = Depends(current_caller),
) -> StatusResponse:
    command = UpdateCartQuantity(
        customer_id=caller.user_id,
        item_id=item_id,
        new_quantity=body.quantity,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/items/{item_id}", response_model=StatusResponse)
async def remove_cart_item(item_id: str, caller: Caller = Depends(current_caller)) -> StatusResponse:
    command = RemoveFromCart(customer_id=caller.user_id, item_id=item_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("", response_model=StatusResponse)
async def clear_cart(caller: Caller = Depends(current_caller)) -> StatusResponse:
    current_domain.process(ClearCart(customer_id=caller.user_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Promotion Router
# ---------------------------------------------------------------------------
promotion_router = APIRouter(prefix="/promotions", tags=["promotions"])


@promotion_router.get("", response_model=list[PromotionResponse])
async def list_active_promotions() -> list[PromotionResponse]:
    promotions = current_domain.repository_for(Promotion).find_active()
    return [_promotion_response(promotion) for promotion in promotions]


@promotion_router.get("/admin", response_model=list[PromotionResponse])
async def list_all_promotions(caller: Caller = Depends(admin_caller)) -> list[PromotionResponse]:
    promotions = current_domain.repository_for(Promotion).find_all()
    return [_promotion_response(promotion) for promotion in promotions]


@promotion_router.post("", status_code=201, response_model=PromotionIdResponse)
async def create_promotion(
    body: CreatePromotionRequest,
    caller: Caller = Depends(admin_caller),
) -> PromotionIdResponse:
    command = CreatePromotion(
        code=body.code,
        name=body.name,
        description=body.description,
        discount_type=body.discount_type,
        discount_value=body.discount_value,
        min_order_amount=body.min_order_amount,
        max_discount_amount=body.max_discount_amount,
        start_date=body.start_date,
        end_date=body.end_date,
        usage_limit=body.usage_limit,
    )
    promotion_id = current_domain.process(command, asynchronous=False)
    return PromotionIdResponse(promotion_id=promotion_id)


@promotion_router.post("/verify", response_model=VerifyPromotionResponse)
async def verify_promotion(
    body: VerifyPromotionRequest,
    caller: Caller = Depends(current_caller),
) -> VerifyPromotionResponse:
    """Price a code against an order amount without redeeming it."""
    evaluation = evaluate_promotion(body.code, body.order_amount)
    if not evaluation.applicable:
        raise PromotionNotApplicable(evaluation.code, evaluation.reason)
    return VerifyPromotionResponse(
        promotion_id=evaluation.promotion_id,
        code=evaluation.code,
        discount_amount=evaluation.discount_amount,
        is_free_shipping=evaluation.is_free_shipping,
    )


@promotion_router.put("/{promotion_id}", response_model=StatusResponse)
async def update_promotion(
    promotion_id: str,
    body: UpdatePromotionRequest,
    caller: Caller = Depends(admin_caller),
) -> StatusResponse:
    command = UpdatePromotion(promotion_id=promotion_id, **body.model_dump(exclude_none=True))
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@promotion_router.delete("/{promotion_id}", response_model=StatusResponse)
async def deactivate_promotion(promotion_id: str, caller: Caller = Depends(admin_caller)) -> StatusResponse:
    current_domain.process(DeactivatePromotion(promotion_id=promotion_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Variant Router
# ---------------------------------------------------------------------------
variant_router = APIRouter(prefix="/variants", tags=["variants"])


@variant_router.post("", status_code=201, response_model=VariantIdResponse)
async def register_variant(
    body: RegisterVariantRequest,
    caller: Caller = Depends(admin_caller),
) -> VariantIdResponse:
    command = RegisterVariant(**body.model_dump(exclude_none=True))
    variant_id = current_domain.process(command, asynchronous=False)
    return VariantIdResponse(variant_id=variant_id)


@variant_router.get("/{variant_id}", response_model=VariantResponse)
async def get_variant(variant_id: str) -> VariantResponse:
    variant = current_domain.repository_for(ProductVariant).get(variant_id)
    return VariantResponse(
        variant_id=str(variant.id),
        product_id=str(variant.product_id),
        product_name=variant.product_name,
        size=variant.size,
        color=variant.color,
        price=variant.unit_price,
        stock_quantity=variant.stock_quantity,
        is_available=variant.is_available,
    )


@variant_router.put("/{variant_id}/stock", response_model=StatusResponse)
async def adjust_variant_stock(
    variant_id: str,
    body: AdjustStockRequest,
    caller: Caller = Depends(staff_caller),
) -> StatusResponse:
    command = AdjustStock(variant_id=variant_id, stock_quantity=body.stock_quantity, reason=body.reason)
    with checkout_locks([variant_id]):
        current_domain.process(command, asynchronous=False)
    return StatusResponse()


@variant_router.put("/{variant_id}/status", response_model=StatusResponse)
async def change_variant_status(
    variant_id: str,
    body: ChangeVariantStatusRequest,
    caller: Caller = Depends(admin_caller),
) -> StatusResponse:
    command = ChangeVariantStatus(variant_id=variant_id, status=body.status, product_status=body.product_status)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Notification Router
# ---------------------------------------------------------------------------
notification_router = APIRouter(prefix="/notifications", tags=["notifications"])


@notification_router.get("", response_model=list[NotificationResponse])
async def list_notifications(
    caller: Caller = Depends(current_caller),
    unread: bool = False,
) -> list[NotificationResponse]:
    notifications = current_domain.repository_for(Notification).find_for_recipient(caller.user_id, unread_only=unread)
    return [
        NotificationResponse(
            notification_id=str(notification.id),
            notification_type=notification.notification_type,
            title=notification.title,
            message=notification.message,
            data=notification.payload,
            is_read=notification.is_read,
            created_at=notification.created_at,
        )
        for notification in notifications
    ]


@notification_router.put("/{notification_id}/read", response_model=StatusResponse)
async def mark_notification_read(notification_id: str, caller: Caller = Depends(current_caller)) -> StatusResponse:
    command = MarkNotificationRead(notification_id=notification_id, reader_id=caller.user_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()
