"""Pydantic request/response schemas for the Checkout API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands. Fields are snake_case in Python and camelCase on
the wire, the shape storefront clients already send and read.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

PaymentMethodName = Literal["COD", "BANK_TRANSFER", "VNPAY", "MOMO"]
OrderStatusName = Literal["pending", "confirmed", "processing", "shipped", "delivered", "cancelled", "returned"]
DiscountTypeName = Literal["percentage", "fixed_amount", "free_shipping"]
ActivityStatusName = Literal["active", "inactive"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Shared responses
# ---------------------------------------------------------------------------
class StatusResponse(CamelModel):
    status: str = "ok"
    message: str | None = None


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class PlaceOrderRequest(CamelModel):
    shipping_name: str = Field(min_length=1, max_length=100)
    shipping_phone: str = Field(pattern=r"^[0-9]{10,11}$")
    shipping_address: str = Field(min_length=1, max_length=500)
    payment_method: PaymentMethodName = "COD"
    promotion_code: str | None = Field(default=None, max_length=50)
    notes: str | None = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        json_schema_extra={
            "examples": [
                {
                    "shippingName": "Nguyen Van A",
                    "shippingPhone": "0901234567",
                    "shippingAddress": "12 Le Loi, District 1, Ho Chi Minh City",
                    "paymentMethod": "COD",
                    "promotionCode": "SALE10",
                }
            ]
        },
    )


class OrderPlacedResponse(CamelModel):
    order_id: str
    order_code: str
    total_amount: float
    discount_amount: float
    shipping_fee: float
    final_amount: float


class CancelOrderRequest(CamelModel):
    reason: str | None = Field(default=None, max_length=500)


class UpdateOrderStatusRequest(CamelModel):
    status: OrderStatusName
    note: str | None = Field(default=None, max_length=500)


class OrderItemResponse(CamelModel):
    item_id: str
    variant_id: str
    product_id: str
    product_name: str
    size: str | None = None
    color: str | None = None
    quantity: int
    unit_price: float
    subtotal: float


class OrderResponse(CamelModel):
    order_id: str
    order_code: str
    customer_id: str
    status: str
    payment_method: str
    payment_status: str
    total_amount: float
    discount_amount: float
    shipping_fee: float
    final_amount: float
    shipping_name: str
    shipping_phone: str
    shipping_address: str
    notes: str | None = None
    promotion_code: str | None = None
    cancel_reason: str | None = None
    created_at: datetime | None = None
    confirmed_at: datetime | None = None
    shipped_at: datetime | None = None
    delivered_at: datetime | None = None
    cancelled_at: datetime | None = None
    items: list[OrderItemResponse] = []


class OrderListResponse(CamelModel):
    orders: list[OrderResponse]
    total: int
    page: int
    limit: int


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(CamelModel):
    variant_id: str
    quantity: int = Field(ge=1, default=1)


class UpdateCartItemRequest(CamelModel):
    quantity: int = Field(ge=1)


class CartItemIdResponse(CamelModel):
    item_id: str


class CartItemResponse(CamelModel):
    item_id: str
    variant_id: str
    product_id: str
    product_name: str
    size: str | None = None
    color: str | None = None
    price: float
    quantity: int
    subtotal: float
    stock: int
    is_available: bool


class CartResponse(CamelModel):
    cart_id: str
    items: list[CartItemResponse]
    total_items: int
    total_amount: float


# ---------------------------------------------------------------------------
# Promotions
# ---------------------------------------------------------------------------
class CreatePromotionRequest(CamelModel):
    code: str = Field(min_length=3, max_length=50)
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    discount_type: DiscountTypeName
    discount_value: float = Field(ge=0)
    min_order_amount: float = Field(ge=0, default=0.0)
    max_discount_amount: float | None = Field(default=None, ge=0)
    start_date: datetime
    end_date: datetime
    usage_limit: int | None = Field(default=None, ge=0)

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "code": "SALE10",
                    "name": "Ten percent off",
                    "discountType": "percentage",
                    "discountValue": 10,
                    "maxDiscountAmount": 50000,
                    "startDate": "2026-01-01T00:00:00Z",
                    "endDate": "2026-12-31T23:59:59Z",
                    "usageLimit": 100,
                }
            ]
        },
    )


class UpdatePromotionRequest(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    discount_type: DiscountTypeName | None = None
    discount_value: float | None = Field(default=None, ge=0)
    min_order_amount: float | None = Field(default=None, ge=0)
    max_discount_amount: float | None = Field(default=None, ge=0)
    start_date: datetime | None = None
    end_date: datetime | None = None
    usage_limit: int | None = Field(default=None, ge=0)
    status: ActivityStatusName | None = None


class VerifyPromotionRequest(CamelModel):
    code: str = Field(min_length=1, max_length=50)
    order_amount: float = Field(ge=0)


class PromotionIdResponse(CamelModel):
    promotion_id: str


class PromotionResponse(CamelModel):
    promotion_id: str
    code: str
    name: str
    description: str | None = None
    discount_type: str
    discount_value: float
    min_order_amount: float
    max_discount_amount: float | None = None
    start_date: datetime
    end_date: datetime
    usage_limit: int | None = None
    used_count: int
    status: str


class VerifyPromotionResponse(CamelModel):
    promotion_id: str
    code: str
    discount_amount: float
    is_free_shipping: bool


# ---------------------------------------------------------------------------
# Variants
# ---------------------------------------------------------------------------
class RegisterVariantRequest(CamelModel):
    variant_id: str | None = None
    product_id: str
    product_name: str = Field(min_length=1, max_length=255)
    size: str | None = None
    color: str | None = None
    sku: str | None = None
    base_price: float = Field(ge=0)
    price: float | None = Field(default=None, ge=0)
    stock_quantity: int = Field(ge=0, default=0)


class VariantIdResponse(CamelModel):
    variant_id: str


class VariantResponse(CamelModel):
    variant_id: str
    product_id: str
    product_name: str
    size: str | None = None
    color: str | None = None
    price: float
    stock_quantity: int
    is_available: bool


class AdjustStockRequest(CamelModel):
    stock_quantity: int = Field(ge=0)
    reason: str | None = None


class ChangeVariantStatusRequest(CamelModel):
    status: ActivityStatusName | None = None
    product_status: ActivityStatusName | None = None


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------
class NotificationResponse(CamelModel):
    notification_id: str
    notification_type: str
    title: str
    message: str
    data: dict
    is_read: bool
    created_at: datetime | None = None
