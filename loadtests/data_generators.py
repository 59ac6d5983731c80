"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the API's Pydantic request
schemas (camelCase on the wire) and the domain's validation rules.
"""

import random
import uuid
from datetime import UTC, datetime, timedelta

from faker import Faker

fake = Faker()

SHOE_MODELS = ["Runner", "Court Classic", "Trail Blazer", "City Loafer", "High Top", "Slip On"]
SIZES = ["38", "39", "40", "41", "42", "43", "44"]
COLORS = ["Black", "White", "Navy", "Red", "Grey"]

ADMIN_ID = "admin-loadtest"
STAFF_ID = "staff-loadtest"


# ---------- Identity headers ----------


def shopper_id() -> str:
    """Generate unique customer ids like 'cust-lt-a1b2c3d4'."""
    return f"cust-lt-{uuid.uuid4().hex[:8]}"


def headers_for(user_id: str, role: str = "customer") -> dict:
    return {"X-User-ID": user_id, "X-User-Role": role}


def admin_headers() -> dict:
    return headers_for(ADMIN_ID, "admin")


def staff_headers() -> dict:
    return headers_for(STAFF_ID, "staff")


# ---------- Catalogue ----------


def variant_data(stock_quantity: int | None = None) -> dict:
    """Generate RegisterVariantRequest payload."""
    model = random.choice(SHOE_MODELS)
    return {
        "productId": f"prod-lt-{uuid.uuid4().hex[:8]}",
        "productName": f"{model} {fake.color_name()}"[:255],
        "size": random.choice(SIZES),
        "color": random.choice(COLORS),
        "sku": f"LT-{uuid.uuid4().hex[:8].upper()}",
        # Prices in whole dong, rounded to the thousand
        "basePrice": float(random.randint(20, 250) * 10_000),
        "stockQuantity": stock_quantity if stock_quantity is not None else random.randint(50, 500),
    }


# ---------- Cart / Checkout ----------


def cart_item_data(variant_id: str, quantity: int | None = None) -> dict:
    return {"variantId": variant_id, "quantity": quantity or random.randint(1, 3)}


def valid_phone() -> str:
    """Generate phones matching ^[0-9]{10,11}$."""
    return "09" + "".join(str(random.randint(0, 9)) for _ in range(8))


def checkout_data(promotion_code: str | None = None) -> dict:
    """Generate PlaceOrderRequest payload."""
    payload = {
        "shippingName": fake.name()[:100],
        "shippingPhone": valid_phone(),
        "shippingAddress": fake.address().replace("\n", ", ")[:500],
        "paymentMethod": random.choice(["COD", "COD", "BANK_TRANSFER", "VNPAY", "MOMO"]),
    }
    if promotion_code:
        payload["promotionCode"] = promotion_code
    if random.random() < 0.2:
        payload["notes"] = fake.sentence()
    return payload


def idempotency_headers(user_id: str) -> dict:
    return {**headers_for(user_id), "Idempotency-Key": uuid.uuid4().hex}


# ---------- Promotions ----------


def promotion_data(usage_limit: int | None = None) -> dict:
    """Generate CreatePromotionRequest payload valid from now for a week."""
    now = datetime.now(UTC)
    discount_type = random.choice(["percentage", "fixed_amount", "free_shipping"])
    discount_value = {
        "percentage": random.choice([5, 10, 15, 20]),
        "fixed_amount": random.choice([20_000, 50_000, 100_000]),
        "free_shipping": 0,
    }[discount_type]
    return {
        "code": f"LT{uuid.uuid4().hex[:6].upper()}",
        "name": fake.catch_phrase()[:255],
        "discountType": discount_type,
        "discountValue": discount_value,
        "maxDiscountAmount": 100_000 if discount_type == "percentage" else None,
        "minOrderAmount": random.choice([0, 200_000, 500_000]),
        "startDate": (now - timedelta(minutes=5)).isoformat(),
        "endDate": (now + timedelta(days=7)).isoformat(),
        "usageLimit": usage_limit,
    }
