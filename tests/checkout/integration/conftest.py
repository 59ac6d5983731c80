import pytest
from checkout.api import (
    cart_router,
    notification_router,
    order_router,
    promotion_router,
    register_error_handlers,
    variant_router,
)
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

ADMIN = {"X-User-ID": "admin-api-001", "X-User-Role": "admin"}


@pytest.fixture()
def client(checkout_bed):
    app = FastAPI()

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        with checkout_bed.domain.domain_context():
            return await call_next(request)

    app.include_router(order_router)
    app.include_router(cart_router)
    app.include_router(promotion_router)
    app.include_router(variant_router)
    app.include_router(notification_router)
    register_error_handlers(app)
    return TestClient(app)


@pytest.fixture()
def api_variant(client):
    """Register a variant through the API and return its id."""

    def _register(product_name="Runner 2", base_price=500_000.0, stock_quantity=10):
        response = client.post(
            "/variants",
            json={
                "productId": "prod-api-001",
                "productName": product_name,
                "size": "42",
                "color": "Black",
                "basePrice": base_price,
                "stockQuantity": stock_quantity,
            },
            headers=ADMIN,
        )
        assert response.status_code == 201
        return response.json()["variantId"]

    return _register
