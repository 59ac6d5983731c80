"""Shoestore checkout FastAPI application.

Web server that processes checkout commands synchronously via HTTP. Every
request runs inside the checkout domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay from checkout/domain.toml.
from checkout.domain import checkout  # noqa: E402
from checkout.utils.logging import add_context, clear_context, configure_logging  # noqa: E402
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

configure_logging()
checkout.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Shoestore Checkout API",
    description="Cart, checkout, promotions and order lifecycle",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the checkout domain context for each request.

    The caller and route are bound to the log context, so every record the
    request produces carries them.
    """
    clear_context()
    add_context(
        method=request.method,
        path=request.url.path,
        user_id=request.headers.get("x-user-id"),
    )
    with checkout.domain_context():
        response = await call_next(request)
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from checkout.api import (  # noqa: E402
    cart_router,
    notification_router,
    order_router,
    promotion_router,
    register_error_handlers,
    variant_router,
)

app.include_router(order_router)
app.include_router(cart_router)
app.include_router(promotion_router)
app.include_router(variant_router)
app.include_router(notification_router)
register_error_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": checkout.name})
