"""Human-readable order codes: ``ORD`` + ``yymmdd`` + six hex characters."""

from datetime import UTC, datetime
from uuid import uuid4

from protean.utils.globals import current_domain

from checkout.order.order import Order

_MAX_ATTEMPTS = 5


def new_order_code(now=None) -> str:
    now = now or datetime.now(UTC)
    return f"ORD{now:%y%m%d}{uuid4().hex[:6].upper()}"


def generate_order_code(now=None) -> str:
    """Return an order code not used by any stored order."""
    repo = current_domain.repository_for(Order)
    for _ in range(_MAX_ATTEMPTS):
        code = new_order_code(now)
        if repo.find_by_code(code) is None:
            return code
    raise RuntimeError("Could not generate a unique order code")
