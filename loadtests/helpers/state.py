"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state; nothing is shared across users.
State tracks entity IDs returned by creation endpoints so follow-up
operations can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class ShopperState:
    """Tracks state for a single simulated shopper's checkout."""

    customer_id: str
    variant_ids: list[str] = field(default_factory=list)
    item_ids: list[str] = field(default_factory=list)
    order_id: str | None = None
    order_code: str | None = None
    promotion_code: str | None = None
