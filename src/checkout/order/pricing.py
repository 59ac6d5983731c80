"""Order totals: shipping fee, discount clamping and the final amount.

The shipping rule is configurable through the ``[custom]`` section of
``domain.toml``:

    FREE_SHIPPING_THRESHOLD = 1000000
    FLAT_SHIPPING_FEE = 30000
"""

from dataclasses import dataclass

from protean.utils.globals import current_domain

DEFAULT_FREE_SHIPPING_THRESHOLD = 1_000_000.0
DEFAULT_FLAT_SHIPPING_FEE = 30_000.0


@dataclass(frozen=True)
class OrderTotals:
    total_amount: float
    discount_amount: float
    shipping_fee: float

    @property
    def final_amount(self) -> float:
        return self.total_amount - self.discount_amount + self.shipping_fee


def _custom_setting(name, default) -> float:
    custom = current_domain.config.get("custom", {}) or {}
    return float(custom.get(name, default))


def shipping_fee_for(total_amount) -> float:
    threshold = _custom_setting("FREE_SHIPPING_THRESHOLD", DEFAULT_FREE_SHIPPING_THRESHOLD)
    if total_amount >= threshold:
        return 0.0
    return _custom_setting("FLAT_SHIPPING_FEE", DEFAULT_FLAT_SHIPPING_FEE)


def compute_totals(total_amount, evaluation=None) -> OrderTotals:
    """Price an order from its line total and an optional promotion evaluation.

    An inapplicable evaluation contributes nothing. A discount never takes
    the order below zero before shipping.
    """
    shipping_fee = shipping_fee_for(total_amount)
    discount = 0.0

    if evaluation is not None and evaluation.applicable:
        if evaluation.is_free_shipping:
            shipping_fee = 0.0
        discount = min(evaluation.discount_amount, total_amount)

    return OrderTotals(total_amount=total_amount, discount_amount=discount, shipping_fee=shipping_fee)
