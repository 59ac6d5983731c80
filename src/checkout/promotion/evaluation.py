"""Promotion evaluation — decides whether a code applies to an order subtotal.

Used both by the order assembler and by the customer-facing verify endpoint,
so a code that verifies is priced exactly the way checkout will price it.
"""

import structlog
from protean.utils.globals import current_domain

from checkout.promotion.promotion import Promotion, PromotionEvaluation, normalize_code

logger = structlog.get_logger(__name__)

UNKNOWN_CODE_REASON = "Promotion code is invalid or has expired"


def find_promotion(code):
    if not code or not code.strip():
        return None
    return current_domain.repository_for(Promotion).find_by_code(code)


def evaluate_promotion(code, order_subtotal, now=None) -> PromotionEvaluation:
    """Evaluate ``code`` against ``order_subtotal`` at ``now`` (UTC, defaults to the current time)."""
    promotion = find_promotion(code)
    if promotion is None:
        return PromotionEvaluation.rejected(normalize_code(code or ""), UNKNOWN_CODE_REASON)

    evaluation = promotion.evaluate(order_subtotal, now=now)
    logger.debug(
        "Promotion evaluated",
        code=promotion.code,
        subtotal=order_subtotal,
        applicable=evaluation.applicable,
        reason=evaluation.reason,
    )
    return evaluation
