"""Promotion aggregate (CQRS) — coupon definitions and their usage counters.

A promotion is applicable to an order when it is active, the order falls
inside its usage window, it still has uses left and the order subtotal
meets its minimum. The discount is computed from its type:

    percentage     subtotal * value / 100, capped at max_discount_amount
    fixed_amount   value (the caller keeps it within the order total)
    free_shipping  no discount; the caller waives the shipping fee

``used_count`` only grows, by exactly one per redeemed order, and never
passes ``usage_limit``.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Integer, String, Text

from checkout.domain import checkout
from checkout.errors import PromotionNotApplicable
from checkout.promotion.events import (
    PromotionCreated,
    PromotionDeactivated,
    PromotionRedeemed,
    PromotionUpdated,
)


class DiscountType(Enum):
    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed_amount"
    FREE_SHIPPING = "free_shipping"


class PromotionStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass(frozen=True)
class PromotionEvaluation:
    """Outcome of checking a code against an order subtotal."""

    applicable: bool
    discount_amount: float = 0.0
    is_free_shipping: bool = False
    reason: str | None = None
    code: str | None = None
    promotion_id: str | None = None

    @classmethod
    def rejected(cls, code, reason):
        return cls(applicable=False, code=code, reason=reason)


UPDATABLE_FIELDS = (
    "name",
    "description",
    "discount_type",
    "discount_value",
    "min_order_amount",
    "max_discount_amount",
    "start_date",
    "end_date",
    "usage_limit",
    "status",
)


def normalize_code(code: str) -> str:
    return code.strip().upper()


def _as_utc(value: datetime) -> datetime:
    # Naive datetimes are taken to be UTC
    return value if value.tzinfo else value.replace(tzinfo=UTC)


@checkout.aggregate
class Promotion:
    code = String(required=True, max_length=50)
    name = String(required=True, max_length=255)
    description = Text()
    discount_type = String(choices=DiscountType, required=True)
    discount_value = Float(required=True, min_value=0.0)
    min_order_amount = Float(default=0.0, min_value=0.0)
    max_discount_amount = Float(min_value=0.0)
    start_date = DateTime(required=True)
    end_date = DateTime(required=True)
    usage_limit = Integer(min_value=0)
    used_count = Integer(default=0, min_value=0)
    status = String(choices=PromotionStatus, default=PromotionStatus.ACTIVE.value)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def usage_must_not_exceed_limit(self):
        if self.usage_limit is not None and (self.used_count or 0) > self.usage_limit:
            raise ValidationError({"used_count": ["Promotion usage cannot exceed its usage limit"]})

    @invariant.post
    def window_must_end_after_start(self):
        if self.start_date and self.end_date and _as_utc(self.end_date) <= _as_utc(self.start_date):
            raise ValidationError({"end_date": ["End date must be after start date"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        code,
        name,
        discount_type,
        discount_value,
        start_date,
        end_date,
        min_order_amount=0.0,
        max_discount_amount=None,
        usage_limit=None,
        description=None,
    ):
        code = normalize_code(code)
        if len(code) < 3:
            raise ValidationError({"code": ["Promotion code must be at least 3 characters"]})
        _check_discount(discount_type, discount_value)

        now = datetime.now(UTC)
        promotion = cls(
            code=code,
            name=name,
            description=description,
            discount_type=DiscountType(discount_type).value,
            discount_value=discount_value,
            min_order_amount=min_order_amount or 0.0,
            max_discount_amount=max_discount_amount,
            start_date=start_date,
            end_date=end_date,
            usage_limit=usage_limit,
            used_count=0,
            status=PromotionStatus.ACTIVE.value,
            created_at=now,
            updated_at=now,
        )
        promotion.raise_(
            PromotionCreated(
                promotion_id=str(promotion.id),
                code=code,
                discount_type=promotion.discount_type,
                discount_value=discount_value,
                start_date=start_date,
                end_date=end_date,
                usage_limit=usage_limit,
            )
        )
        return promotion

    # -------------------------------------------------------------------
    # Evaluation
    # -------------------------------------------------------------------
    @property
    def is_exhausted(self) -> bool:
        return self.usage_limit is not None and (self.used_count or 0) >= self.usage_limit

    def evaluate(self, order_subtotal, now=None) -> PromotionEvaluation:
        """Decide whether this promotion applies to a subtotal, and by how much."""
        now = _as_utc(now or datetime.now(UTC))

        if self.status != PromotionStatus.ACTIVE.value:
            return PromotionEvaluation.rejected(self.code, "Promotion is not active")
        if now < _as_utc(self.start_date):
            return PromotionEvaluation.rejected(self.code, "Promotion has not started yet")
        if now > _as_utc(self.end_date):
            return PromotionEvaluation.rejected(self.code, "Promotion has expired")
        if self.is_exhausted:
            return PromotionEvaluation.rejected(self.code, "Promotion usage limit has been reached")
        if order_subtotal < (self.min_order_amount or 0.0):
            return PromotionEvaluation.rejected(
                self.code,
                f"Minimum order amount of {self.min_order_amount:,.0f} is required for this promotion",
            )

        discount = 0.0
        free_shipping = False
        discount_type = DiscountType(self.discount_type)
        if discount_type == DiscountType.PERCENTAGE:
            discount = order_subtotal * self.discount_value / 100
            if self.max_discount_amount and discount > self.max_discount_amount:
                discount = self.max_discount_amount
        elif discount_type == DiscountType.FIXED_AMOUNT:
            discount = self.discount_value
        else:
            free_shipping = True

        return PromotionEvaluation(
            applicable=True,
            discount_amount=discount,
            is_free_shipping=free_shipping,
            code=self.code,
            promotion_id=str(self.id),
        )

    # -------------------------------------------------------------------
    # Redemption
    # -------------------------------------------------------------------
    def redeem(self, order_id=None):
        """Count one use of this promotion. Refuses once the limit is reached."""
        if self.status != PromotionStatus.ACTIVE.value:
            raise PromotionNotApplicable(self.code, "Promotion is not active")
        if self.is_exhausted:
            raise PromotionNotApplicable(self.code, "Promotion usage limit has been reached")

        now = datetime.now(UTC)
        self.used_count = (self.used_count or 0) + 1
        self.updated_at = now

        self.raise_(
            PromotionRedeemed(
                promotion_id=str(self.id),
                code=self.code,
                order_id=str(order_id) if order_id else None,
                used_count=self.used_count,
                redeemed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Administration
    # -------------------------------------------------------------------
    def update_terms(self, **changes):
        """Change the promotion's terms. ``code`` and ``used_count`` are fixed."""
        discount_type = changes.get("discount_type", self.discount_type)
        discount_value = changes.get("discount_value", self.discount_value)
        _check_discount(discount_type, discount_value)

        with atomic_change(self):
            for field in UPDATABLE_FIELDS:
                if field in changes:
                    setattr(self, field, changes[field])
            self.updated_at = datetime.now(UTC)

        self.raise_(PromotionUpdated(promotion_id=str(self.id), code=self.code))

    def deactivate(self):
        if self.status == PromotionStatus.INACTIVE.value:
            raise ValidationError({"status": ["Promotion is already inactive"]})

        self.status = PromotionStatus.INACTIVE.value
        self.updated_at = datetime.now(UTC)

        self.raise_(PromotionDeactivated(promotion_id=str(self.id), code=self.code))


def _check_discount(discount_type, discount_value):
    if DiscountType(discount_type) == DiscountType.PERCENTAGE and discount_value > 100:
        raise ValidationError({"discount_value": ["Percentage discount cannot exceed 100"]})
