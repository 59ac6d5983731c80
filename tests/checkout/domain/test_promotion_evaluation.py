"""Tests for Promotion applicability and discount computation."""

from datetime import UTC, datetime, timedelta

import pytest
from checkout.errors import PromotionNotApplicable
from checkout.promotion.events import PromotionCreated, PromotionRedeemed
from checkout.promotion.promotion import Promotion, PromotionStatus
from protean.exceptions import ValidationError

NOW = datetime(2026, 6, 15, 12, 0, tzinfo=UTC)


def _promotion(**overrides):
    attributes = {
        "code": "sale10",
        "name": "Summer sale",
        "discount_type": "percentage",
        "discount_value": 10.0,
        "start_date": NOW - timedelta(days=1),
        "end_date": NOW + timedelta(days=1),
    }
    attributes.update(overrides)
    promotion = Promotion.create(**attributes)
    promotion._events.clear()
    return promotion


class TestPromotionCreation:
    def test_code_is_normalized_to_upper_case(self):
        promotion = _promotion(code="  sale10 ")
        assert promotion.code == "SALE10"
        assert promotion.used_count == 0
        assert promotion.status == PromotionStatus.ACTIVE.value

    def test_created_event_is_raised(self):
        promotion = Promotion.create(
            code="WELCOME",
            name="Welcome",
            discount_type="fixed_amount",
            discount_value=20_000.0,
            start_date=NOW,
            end_date=NOW + timedelta(days=30),
        )
        assert len(promotion._events) == 1
        assert isinstance(promotion._events[0], PromotionCreated)

    def test_short_code_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _promotion(code="AB")
        assert "at least 3 characters" in str(exc.value)

    def test_percentage_above_hundred_is_rejected(self):
        with pytest.raises(ValidationError):
            _promotion(discount_value=120.0)

    def test_end_before_start_is_rejected(self):
        with pytest.raises(ValidationError):
            _promotion(start_date=NOW, end_date=NOW - timedelta(days=1))


class TestDiscounts:
    def test_percentage_discount(self):
        evaluation = _promotion().evaluate(400_000.0, now=NOW)
        assert evaluation.applicable is True
        assert evaluation.discount_amount == pytest.approx(40_000.0)
        assert evaluation.is_free_shipping is False

    def test_percentage_discount_is_capped(self):
        promotion = _promotion(max_discount_amount=50_000.0)
        evaluation = promotion.evaluate(1_000_000.0, now=NOW)
        assert evaluation.discount_amount == pytest.approx(50_000.0)

    def test_fixed_amount_discount(self):
        promotion = _promotion(discount_type="fixed_amount", discount_value=25_000.0)
        evaluation = promotion.evaluate(300_000.0, now=NOW)
        assert evaluation.discount_amount == 25_000.0

    def test_free_shipping_has_no_discount(self):
        promotion = _promotion(discount_type="free_shipping", discount_value=0.0)
        evaluation = promotion.evaluate(300_000.0, now=NOW)
        assert evaluation.applicable is True
        assert evaluation.discount_amount == 0.0
        assert evaluation.is_free_shipping is True

    def test_evaluation_carries_promotion_identity(self):
        promotion = _promotion()
        evaluation = promotion.evaluate(100_000.0, now=NOW)
        assert evaluation.promotion_id == str(promotion.id)
        assert evaluation.code == "SALE10"


class TestApplicability:
    def test_not_started(self):
        promotion = _promotion(start_date=NOW + timedelta(hours=1), end_date=NOW + timedelta(days=2))
        evaluation = promotion.evaluate(100_000.0, now=NOW)
        assert evaluation.applicable is False
        assert evaluation.reason == "Promotion has not started yet"

    def test_expired(self):
        promotion = _promotion(start_date=NOW - timedelta(days=10), end_date=NOW - timedelta(days=1))
        evaluation = promotion.evaluate(100_000.0, now=NOW)
        assert evaluation.applicable is False
        assert evaluation.reason == "Promotion has expired"

    def test_inactive(self):
        promotion = _promotion()
        promotion.deactivate()
        assert promotion.evaluate(100_000.0, now=NOW).applicable is False

    def test_below_minimum_order_amount(self):
        promotion = _promotion(min_order_amount=500_000.0)
        evaluation = promotion.evaluate(499_999.0, now=NOW)
        assert evaluation.applicable is False
        assert "Minimum order amount" in evaluation.reason

    def test_usage_limit_reached(self):
        promotion = _promotion(usage_limit=1)
        promotion.redeem(order_id="ord-1")
        evaluation = promotion.evaluate(100_000.0, now=NOW)
        assert evaluation.applicable is False
        assert evaluation.reason == "Promotion usage limit has been reached"

    def test_naive_datetimes_are_treated_as_utc(self):
        promotion = _promotion()
        naive_now = NOW.replace(tzinfo=None)
        assert promotion.evaluate(100_000.0, now=naive_now).applicable is True


class TestRedemption:
    def test_redeem_increments_used_count_by_one(self):
        promotion = _promotion(usage_limit=5)
        promotion.redeem(order_id="ord-1")
        assert promotion.used_count == 1
        assert isinstance(promotion._events[-1], PromotionRedeemed)
        assert promotion._events[-1].used_count == 1

    def test_redeem_refuses_past_the_limit(self):
        promotion = _promotion(usage_limit=1)
        promotion.redeem(order_id="ord-1")
        with pytest.raises(PromotionNotApplicable):
            promotion.redeem(order_id="ord-2")
        assert promotion.used_count == 1

    def test_unlimited_promotion_keeps_counting(self):
        promotion = _promotion()
        for n in range(3):
            promotion.redeem(order_id=f"ord-{n}")
        assert promotion.used_count == 3


class TestAdministration:
    def test_update_terms(self):
        promotion = _promotion()
        promotion.update_terms(name="Bigger sale", discount_value=20.0)
        assert promotion.name == "Bigger sale"
        assert promotion.discount_value == 20.0
        assert promotion.code == "SALE10"

    def test_update_cannot_push_percentage_above_hundred(self):
        promotion = _promotion()
        with pytest.raises(ValidationError):
            promotion.update_terms(discount_value=150.0)

    def test_deactivate_twice_is_rejected(self):
        promotion = _promotion()
        promotion.deactivate()
        with pytest.raises(ValidationError):
            promotion.deactivate()
