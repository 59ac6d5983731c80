"""Tests for order totals — shipping rule and promotion effects."""

import pytest
from checkout.order.pricing import compute_totals, shipping_fee_for
from checkout.promotion.promotion import PromotionEvaluation


class TestShippingFee:
    def test_flat_fee_below_threshold(self):
        assert shipping_fee_for(999_999.0) == 30_000.0

    def test_free_at_threshold(self):
        assert shipping_fee_for(1_000_000.0) == 0.0

    def test_free_above_threshold(self):
        assert shipping_fee_for(2_500_000.0) == 0.0


class TestComputeTotals:
    def test_without_promotion(self):
        totals = compute_totals(400_000.0)
        assert totals.discount_amount == 0.0
        assert totals.shipping_fee == 30_000.0
        assert totals.final_amount == 430_000.0

    def test_threshold_order_ships_free(self):
        totals = compute_totals(1_000_000.0)
        assert totals.shipping_fee == 0.0
        assert totals.final_amount == 1_000_000.0

    def test_capped_percentage_discount(self):
        evaluation = PromotionEvaluation(applicable=True, discount_amount=50_000.0, code="SALE10")
        totals = compute_totals(1_000_000.0, evaluation)
        assert totals.final_amount == 950_000.0

    def test_free_shipping_promotion_waives_fee(self):
        evaluation = PromotionEvaluation(applicable=True, is_free_shipping=True, code="FREESHIP")
        totals = compute_totals(200_000.0, evaluation)
        assert totals.shipping_fee == 0.0
        assert totals.final_amount == 200_000.0

    def test_fixed_discount_is_clamped_to_order_total(self):
        evaluation = PromotionEvaluation(applicable=True, discount_amount=300_000.0, code="BIG")
        totals = compute_totals(200_000.0, evaluation)
        assert totals.discount_amount == 200_000.0
        assert totals.final_amount == 30_000.0

    def test_inapplicable_evaluation_is_ignored(self):
        evaluation = PromotionEvaluation.rejected("OLD", "Promotion has expired")
        totals = compute_totals(200_000.0, evaluation)
        assert totals.discount_amount == 0.0
        assert totals.shipping_fee == 30_000.0

    @pytest.mark.parametrize("total", [0.0, 150_000.0, 999_999.0, 1_000_000.0, 4_200_000.0])
    def test_final_amount_identity(self, total):
        evaluation = PromotionEvaluation(applicable=True, discount_amount=10_000.0, code="TEN")
        totals = compute_totals(total, evaluation)
        assert totals.final_amount == pytest.approx(
            totals.total_amount - totals.discount_amount + totals.shipping_fee
        )
        assert totals.final_amount >= 0
