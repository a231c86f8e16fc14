"""Tests for the distance / spend / savings formulas.

Pure arithmetic, no data store.

Usage:
    pytest tests/test_savings_math.py -v
"""

import pytest

from app.core.enums import LITERS_PER_GALLON
from app.models.vehicle import HybridCandidate
from app.services.savings import (
    compare_hybrid,
    hybrid_distance,
    hybrid_equivalent_spend,
    monthly_distance,
    monthly_savings,
)

# ---------------------------------------------------------------------------
# monthly_distance
# ---------------------------------------------------------------------------


class TestMonthlyDistance:
    def test_reference_scenario(self):
        # 480 / (16.5 * 3.78541) * 13.0 = 99.905...
        distance = monthly_distance(480, 16.5, 13.0)
        assert round(distance, 2) == 99.91

    def test_matches_formula(self):
        expected = (300 / (15.0 * LITERS_PER_GALLON)) * 40.0
        assert monthly_distance(300, 15.0, 40.0) == pytest.approx(expected)

    def test_zero_spend_is_zero_distance(self):
        assert monthly_distance(0, 16.5, 13.0) == 0

    @pytest.mark.parametrize("spend", [0.01, 1, 480, 10_000])
    def test_positive_spend_is_positive_distance(self, spend):
        assert monthly_distance(spend, 16.5, 13.0) > 0

    def test_scales_linearly_with_efficiency(self):
        assert monthly_distance(480, 16.5, 26.0) == pytest.approx(
            2 * monthly_distance(480, 16.5, 13.0)
        )

    @pytest.mark.parametrize("price", [0, -1.0])
    def test_rejects_non_positive_price(self, price):
        with pytest.raises(ValueError):
            monthly_distance(480, price, 13.0)

    @pytest.mark.parametrize("efficiency", [0, -5.0])
    def test_rejects_non_positive_efficiency(self, efficiency):
        with pytest.raises(ValueError):
            monthly_distance(480, 16.5, efficiency)


class TestHybridDistance:
    def test_same_spend_farther_with_better_efficiency(self):
        assert hybrid_distance(480, 16.5, 25.0) > monthly_distance(480, 16.5, 13.0)

    def test_equals_monthly_distance_for_hybrid_efficiency(self):
        assert hybrid_distance(480, 16.5, 25.0) == monthly_distance(480, 16.5, 25.0)


# ---------------------------------------------------------------------------
# Equivalent spend and savings
# ---------------------------------------------------------------------------


class TestEquivalentSpend:
    def test_matches_formula(self):
        expected = (100 / 20.0) * (16.5 * LITERS_PER_GALLON)
        assert hybrid_equivalent_spend(100, 16.5, 20.0) == pytest.approx(expected)

    def test_round_trip_with_same_efficiency_costs_the_same(self):
        distance = monthly_distance(480, 16.5, 13.0)
        assert hybrid_equivalent_spend(distance, 16.5, 13.0) == pytest.approx(480)

    def test_rejects_non_positive_hybrid_efficiency(self):
        with pytest.raises(ValueError):
            hybrid_equivalent_spend(100, 16.5, 0)

    def test_rejects_non_positive_price(self):
        with pytest.raises(ValueError):
            hybrid_equivalent_spend(100, 0, 20.0)

    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    def test_rejects_non_finite_inputs(self, value):
        with pytest.raises(ValueError):
            hybrid_equivalent_spend(100, value, 20.0)
        with pytest.raises(ValueError):
            hybrid_equivalent_spend(100, 16.5, value)


class TestMonthlySavings:
    def test_difference(self):
        assert monthly_savings(480, 300) == 180

    def test_not_clamped(self):
        assert monthly_savings(300, 480) == -180

    @pytest.mark.parametrize(
        "spend,price,efficiency",
        [(480, 16.5, 13.0), (250, 14.2, 40.0), (1234.56, 18.0, 55.5)],
    )
    def test_identical_efficiency_yields_zero(self, spend, price, efficiency):
        distance = monthly_distance(spend, price, efficiency)
        equivalent = hybrid_equivalent_spend(distance, price, efficiency)
        assert monthly_savings(spend, equivalent) == pytest.approx(0, abs=1e-9)


# ---------------------------------------------------------------------------
# compare_hybrid
# ---------------------------------------------------------------------------


def _candidate(efficiency: float) -> HybridCandidate:
    return HybridCandidate(
        id=9,
        variant_label="1.8 HEV",
        efficiency=efficiency,
        image_ref="/img.jpg",
        brand_name="Toyota",
        model_name="Corolla",
    )


class TestCompareHybrid:
    def test_savings_for_better_hybrid(self):
        distance = monthly_distance(480, 16.5, 13.0)
        comparison = compare_hybrid(_candidate(25.0), 480, 16.5, distance)
        # spend * (1 - 13 / 25)
        assert comparison.savings == pytest.approx(230.4, abs=0.01)
        assert comparison.equivalent_spend == pytest.approx(249.6, abs=0.01)

    def test_figures_are_rounded_to_cents(self):
        distance = monthly_distance(480, 16.5, 13.0)
        comparison = compare_hybrid(_candidate(23.7), 480, 16.5, distance)
        for value in (comparison.distance, comparison.equivalent_spend, comparison.savings):
            assert value == round(value, 2)

    def test_worse_hybrid_is_clamped_to_zero(self):
        distance = monthly_distance(480, 16.5, 13.0)
        comparison = compare_hybrid(_candidate(10.0), 480, 16.5, distance)
        assert comparison.savings == 0
        assert comparison.equivalent_spend > 480

    def test_identical_hybrid_saves_nothing(self):
        distance = monthly_distance(480, 16.5, 13.0)
        comparison = compare_hybrid(_candidate(13.0), 480, 16.5, distance)
        assert comparison.savings == 0

    def test_carries_candidate_fields(self):
        distance = monthly_distance(480, 16.5, 13.0)
        comparison = compare_hybrid(_candidate(25.0), 480, 16.5, distance)
        assert comparison.id == 9
        assert comparison.variant_label == "1.8 HEV"
        assert comparison.image_ref == "/img.jpg"
        assert comparison.model_name == "Corolla"
        assert comparison.distance == round(hybrid_distance(480, 16.5, 25.0), 2)
