"""Demand pattern classification tests."""

import pytest

from inventory_insights.analytics.demand import (
    classify_demand_patterns,
    classify_pattern,
    demand_indicators,
)
from inventory_insights.config import ADI_SENTINEL, CV2_SENTINEL, DemandPattern


class TestIndicators:
    """Test ADI / CV² computation and sentinels."""

    def test_intermittent_example(self):
        adi, cv2 = demand_indicators([0, 0, 5, 0, 0, 6, 0, 0, 4, 0, 0, 5])
        assert adi == 3.0
        assert cv2 == pytest.approx(0.02)

    def test_no_demand_sentinels(self):
        adi, cv2 = demand_indicators([0] * 12)
        assert adi == ADI_SENTINEL
        assert cv2 == CV2_SENTINEL

    def test_single_observation_cv2_sentinel(self):
        _, cv2 = demand_indicators([0] * 11 + [7])
        assert cv2 == CV2_SENTINEL

    def test_adi_at_least_one(self):
        adi, _ = demand_indicators([3] * 12)
        assert adi == 1.0


class TestClassifyPattern:
    """Test the Syntetos-Boylan quadrants and boundary handling."""

    def test_quadrants(self):
        assert classify_pattern(1.0, 0.1) == DemandPattern.SMOOTH
        assert classify_pattern(2.0, 0.1) == DemandPattern.INTERMITTENT
        assert classify_pattern(1.0, 0.9) == DemandPattern.ERRATIC
        assert classify_pattern(2.0, 0.9) == DemandPattern.LUMPY

    def test_boundaries_fall_upward(self):
        """Verify ADI=1.32 and CV²=0.49 belong to the >= side."""
        assert classify_pattern(1.32, 0.1) == DemandPattern.INTERMITTENT
        assert classify_pattern(1.0, 0.49) == DemandPattern.ERRATIC


class TestClassifyDemandPatterns:
    """Test the end-to-end classifier."""

    def test_intermittent_product_routed_to_croston(self, intermittent_product, as_of):
        product, orders = intermittent_product
        result = classify_demand_patterns([product], orders, as_of=as_of)
        item = result.items[0]
        assert item.pattern == DemandPattern.INTERMITTENT
        assert item.adi == 3.0
        assert "Croston" in item.optimal_method
        assert item.forecast == [2, 2, 2]
        assert item.monthly_demand == [0, 0, 5, 0, 0, 6, 0, 0, 4, 0, 0, 5]

    def test_product_without_sales_is_lumpy(self, make_product, as_of):
        result = classify_demand_patterns([make_product("P9")], [], as_of=as_of)
        item = result.items[0]
        assert item.adi == ADI_SENTINEL
        assert item.cv2 == CV2_SENTINEL
        assert item.pattern == DemandPattern.LUMPY
        assert item.forecast == [0, 0, 0]

    def test_smooth_and_erratic(self, make_product, make_monthly_sales, as_of):
        inventory = [make_product("S"), make_product("E")]
        orders = make_monthly_sales("S", [10] * 12) + make_monthly_sales("E", [1, 20] * 6)
        result = classify_demand_patterns(inventory, orders, as_of=as_of)
        patterns = {i.product_id: i.pattern for i in result.items}
        assert patterns == {"S": DemandPattern.SMOOTH, "E": DemandPattern.ERRATIC}

    def test_summary(self, sample_inventory, sample_orders, as_of):
        """Verify every product gets exactly one label and the summary adds up."""
        result = classify_demand_patterns(sample_inventory, sample_orders, as_of=as_of)
        assert len(result.items) == len(sample_inventory)
        assert sum(result.pattern_summary.values()) == len(sample_inventory)
        assert set(result.pattern_summary) == set(DemandPattern)
        assert all(i.pattern in DemandPattern for i in result.items)
        expected = round(sum(i.confidence for i in result.items) / len(result.items))
        assert abs(result.avg_confidence - expected) <= 1

    def test_empty_inventory(self):
        result = classify_demand_patterns([], [])
        assert result.items == []
        assert result.avg_confidence == 0

    def test_to_dict_uses_plain_values(self, intermittent_product, as_of):
        product, orders = intermittent_product
        payload = classify_demand_patterns([product], orders, as_of=as_of).to_dict()
        assert payload["items"][0]["pattern"] == "intermittent"
        assert payload["pattern_summary"]["lumpy"] == 0
