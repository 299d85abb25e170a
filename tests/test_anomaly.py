"""Anomaly detection tests."""

from inventory_insights.analytics.anomaly import detect_anomalies, severity_for
from inventory_insights.config import AnomalyType, Severity


def _by_type(result, kind):
    return [a for a in result.anomalies if a.type == kind]


class TestSeverity:
    def test_bands(self):
        assert severity_for(3.1) == Severity.CRITICAL
        assert severity_for(-3.1) == Severity.CRITICAL
        assert severity_for(2.5) == Severity.WARNING
        assert severity_for(1.8) == Severity.INFO


class TestDetectAnomalies:
    """Test latest-month z-score detection."""

    def test_demand_spike(self, make_product, make_monthly_sales):
        """Verify [10]*5 then 50 flags a warning spike (z ~ 2.24)."""
        result = detect_anomalies([make_product("P1")], make_monthly_sales("P1", [10] * 5 + [50]))
        spikes = _by_type(result, AnomalyType.DEMAND_SPIKE)
        assert len(spikes) == 1
        assert spikes[0].z_score == 2.24
        assert spikes[0].severity == Severity.WARNING
        assert spikes[0].detected_at == "2025-12"

    def test_demand_drop(self, make_product, make_monthly_sales):
        result = detect_anomalies([make_product("P1")], make_monthly_sales("P1", [50] * 5 + [10]))
        drops = _by_type(result, AnomalyType.DEMAND_DROP)
        assert len(drops) == 1
        assert drops[0].z_score == -2.24
        assert not _by_type(result, AnomalyType.DEMAND_SPIKE)

    def test_critical_spike(self, make_product, make_monthly_sales):
        result = detect_anomalies([make_product("P1")], make_monthly_sales("P1", [10] * 11 + [100]))
        spike = _by_type(result, AnomalyType.DEMAND_SPIKE)[0]
        assert spike.z_score == 3.32
        assert spike.severity == Severity.CRITICAL
        assert result.critical_count >= 1

    def test_cost_change_follows_transaction_value(self, make_product, make_monthly_sales):
        result = detect_anomalies([make_product("P1")], make_monthly_sales("P1", [10] * 11 + [100]))
        cost = _by_type(result, AnomalyType.COST_CHANGE)
        assert len(cost) == 1
        assert "increased" in cost[0].description

    def test_constant_series_has_no_anomalies(self, make_product, make_monthly_sales):
        result = detect_anomalies([make_product("P1")], make_monthly_sales("P1", [10] * 12))
        assert result.anomalies == []

    def test_needs_three_months(self, make_product, make_monthly_sales):
        result = detect_anomalies([make_product("P1")], make_monthly_sales("P1", [1, 100]))
        assert result.anomalies == []

    def test_critical_sorted_first(self, make_product, make_monthly_sales):
        inventory = [make_product("WARN"), make_product("CRIT")]
        orders = make_monthly_sales("WARN", [10] * 5 + [50]) + make_monthly_sales("CRIT", [10] * 11 + [100])
        result = detect_anomalies(inventory, orders)
        severities = [a.severity for a in result.anomalies]
        assert severities[0] == Severity.CRITICAL
        assert result.anomalies[0].product_id == "CRIT"
        assert Severity.INFO not in severities

    def test_unknown_product_skipped(self, make_product, make_monthly_sales):
        result = detect_anomalies([make_product("OTHER")], make_monthly_sales("P1", [10] * 5 + [50]))
        assert result.anomalies == []

    def test_to_dict_serializes_enums(self, make_product, make_monthly_sales):
        result = detect_anomalies([make_product("P1")], make_monthly_sales("P1", [10] * 5 + [50]))
        payload = result.to_dict()
        assert payload["anomalies"][0]["severity"] == "warning"
