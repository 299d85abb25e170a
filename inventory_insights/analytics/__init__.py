"""Inventory analyzers. Each one is a pure function over inventory and order snapshots."""

from inventory_insights.analytics.abc_xyz import calculate_abc_xyz
from inventory_insights.analytics.anomaly import detect_anomalies
from inventory_insights.analytics.basket import mine_association_rules
from inventory_insights.analytics.cost import calculate_cost_optimization
from inventory_insights.analytics.demand import classify_demand_patterns
from inventory_insights.analytics.health import calculate_health_score
from inventory_insights.analytics.monte_carlo import BoxMullerSampler, run_monte_carlo_simulation
from inventory_insights.analytics.reorder import calculate_smart_reorder
from inventory_insights.analytics.supplier import analyze_supplier_performance
from inventory_insights.analytics.timeseries import build_monthly_series
from inventory_insights.analytics.turnover import calculate_turnover
from inventory_insights.analytics.what_if import build_what_if_data, compute_what_if

__all__ = [
    "BoxMullerSampler",
    "analyze_supplier_performance",
    "build_monthly_series",
    "build_what_if_data",
    "calculate_abc_xyz",
    "calculate_cost_optimization",
    "calculate_health_score",
    "calculate_smart_reorder",
    "calculate_turnover",
    "classify_demand_patterns",
    "compute_what_if",
    "detect_anomalies",
    "mine_association_rules",
    "run_monte_carlo_simulation",
]
