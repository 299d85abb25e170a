"""Insights Orchestrator: runs every analyzer over one inventory/order snapshot."""

import logging
from datetime import date
from typing import Callable, Iterable, Optional

from inventory_insights.config import MONTE_CARLO_SIMS
from inventory_insights.analytics import (
    analyze_supplier_performance,
    build_what_if_data,
    calculate_abc_xyz,
    calculate_cost_optimization,
    calculate_health_score,
    calculate_smart_reorder,
    calculate_turnover,
    classify_demand_patterns,
    detect_anomalies,
    mine_association_rules,
    run_monte_carlo_simulation,
)
from inventory_insights.analytics.timeseries import orders_until
from inventory_insights.frames import Records, inventory_frame, orders_frame, supplier_orders_frame

logger = logging.getLogger(__name__)


class InsightsOrchestrator:
    """Coordinates the analyzers with progress callbacks.

    Inputs are normalized once and shared by every stage. With ``as_of``,
    order lines and supplier orders dated after it are dropped up front so
    every stage sees the same history. A stage that fails is recorded as
    failed and the remaining stages still run.
    """

    STAGES = [
        "health_score", "abc_analysis", "smart_reorder", "anomaly_detection",
        "cost_optimization", "turnover_analysis", "demand_classification",
        "monte_carlo", "association_rules", "supplier_performance", "what_if_data",
    ]

    def __init__(self, on_progress: Optional[Callable] = None):
        """
        Args:
            on_progress: Optional callback(stage, status, data) for progress updates.
        """
        self.on_progress = on_progress or (lambda *a, **kw: None)

    def run(
        self,
        inventory: Records,
        orders: Records,
        supplier_orders: Iterable = (),
        simulation_count: int = MONTE_CARLO_SIMS,
        seed: Optional[int] = None,
        as_of: Optional[date] = None,
    ) -> dict:
        """Execute all analyses.

        Returns:
            Dict with ``status`` ("completed" or "partial"), ``stages`` mapping
            each stage name to its serialized result, and ``errors`` for any
            stage that failed.
        """
        inv = inventory_frame(inventory)
        df = orders_until(orders_frame(orders), as_of)
        suppliers = orders_until(supplier_orders_frame(supplier_orders), as_of)
        logger.info("Insights run started — %d products, %d order lines", len(inv), len(df))

        tasks = {
            "health_score": lambda: calculate_health_score(inv, df),
            "abc_analysis": lambda: calculate_abc_xyz(inv, df),
            "smart_reorder": lambda: calculate_smart_reorder(inv, df, as_of=as_of),
            "anomaly_detection": lambda: detect_anomalies(inv, df),
            "cost_optimization": lambda: calculate_cost_optimization(inv, df, as_of=as_of),
            "turnover_analysis": lambda: calculate_turnover(inv, df),
            "demand_classification": lambda: classify_demand_patterns(inv, df, as_of=as_of),
            "monte_carlo": lambda: run_monte_carlo_simulation(
                inv, df, simulation_count=simulation_count, seed=seed, as_of=as_of),
            "association_rules": lambda: mine_association_rules(df, inv),
            "supplier_performance": lambda: analyze_supplier_performance(suppliers),
            "what_if_data": lambda: build_what_if_data(inv, df, as_of=as_of),
        }

        results = {"stages": {}, "errors": {}}
        for stage in self.STAGES:
            self.on_progress(stage, "running", {})
            try:
                payload = tasks[stage]().to_dict()
            except Exception as e:
                logger.exception("Insights stage failed — %s", stage)
                results["errors"][stage] = str(e)
                self.on_progress(stage, "failed", {"error": str(e)})
                continue
            results["stages"][stage] = payload
            self.on_progress(stage, "completed", payload)

        results["status"] = "partial" if results["errors"] else "completed"
        logger.info("Insights run %s — %d/%d stages", results["status"],
                    len(results["stages"]), len(self.STAGES))
        return results
