"""Insights orchestrator tests."""

import json
from datetime import date

from inventory_insights import orchestrator
from inventory_insights.models import SupplierOrder
from inventory_insights.orchestrator import InsightsOrchestrator


class TestInsightsOrchestrator:
    """Test the full analysis run."""

    def test_all_stages_complete(self, sample_inventory, sample_orders, supplier_orders, as_of):
        result = InsightsOrchestrator().run(
            sample_inventory, sample_orders, supplier_orders,
            simulation_count=50, seed=1, as_of=as_of,
        )
        assert result["status"] == "completed"
        assert result["errors"] == {}
        assert list(result["stages"]) == InsightsOrchestrator.STAGES
        # plain JSON all the way down
        json.dumps(result)

    def test_progress_callbacks(self, sample_inventory, sample_orders, as_of):
        events = []
        InsightsOrchestrator(on_progress=lambda stage, status, data: events.append((stage, status))).run(
            sample_inventory, sample_orders, simulation_count=20, seed=1, as_of=as_of,
        )
        assert len(events) == 2 * len(InsightsOrchestrator.STAGES)
        assert events[0] == ("health_score", "running")
        assert events[1] == ("health_score", "completed")
        assert events[-1] == ("what_if_data", "completed")

    def test_failed_stage_marks_partial(self, monkeypatch, sample_inventory, sample_orders, as_of):
        def boom(*args, **kwargs):
            raise RuntimeError("turnover exploded")

        monkeypatch.setattr(orchestrator, "calculate_turnover", boom)
        events = []
        result = InsightsOrchestrator(on_progress=lambda *a: events.append(a)).run(
            sample_inventory, sample_orders, simulation_count=20, seed=1, as_of=as_of,
        )
        assert result["status"] == "partial"
        assert result["errors"] == {"turnover_analysis": "turnover exploded"}
        assert "turnover_analysis" not in result["stages"]
        assert len(result["stages"]) == len(InsightsOrchestrator.STAGES) - 1
        assert ("turnover_analysis", "failed", {"error": "turnover exploded"}) in events

    def test_same_seed_is_reproducible(self, sample_inventory, sample_orders, as_of):
        a = InsightsOrchestrator().run(sample_inventory, sample_orders, simulation_count=30, seed=7, as_of=as_of)
        b = InsightsOrchestrator().run(sample_inventory, sample_orders, simulation_count=30, seed=7, as_of=as_of)
        assert a["stages"]["monte_carlo"] == b["stages"]["monte_carlo"]

    def test_accepts_dict_rows(self, as_of):
        inventory = [{
            "productId": "P1", "productName": "Widget", "sku": "W-1", "categoryName": None,
            "quantity": 5, "minQuantity": 2, "unitPrice": 10, "costPrice": 6,
        }]
        orders = [
            {"productId": "P1", "quantity": 2, "unitPrice": 10, "totalPrice": 20,
             "orderDate": f"2025-{m:02d}-05", "orderType": "sale"}
            for m in range(1, 13)
        ]
        result = InsightsOrchestrator().run(inventory, orders, simulation_count=10, seed=1, as_of=as_of)
        assert result["status"] == "completed"
        turnover = result["stages"]["turnover_analysis"]
        assert turnover["items"][0]["category_name"] == "Uncategorized"

    def test_lines_after_as_of_are_ignored_by_every_stage(
        self, sale, sample_inventory, sample_orders, supplier_orders, as_of,
    ):
        """Verify a later sale and supplier order change none of the stage results."""
        baseline = InsightsOrchestrator().run(
            sample_inventory, sample_orders, supplier_orders, simulation_count=30, seed=3, as_of=as_of,
        )
        later_sales = sample_orders + [sale("P4", date(2026, 1, 5), quantity=5000, unit_price=300)]
        later_suppliers = supplier_orders + [
            SupplierOrder("S1", "Reliable Co", date(2026, 2, 1), None, "pending", 90000.0),
        ]
        result = InsightsOrchestrator().run(
            sample_inventory, later_sales, later_suppliers, simulation_count=30, seed=3, as_of=as_of,
        )
        assert result["stages"]["turnover_analysis"] == baseline["stages"]["turnover_analysis"]
        assert result["stages"] == baseline["stages"]
