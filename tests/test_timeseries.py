"""Monthly series aggregation tests."""

from datetime import date

import numpy as np

from inventory_insights.analytics.timeseries import (
    build_monthly_series,
    build_monthly_table,
    month_keys,
    month_span,
    orders_until,
)
from inventory_insights.config import OrderType
from inventory_insights.frames import orders_frame
from inventory_insights.models import OrderHistory


class TestMonthKeys:
    """Test trailing month key generation."""

    def test_keys_cross_year_boundary(self):
        """Verify keys run oldest first and wrap into the previous year."""
        assert month_keys(3, date(2025, 2, 10)) == ["2024-12", "2025-01", "2025-02"]

    def test_key_count(self):
        assert len(month_keys(12, date(2025, 12, 1))) == 12


class TestBuildMonthlySeries:
    """Test the fixed-length, zero-filled series contract."""

    def test_series_always_full_length(self, make_monthly_sales, as_of):
        """Verify sparse input still yields exactly ``months`` entries."""
        orders = make_monthly_sales("P1", [0, 0, 5, 0, 0, 6, 0, 0, 4, 0, 0, 5])
        series = build_monthly_series(orders, 12, as_of)
        assert len(series["P1"]) == 12
        np.testing.assert_array_equal(series["P1"], [0, 0, 5, 0, 0, 6, 0, 0, 4, 0, 0, 5])

    def test_purchases_do_not_count(self, sale, as_of):
        """Verify only sale orders contribute demand."""
        orders = [
            sale("P1", date(2025, 12, 1), quantity=4),
            OrderHistory("P1", 100, 10.0, 1000.0, date(2025, 12, 2), OrderType.PURCHASE),
        ]
        series = build_monthly_series(orders, 12, as_of)
        assert series["P1"][-1] == 4

    def test_orders_outside_window_ignored(self, sale, as_of):
        """Verify sales older than the window are dropped but the product is kept."""
        orders = [sale("P1", date(2023, 1, 5), quantity=9)]
        series = build_monthly_series(orders, 12, as_of)
        np.testing.assert_array_equal(series["P1"], np.zeros(12))

    def test_sales_after_as_of_in_the_same_month_ignored(self, sale, as_of):
        orders = [sale("P1", date(2025, 12, 10), quantity=2), sale("P1", date(2025, 12, 20), quantity=40)]
        series = build_monthly_series(orders, 12, as_of)
        assert series["P1"][-1] == 2

    def test_same_month_orders_summed(self, sale, as_of):
        orders = [sale("P1", date(2025, 11, 1), quantity=2), sale("P1", date(2025, 11, 28), quantity=3)]
        series = build_monthly_series(orders, 12, as_of)
        assert series["P1"][-2] == 5

    def test_default_reference_is_latest_order(self, sale):
        """Verify the window closes on the latest order's month when no date is given."""
        orders = [sale("P1", date(2024, 6, 3), quantity=7)]
        series = build_monthly_series(orders, 6)
        assert series["P1"][-1] == 7

    def test_accepts_camel_case_dicts(self, as_of):
        orders = [{
            "productId": "P9", "quantity": 3, "unitPrice": 1.0, "totalPrice": 3.0,
            "orderDate": "2025-12-01", "orderType": "sale",
        }]
        series = build_monthly_series(orders, 12, as_of)
        assert series["P9"][-1] == 3

    def test_empty_orders(self):
        assert build_monthly_series([], 12) == {}


class TestMonthlyHelpers:
    """Test sparse month tables and span."""

    def test_monthly_table_is_sparse(self, make_monthly_sales):
        orders = make_monthly_sales("P1", [0, 0, 5, 0, 0, 6])
        table = build_monthly_table(orders)
        assert list(table["P1"].values) == [5, 6]

    def test_month_span(self, sale):
        """Verify span is the ceiling of elapsed 30-day months, at least 1."""
        orders = [sale("P1", date(2025, 1, 1)), sale("P1", date(2025, 3, 2))]
        assert month_span(orders) == 2
        assert month_span([sale("P1", date(2025, 1, 1))]) == 1
        assert month_span([]) == 1


class TestOrdersUntil:
    def test_cutoff_is_inclusive(self, sale):
        df = orders_frame([sale("P1", date(2025, 12, 15)), sale("P1", date(2025, 12, 16))])
        kept = orders_until(df, date(2025, 12, 15))
        assert list(kept["order_date"].dt.day) == [15]

    def test_no_cutoff_keeps_everything(self, sale):
        df = orders_frame([sale("P1", date(2025, 12, 15)), sale("P1", date(2030, 1, 1))])
        assert len(orders_until(df, None)) == 2
