"""Shared test fixtures for the inventory analytics engine."""

from datetime import date

import pytest

from inventory_insights.config import OrderType
from inventory_insights.models import OrderHistory, ProductInventory, SupplierOrder

AS_OF = date(2025, 12, 15)


@pytest.fixture
def as_of():
    """Reference "now" used across tests."""
    return AS_OF


@pytest.fixture
def make_product():
    """Factory for inventory snapshots with sensible defaults."""
    def _make(product_id, quantity=50, min_quantity=10, unit_price=1000.0, cost_price=600.0,
              category="Electronics"):
        return ProductInventory(
            product_id=product_id,
            product_name=f"Product {product_id}",
            sku=f"SKU-{product_id}",
            category_name=category,
            quantity=quantity,
            min_quantity=min_quantity,
            unit_price=unit_price,
            cost_price=cost_price,
        )
    return _make


@pytest.fixture
def make_monthly_sales():
    """Factory for one sale per month, oldest first, ending in the month of ``AS_OF``.

    Months with a zero quantity produce no order line at all.
    """
    def _make(product_id, quantities, unit_price=1000.0, day=10, end=AS_OF):
        orders = []
        n = len(quantities)
        for i, qty in enumerate(quantities):
            offset = n - 1 - i
            year, month = end.year, end.month - offset
            while month < 1:
                month += 12
                year -= 1
            if qty > 0:
                orders.append(OrderHistory(
                    product_id=product_id,
                    quantity=qty,
                    unit_price=unit_price,
                    total_price=qty * unit_price,
                    order_date=date(year, month, day),
                    order_type=OrderType.SALE,
                ))
        return orders
    return _make


@pytest.fixture
def sale():
    """Factory for a single sale line."""
    def _make(product_id, order_date, quantity=1, unit_price=100.0):
        return OrderHistory(
            product_id=product_id,
            quantity=quantity,
            unit_price=unit_price,
            total_price=quantity * unit_price,
            order_date=order_date,
            order_type=OrderType.SALE,
        )
    return _make


@pytest.fixture
def intermittent_product(make_product, make_monthly_sales):
    """P1: 12 months of sales [0,0,5,0,0,6,0,0,4,0,0,5]."""
    product = make_product("P1", quantity=50, min_quantity=10, unit_price=1000, cost_price=600)
    orders = make_monthly_sales("P1", [0, 0, 5, 0, 0, 6, 0, 0, 4, 0, 0, 5])
    return product, orders


@pytest.fixture
def sample_inventory(make_product):
    """A small mixed catalogue."""
    return [
        make_product("P1", quantity=50, min_quantity=10),
        make_product("P2", quantity=0, min_quantity=5, unit_price=200, cost_price=150, category="Home"),
        make_product("P3", quantity=400, min_quantity=20, unit_price=50, cost_price=47, category="Home"),
        make_product("P4", quantity=30, min_quantity=10, unit_price=300, cost_price=120, category="Food"),
    ]


@pytest.fixture
def sample_orders(make_monthly_sales):
    """Sales history for the sample catalogue; P2 never sells."""
    return (
        make_monthly_sales("P1", [0, 0, 5, 0, 0, 6, 0, 0, 4, 0, 0, 5])
        + make_monthly_sales("P3", [2] * 12, unit_price=50)
        + make_monthly_sales("P4", [30, 28, 32, 30, 29, 31, 30, 30, 28, 32, 30, 30], unit_price=300)
    )


@pytest.fixture
def supplier_orders():
    """Two suppliers: one punctual and stable, one consistently late."""
    punctual = [
        SupplierOrder("S1", "Reliable Co", date(2025, m, 1), date(2025, m, 6), "delivered", 1000.0)
        for m in range(1, 5)
    ]
    late = [
        SupplierOrder("S2", "Slow Ltd", date(2025, m, 1), date(2025, m, 21), "delivered", 500.0)
        for m in range(1, 5)
    ]
    return punctual + late
