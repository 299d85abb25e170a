"""Smart reorder: EOQ, safety stock, reorder point and cost savings."""

import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Optional

from inventory_insights.config import (
    DAYS_PER_MONTH,
    HOLDING_RATE,
    LEAD_TIME_DAYS,
    ORDER_COST_RATE,
)
from inventory_insights.analytics.stats import Z_95, round2, round_half_up, round_int, safety_stock, std_dev
from inventory_insights.analytics.timeseries import build_monthly_table, month_span, orders_until
from inventory_insights.frames import Records, ensure_orders_frame, inventory_frame, sales_frame
from inventory_insights.models import Record

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReorderItem(Record):
    product_id: str
    product_name: str
    sku: str
    current_stock: int
    min_quantity: int
    avg_daily_demand: float
    eoq: int
    safety_stock: int
    reorder_point: int
    needs_reorder: bool
    current_cost: int
    optimal_cost: int
    savings_percent: float


@dataclass(frozen=True)
class ReorderAlert(Record):
    """A product at or below its floor that has no demand history to size an order."""
    product_id: str
    product_name: str
    sku: str
    current_stock: int
    min_quantity: int
    reason: str


@dataclass(frozen=True)
class SmartReorderResult(Record):
    items: list[ReorderItem]
    alerts: list[ReorderAlert]
    total_current_cost: int
    total_optimal_cost: int
    total_savings: int
    reorder_needed_count: int


def economic_order_quantity(annual_demand: float, order_cost: float, holding_cost: float) -> int:
    """``sqrt(2DS/H)`` rounded, never below one unit."""
    if annual_demand <= 0 or holding_cost <= 0:
        return 1
    return max(1, round_int(math.sqrt(2 * annual_demand * order_cost / holding_cost)))


def annual_policy_cost(annual_demand: float, batch: float, order_cost: float, holding_cost: float) -> float:
    """Ordering plus average holding cost of reordering in fixed batches."""
    if batch <= 0:
        return 0.0
    return annual_demand / batch * order_cost + batch / 2 * holding_cost


def calculate_smart_reorder(
    inventory: Records,
    orders: Records,
    lead_time_days: int = LEAD_TIME_DAYS,
    as_of: Optional[date] = None,
) -> SmartReorderResult:
    """EOQ-based reorder policy for every product with positive demand.

    Products without demand cannot be sized; those at zero stock or at/below
    their minimum quantity are reported in ``alerts`` instead.
    """
    logger.info("Smart reorder analysis started")
    inv = inventory_frame(inventory)
    df = orders_until(ensure_orders_frame(orders), as_of)
    sales = sales_frame(df)
    span = month_span(df)
    total_sales = sales.groupby("product_id")["quantity"].sum()
    monthly_table = build_monthly_table(sales)

    items, alerts = [], []
    for p in inv.itertuples(index=False):
        daily_demand = float(total_sales.get(p.product_id, 0.0)) / (span * DAYS_PER_MONTH)
        if daily_demand <= 0:
            if p.quantity <= 0 or p.quantity <= p.min_quantity:
                alerts.append(ReorderAlert(
                    product_id=p.product_id,
                    product_name=p.product_name,
                    sku=p.sku,
                    current_stock=int(p.quantity),
                    min_quantity=int(p.min_quantity),
                    reason="out_of_stock" if p.quantity <= 0 else "below_minimum",
                ))
            continue

        annual_demand = daily_demand * 365
        order_cost = p.cost_price * ORDER_COST_RATE
        holding_cost = p.cost_price * HOLDING_RATE
        eoq = economic_order_quantity(annual_demand, order_cost, holding_cost)

        monthly = monthly_table.get(p.product_id)
        daily_std = std_dev(monthly.to_numpy()) / DAYS_PER_MONTH if monthly is not None else 0.0
        buffer = max(1, safety_stock(Z_95, daily_std, lead_time_days))
        reorder_point = math.ceil(daily_demand * lead_time_days + buffer)

        current_batch = p.min_quantity if p.min_quantity > 0 else eoq
        current_cost = annual_policy_cost(annual_demand, current_batch, order_cost, holding_cost)
        optimal_cost = annual_policy_cost(annual_demand, eoq, order_cost, holding_cost)
        savings = (current_cost - optimal_cost) / current_cost * 100 if current_cost > 0 else 0.0

        items.append(ReorderItem(
            product_id=p.product_id,
            product_name=p.product_name,
            sku=p.sku,
            current_stock=int(p.quantity),
            min_quantity=int(p.min_quantity),
            avg_daily_demand=round2(daily_demand),
            eoq=eoq,
            safety_stock=buffer,
            reorder_point=reorder_point,
            needs_reorder=bool(p.quantity <= reorder_point),
            current_cost=round_int(current_cost),
            optimal_cost=round_int(optimal_cost),
            savings_percent=round_half_up(savings, 1),
        ))

    items.sort(key=lambda item: (not item.needs_reorder, item.current_stock))
    total_current = sum(item.current_cost for item in items)
    total_optimal = sum(item.optimal_cost for item in items)
    needed = sum(1 for item in items if item.needs_reorder)

    logger.info("Smart reorder analysis completed — %d items, %d need reorder, %d alerts",
                len(items), needed, len(alerts))
    return SmartReorderResult(
        items=items,
        alerts=alerts,
        total_current_cost=total_current,
        total_optimal_cost=total_optimal,
        total_savings=total_current - total_optimal,
        reorder_needed_count=needed,
    )
