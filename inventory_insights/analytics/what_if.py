"""What-if re-projection of safety stock, reorder point and stockout day.

``build_what_if_data`` computes the baseline once; ``compute_what_if`` is a
constant-time recalculation under demand and lead-time multipliers, cheap
enough to run on every slider movement.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Optional

import numpy as np

from inventory_insights.config import DAYS_PER_MONTH, DEFAULT_SERIES_MONTHS, LEAD_TIME_DAYS
from inventory_insights.analytics.stats import Z_95, mean, round2, round_int, safety_stock, std_dev
from inventory_insights.analytics.timeseries import build_monthly_series
from inventory_insights.frames import Records, ensure_orders_frame, inventory_frame
from inventory_insights.models import Record

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WhatIfProduct(Record):
    product_id: str
    product_name: str
    sku: str
    current_stock: int
    avg_daily_demand: float
    demand_std_dev: float
    cost_price: float
    unit_price: float
    current_safety_stock: int
    current_reorder_point: int
    lead_time_days: int
    days_until_stockout: Optional[int]


@dataclass(frozen=True)
class WhatIfBaseData(Record):
    products: list[WhatIfProduct]
    total_inventory_value: float
    total_daily_cost: float


@dataclass(frozen=True)
class WhatIfDelta(Record):
    safety_stock: int
    reorder_point: int
    days_until_stockout: Optional[int]
    daily_demand: float
    safety_stock_delta: int
    reorder_point_delta: int
    stockout_delta: Optional[int]


def _project(daily_demand: float, daily_std: float, lead_time: float, stock: float):
    buffer = safety_stock(Z_95, daily_std, lead_time)
    reorder_point = math.ceil(daily_demand * lead_time + buffer)
    days_left = round_int(stock / daily_demand) if daily_demand > 0 else None
    return buffer, reorder_point, days_left


def build_what_if_data(
    inventory: Records,
    orders: Records,
    lead_time_days: int = LEAD_TIME_DAYS,
    as_of: Optional[date] = None,
) -> WhatIfBaseData:
    """Baseline demand statistics and policy levels for every product with stock or demand.

    Policy levels are projected from the two-decimal demand figures stored on
    each ``WhatIfProduct``, the same figures ``compute_what_if`` scales.
    """
    logger.info("What-if baseline started")
    inv = inventory_frame(inventory)
    series_map = build_monthly_series(ensure_orders_frame(orders), DEFAULT_SERIES_MONTHS, as_of)

    products = []
    total_value = total_daily_cost = 0.0
    for p in inv.itertuples(index=False):
        monthly = series_map.get(p.product_id, np.zeros(0))
        daily_demand = mean(monthly) / DAYS_PER_MONTH
        daily_std = std_dev(monthly) / DAYS_PER_MONTH
        if daily_demand <= 0 and p.quantity <= 0:
            continue

        daily_demand, daily_std = round2(daily_demand), round2(daily_std)
        buffer, reorder_point, days_left = _project(daily_demand, daily_std, lead_time_days, p.quantity)
        products.append(WhatIfProduct(
            product_id=p.product_id,
            product_name=p.product_name,
            sku=p.sku,
            current_stock=int(p.quantity),
            avg_daily_demand=daily_demand,
            demand_std_dev=daily_std,
            cost_price=p.cost_price,
            unit_price=p.unit_price,
            current_safety_stock=buffer,
            current_reorder_point=reorder_point,
            lead_time_days=lead_time_days,
            days_until_stockout=days_left,
        ))
        total_value += p.quantity * p.cost_price
        total_daily_cost += daily_demand * p.cost_price

    logger.info("What-if baseline completed — %d products", len(products))
    return WhatIfBaseData(
        products=products,
        total_inventory_value=round2(total_value),
        total_daily_cost=round2(total_daily_cost),
    )


def compute_what_if(product: WhatIfProduct, demand_multiplier: float, lead_time_multiplier: float) -> WhatIfDelta:
    """Re-project one product's policy under scaled demand and lead time."""
    daily_demand = product.avg_daily_demand * demand_multiplier
    daily_std = product.demand_std_dev * demand_multiplier
    lead_time = product.lead_time_days * lead_time_multiplier

    buffer, reorder_point, days_left = _project(daily_demand, daily_std, lead_time, product.current_stock)
    stockout_delta = (
        days_left - product.days_until_stockout
        if days_left is not None and product.days_until_stockout is not None
        else None
    )
    return WhatIfDelta(
        safety_stock=buffer,
        reorder_point=reorder_point,
        days_until_stockout=days_left,
        daily_demand=round2(daily_demand),
        safety_stock_delta=buffer - product.current_safety_stock,
        reorder_point_delta=reorder_point - product.current_reorder_point,
        stockout_delta=stockout_delta,
    )
