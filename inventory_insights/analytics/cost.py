"""Cost optimization: dead stock, overstock, margins and savings recommendations."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from inventory_insights.config import (
    DAYS_SENTINEL,
    DEAD_STOCK_DAYS,
    LOW_CATEGORY_MARGIN,
    LOW_MARGIN_THRESHOLD,
    MAX_RECOMMENDATIONS,
    OVERSTOCK_MULTIPLIER,
    PRIORITY_ORDER,
    Priority,
)
from inventory_insights.analytics.stats import round2, round_int
from inventory_insights.analytics.timeseries import orders_until, reference_date
from inventory_insights.frames import Records, ensure_orders_frame, inventory_frame, sales_frame
from inventory_insights.models import Record

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeadStockItem(Record):
    product_id: str
    product_name: str
    sku: str
    quantity: int
    value: float
    days_since_last_sale: int


@dataclass(frozen=True)
class OverstockItem(Record):
    product_id: str
    product_name: str
    sku: str
    quantity: int
    min_quantity: int
    excess_quantity: int
    excess_value: float


@dataclass(frozen=True)
class MarginItem(Record):
    product_id: str
    product_name: str
    sku: str
    unit_price: float
    cost_price: float
    margin: float


@dataclass(frozen=True)
class CategoryMargin(Record):
    category: str
    avg_margin: float
    product_count: int
    total_revenue: float


@dataclass(frozen=True)
class CostRecommendation(Record):
    priority: Priority
    title: str
    description: str
    potential_savings: int


@dataclass(frozen=True)
class CostOptimizationResult(Record):
    dead_stock: list[DeadStockItem]
    overstock: list[OverstockItem]
    low_margin_products: list[MarginItem]
    category_margins: list[CategoryMargin]
    recommendations: list[CostRecommendation]
    total_dead_stock_value: float
    total_overstock_value: float
    total_potential_savings: int


def calculate_cost_optimization(
    inventory: Records,
    orders: Records,
    as_of: Optional[date] = None,
) -> CostOptimizationResult:
    """Find capital tied up in slow or excess stock and under-priced products.

    ``as_of`` is the reference date for days-since-last-sale; later order
    lines are ignored. It defaults to the latest order date in ``orders``.
    """
    logger.info("Cost optimization started")
    inv = inventory_frame(inventory)
    df = orders_until(ensure_orders_frame(orders), as_of)
    sales = sales_frame(df)
    ref = reference_date(df, as_of)
    last_sale = sales.groupby("product_id")["order_date"].max()
    revenue = sales.groupby("product_id")["total_price"].sum()

    dead_stock = []
    for p in inv[inv["quantity"] > 0].itertuples(index=False):
        if p.product_id in last_sale.index and ref is not None:
            days_since = (ref - last_sale[p.product_id]).days
        else:
            days_since = DAYS_SENTINEL
        if days_since >= DEAD_STOCK_DAYS:
            dead_stock.append(DeadStockItem(
                product_id=p.product_id,
                product_name=p.product_name,
                sku=p.sku,
                quantity=int(p.quantity),
                value=round2(p.quantity * p.cost_price),
                days_since_last_sale=int(days_since),
            ))
    dead_stock.sort(key=lambda d: -d.value)

    overstock = []
    excess_rows = inv[(inv["min_quantity"] > 0) & (inv["quantity"] > inv["min_quantity"] * OVERSTOCK_MULTIPLIER)]
    for p in excess_rows.itertuples(index=False):
        excess = int(p.quantity - p.min_quantity)
        overstock.append(OverstockItem(
            product_id=p.product_id,
            product_name=p.product_name,
            sku=p.sku,
            quantity=int(p.quantity),
            min_quantity=int(p.min_quantity),
            excess_quantity=excess,
            excess_value=round2(excess * p.cost_price),
        ))
    overstock.sort(key=lambda o: -o.excess_value)

    priced = inv[inv["unit_price"] > 0].copy()
    priced["margin"] = (priced["unit_price"] - priced["cost_price"]) / priced["unit_price"]
    priced["revenue"] = priced["product_id"].map(revenue).fillna(0.0)

    low_margin = [
        MarginItem(
            product_id=p.product_id,
            product_name=p.product_name,
            sku=p.sku,
            unit_price=p.unit_price,
            cost_price=p.cost_price,
            margin=p.margin,
        )
        for p in priced[(priced["cost_price"] > 0) & (priced["margin"] < LOW_MARGIN_THRESHOLD)].itertuples(index=False)
    ]
    low_margin.sort(key=lambda m: m.margin)

    category_margins = [
        CategoryMargin(
            category=category,
            avg_margin=float(group["margin"].mean()),
            product_count=len(group),
            total_revenue=round2(float(group["revenue"].sum())),
        )
        for category, group in priced.groupby("category_name", sort=False)
    ]
    category_margins.sort(key=lambda c: -c.total_revenue)

    total_dead = round2(sum(d.value for d in dead_stock))
    total_over = round2(sum(o.excess_value for o in overstock))
    recommendations = build_recommendations(dead_stock, overstock, low_margin, category_margins,
                                            total_dead, total_over)
    total_savings = sum(r.potential_savings for r in recommendations)

    logger.info("Cost optimization completed — %d dead, %d overstock, %d low margin",
                len(dead_stock), len(overstock), len(low_margin))
    return CostOptimizationResult(
        dead_stock=dead_stock,
        overstock=overstock,
        low_margin_products=low_margin,
        category_margins=category_margins,
        recommendations=recommendations[:MAX_RECOMMENDATIONS],
        total_dead_stock_value=total_dead,
        total_overstock_value=total_over,
        total_potential_savings=total_savings,
    )


def build_recommendations(dead_stock, overstock, low_margin, category_margins,
                          total_dead: float, total_over: float) -> list[CostRecommendation]:
    recommendations = []
    if dead_stock:
        recommendations.append(CostRecommendation(
            priority=Priority.HIGH,
            title="Clear dead stock",
            description=f"{len(dead_stock)} products have not sold in {DEAD_STOCK_DAYS}+ days. "
                        "Consider discounting or writing off",
            potential_savings=round_int(total_dead * 0.3),
        ))
    if overstock:
        recommendations.append(CostRecommendation(
            priority=Priority.HIGH,
            title="Reduce overstock",
            description=f"{len(overstock)} products hold more than {OVERSTOCK_MULTIPLIER}x their minimum quantity",
            potential_savings=round_int(total_over * 0.15),
        ))
    if low_margin:
        shortfall = sum(m.unit_price * LOW_MARGIN_THRESHOLD - (m.unit_price - m.cost_price) for m in low_margin)
        recommendations.append(CostRecommendation(
            priority=Priority.MEDIUM,
            title="Reprice low-margin products",
            description=f"{len(low_margin)} products have a margin below {LOW_MARGIN_THRESHOLD:.0%}",
            potential_savings=round_int(shortfall * 12),
        ))
    weak = [c for c in category_margins if c.avg_margin < LOW_CATEGORY_MARGIN and c.product_count > 1]
    if weak:
        recommendations.append(CostRecommendation(
            priority=Priority.MEDIUM,
            title="Improve category profitability",
            description=f"Average margin is low in: {', '.join(c.category for c in weak)}",
            potential_savings=0,
        ))
    recommendations.sort(key=lambda r: PRIORITY_ORDER[r.priority])
    return recommendations
