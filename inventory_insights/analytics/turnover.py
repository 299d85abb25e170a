"""Inventory turnover and days-of-supply classification."""

import logging
from dataclasses import dataclass

from inventory_insights.config import (
    DAYS_SENTINEL,
    TURNOVER_FAST,
    TURNOVER_NORMAL,
    TURNOVER_SLOW,
    TurnoverClass,
)
from inventory_insights.analytics.stats import round_half_up, round_int
from inventory_insights.analytics.timeseries import month_span
from inventory_insights.frames import Records, ensure_orders_frame, inventory_frame, sales_frame
from inventory_insights.models import Record

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TurnoverItem(Record):
    product_id: str
    product_name: str
    sku: str
    category_name: str
    turnover_rate: float
    supply_days: int
    turnover_class: TurnoverClass
    avg_inventory_value: int
    annual_cogs: int


@dataclass(frozen=True)
class CategoryTurnover(Record):
    category: str
    avg_turnover_rate: float
    product_count: int
    total_cogs: int


@dataclass(frozen=True)
class TurnoverAnalysisResult(Record):
    items: list[TurnoverItem]
    category_turnovers: list[CategoryTurnover]
    avg_turnover_rate: float
    avg_supply_days: int
    benchmarks: dict[TurnoverClass, int]


def turnover_class(rate: float) -> TurnoverClass:
    if rate >= TURNOVER_FAST:
        return TurnoverClass.FAST
    if rate >= TURNOVER_NORMAL:
        return TurnoverClass.NORMAL
    if rate >= TURNOVER_SLOW:
        return TurnoverClass.SLOW
    return TurnoverClass.STAGNANT


def supply_days(rate: float) -> int:
    return round_int(365 / rate) if rate > 0 else DAYS_SENTINEL


def calculate_turnover(inventory: Records, orders: Records) -> TurnoverAnalysisResult:
    """Annualized COGS over on-hand inventory value, per product and per category."""
    logger.info("Turnover analysis started")
    inv = inventory_frame(inventory)
    df = ensure_orders_frame(orders)
    span = month_span(df)
    sales = sales_frame(df)
    sold_units = sales.groupby("product_id")["quantity"].sum()

    inv["annual_cogs"] = inv["product_id"].map(sold_units).fillna(0.0) * inv["cost_price"] / span * 12
    inv["inventory_value"] = (inv["quantity"] * inv["cost_price"]).clip(lower=1)
    inv["turnover_rate"] = inv["annual_cogs"] / inv["inventory_value"]

    items = [
        TurnoverItem(
            product_id=p.product_id,
            product_name=p.product_name,
            sku=p.sku,
            category_name=p.category_name,
            turnover_rate=round_half_up(p.turnover_rate, 1),
            supply_days=supply_days(p.turnover_rate),
            turnover_class=turnover_class(p.turnover_rate),
            avg_inventory_value=round_int(p.inventory_value),
            annual_cogs=round_int(p.annual_cogs),
        )
        for p in inv.itertuples(index=False)
    ]
    items.sort(key=lambda item: -item.turnover_rate)

    categories = []
    by_category: dict[str, list[TurnoverItem]] = {}
    for item in items:
        by_category.setdefault(item.category_name, []).append(item)
    for category, members in by_category.items():
        categories.append(CategoryTurnover(
            category=category,
            avg_turnover_rate=round_half_up(sum(m.turnover_rate for m in members) / len(members), 1),
            product_count=len(members),
            total_cogs=sum(m.annual_cogs for m in members),
        ))
    categories.sort(key=lambda c: -c.avg_turnover_rate)

    avg_rate = round_half_up(sum(i.turnover_rate for i in items) / len(items), 1) if items else 0.0
    benchmarks = {cls: sum(1 for i in items if i.turnover_class == cls) for cls in TurnoverClass}

    logger.info("Turnover analysis completed — %d items, avg rate %.1f", len(items), avg_rate)
    return TurnoverAnalysisResult(
        items=items,
        category_turnovers=categories,
        avg_turnover_rate=avg_rate,
        avg_supply_days=supply_days(avg_rate),
        benchmarks=benchmarks,
    )
