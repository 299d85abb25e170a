"""Overall inventory health score."""

import logging
from dataclasses import dataclass

from inventory_insights.config import OVERSTOCK_MULTIPLIER, TURNOVER_FAST, Grade
from inventory_insights.analytics.stats import round_int, score_to_grade
from inventory_insights.analytics.timeseries import month_span
from inventory_insights.frames import Records, ensure_orders_frame, inventory_frame, sales_frame
from inventory_insights.models import Record

logger = logging.getLogger(__name__)

# (label, weight)
COMPONENTS = [
    ("Stock coverage", 25),
    ("Stockout risk", 25),
    ("Overstock ratio", 20),
    ("Turnover rate", 20),
    ("Data quality", 10),
]


@dataclass(frozen=True)
class HealthComponent(Record):
    label: str
    score: int
    weight: int
    description: str


@dataclass(frozen=True)
class HealthScoreResult(Record):
    score: int
    grade: Grade
    components: list[HealthComponent]


def calculate_health_score(inventory: Records, orders: Records) -> HealthScoreResult:
    """Weighted 0-100 score over coverage, stockouts, overstock, turnover and data quality."""
    logger.info("Health score started")
    inv = inventory_frame(inventory)
    df = ensure_orders_frame(orders)
    if inv.empty:
        components = [HealthComponent(label, 0, weight, "No data") for label, weight in COMPONENTS]
        return HealthScoreResult(score=0, grade=Grade.F, components=components)

    n = len(inv)
    adequate = int((inv["quantity"] >= inv["min_quantity"]).sum())
    stockouts = int((inv["quantity"] <= 0).sum())
    overstocked = int(((inv["min_quantity"] > 0)
                       & (inv["quantity"] > inv["min_quantity"] * OVERSTOCK_MULTIPLIER)).sum())

    sold = sales_frame(df).groupby("product_id")["quantity"].sum()
    annual_sales = inv["product_id"].map(sold).fillna(0.0) * (12 / month_span(df))
    turnover = annual_sales / inv["quantity"].where(inv["quantity"] > 0, 1)
    avg_turnover = float(turnover.mean())

    with_orders = int(inv["product_id"].isin(df["product_id"]).sum())

    scores = [
        (adequate / n * 100, f"{adequate}/{n} products at or above minimum quantity"),
        ((1 - stockouts / n) * 100, f"{stockouts} products out of stock"),
        ((1 - overstocked / n) * 100, f"{overstocked} products above {OVERSTOCK_MULTIPLIER}x minimum quantity"),
        (min(100.0, avg_turnover / TURNOVER_FAST * 100), f"Average turnover {avg_turnover:.1f}x per year"),
        (min(100.0, with_orders / n * 100), f"{with_orders}/{n} products have order data"),
    ]
    components = [
        HealthComponent(label=label, score=round_int(value), weight=weight, description=description)
        for (label, weight), (value, description) in zip(COMPONENTS, scores)
    ]
    score = round_int(sum(c.score * c.weight / 100 for c in components))

    logger.info("Health score completed — %d (%s)", score, score_to_grade(score).value)
    return HealthScoreResult(score=score, grade=score_to_grade(score), components=components)
