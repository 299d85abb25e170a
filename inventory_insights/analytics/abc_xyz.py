"""ABC (revenue concentration) x XYZ (demand variability) classification."""

import logging
from dataclasses import dataclass

import numpy as np

from inventory_insights.config import (
    ABC_THRESHOLD_A,
    ABC_THRESHOLD_B,
    CV_SENTINEL,
    XYZ_THRESHOLD_X,
    XYZ_THRESHOLD_Y,
    AbcClass,
    XyzClass,
)
from inventory_insights.analytics.stats import round2, safe_div
from inventory_insights.analytics.timeseries import build_monthly_table
from inventory_insights.frames import Records, ensure_orders_frame, inventory_frame, sales_frame
from inventory_insights.models import Record

logger = logging.getLogger(__name__)

RECOMMENDATIONS = {
    "AX": "Core item — automate replenishment, hold optimal stock",
    "AY": "Key item — secure safety stock, review periodically",
    "AZ": "High revenue, irregular — strengthen forecasting, keep a buffer",
    "BX": "Stable demand — scheduled ordering, standard control",
    "BY": "Moderate variability — monthly review, flexible ordering",
    "BZ": "Moderate, irregular — watch order timing, consider JIT",
    "CX": "Low revenue, stable — minimal stock, automated control",
    "CY": "Low revenue, variable — consider reducing stock",
    "CZ": "Low revenue, irregular — consider discontinuing or clearing",
}


@dataclass(frozen=True)
class AbcXyzItem(Record):
    product_id: str
    product_name: str
    sku: str
    abc_class: AbcClass
    xyz_class: XyzClass
    total_revenue: float
    revenue_share: float
    cumulative_share: float
    cv: float
    recommendation: str


@dataclass(frozen=True)
class AbcXyzResult(Record):
    items: list[AbcXyzItem]
    summary: dict[str, int]


def demand_cv(monthly) -> float:
    """CV over observed months; ``CV_SENTINEL`` when there is no usable data."""
    if monthly is None or len(monthly) == 0:
        return float(CV_SENTINEL)
    values = np.asarray(monthly, dtype=float)
    avg = values.mean()
    if avg == 0:
        return float(CV_SENTINEL)
    return float(values.std() / avg)


def abc_class(cumulative_share: float) -> AbcClass:
    if cumulative_share <= ABC_THRESHOLD_A:
        return AbcClass.A
    if cumulative_share <= ABC_THRESHOLD_B:
        return AbcClass.B
    return AbcClass.C


def xyz_class(cv: float) -> XyzClass:
    if cv <= XYZ_THRESHOLD_X:
        return XyzClass.X
    if cv <= XYZ_THRESHOLD_Y:
        return XyzClass.Y
    return XyzClass.Z


def calculate_abc_xyz(inventory: Records, orders: Records) -> AbcXyzResult:
    """Rank products by sale revenue and cross with monthly demand variability."""
    logger.info("ABC/XYZ analysis started")
    inv = inventory_frame(inventory)
    sales = sales_frame(ensure_orders_frame(orders))
    revenue = sales.groupby("product_id")["total_price"].sum()
    monthly_table = build_monthly_table(sales)
    total_revenue = float(revenue.sum())

    inv["total_revenue"] = inv["product_id"].map(revenue).fillna(0.0)
    ranked = inv.sort_values("total_revenue", ascending=False, kind="stable")

    items = []
    cumulative = 0.0
    for p in ranked.itertuples(index=False):
        share = safe_div(p.total_revenue, total_revenue)
        cumulative += share
        cv = demand_cv(monthly_table.get(p.product_id))
        abc, xyz = abc_class(cumulative), xyz_class(cv)
        items.append(AbcXyzItem(
            product_id=p.product_id,
            product_name=p.product_name,
            sku=p.sku,
            abc_class=abc,
            xyz_class=xyz,
            total_revenue=round2(p.total_revenue),
            revenue_share=share,
            cumulative_share=cumulative,
            cv=round2(cv),
            recommendation=RECOMMENDATIONS[f"{abc.value}{xyz.value}"],
        ))

    summary = {c.value: 0 for c in AbcClass} | {c.value: 0 for c in XyzClass}
    for item in items:
        summary[item.abc_class.value] += 1
        summary[item.xyz_class.value] += 1

    logger.info("ABC/XYZ analysis completed — %d items (A=%d, B=%d, C=%d)",
                len(items), summary["A"], summary["B"], summary["C"])
    return AbcXyzResult(items=items, summary=summary)
