"""Supplier scorecards from purchase-order history."""

import logging
from dataclasses import dataclass
from typing import Optional

from inventory_insights.config import EXPECTED_LEAD_TIME_DAYS, SUPPLIER_WEIGHTS, Grade
from inventory_insights.analytics.stats import cv, mean, round2, round_int, safe_div, score_to_grade, std_dev
from inventory_insights.frames import Records, supplier_orders_frame
from inventory_insights.models import Record

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SupplierScore(Record):
    supplier_id: str
    supplier_name: str
    total_orders: int
    delivered_orders: int
    avg_lead_time_days: float
    lead_time_std_dev: float
    on_time_rate: float
    price_stability: float
    fulfillment_rate: float
    overall_score: int
    grade: Grade
    recommendation: str


@dataclass(frozen=True)
class SupplierPerformanceResult(Record):
    suppliers: list[SupplierScore]
    avg_score: int
    best_supplier_id: Optional[str]
    worst_supplier_id: Optional[str]


def supplier_recommendation(grade: Grade, on_time_rate: float, price_stability: float) -> str:
    if grade == Grade.A:
        return "Excellent supplier — keep as primary partner"
    if grade == Grade.B:
        return "Good — continue the stable relationship"
    if on_time_rate < 0.7:
        return "Frequent late deliveries — secure an alternative source"
    if price_stability < 0.5:
        return "Volatile pricing — negotiate a long-term contract or price terms"
    if grade in (Grade.D, Grade.F):
        return "Underperforming — reduce volume or evaluate replacements"
    return "Average — monitor performance regularly"


def analyze_supplier_performance(
    supplier_orders: Records,
    expected_lead_time_days: float = EXPECTED_LEAD_TIME_DAYS,
) -> SupplierPerformanceResult:
    """Score suppliers on on-time delivery, lead-time consistency, price stability and fulfillment."""
    logger.info("Supplier performance analysis started")
    df = supplier_orders_frame(supplier_orders)
    if df.empty:
        return SupplierPerformanceResult(suppliers=[], avg_score=0, best_supplier_id=None, worst_supplier_id=None)

    w_on_time, w_lead, w_price, w_fill = SUPPLIER_WEIGHTS
    suppliers = []
    for supplier_id, group in df.groupby("supplier_id", sort=False):
        lead_times = group.loc[group["delivered"], "lead_time_days"].tolist()
        total = len(group)
        delivered = len(lead_times)

        lead_std = std_dev(lead_times)
        on_time_rate = safe_div(sum(1 for lt in lead_times if lt <= expected_lead_time_days), delivered)
        amounts = group.loc[group["total_amount"] > 0, "total_amount"].tolist()
        price_stability = min(1.0, max(0.0, 1 - cv(amounts)))
        fulfillment_rate = safe_div(delivered, total)
        consistency = max(0.0, 100 - lead_std * 10)

        score = round_int(
            on_time_rate * 100 * w_on_time
            + consistency * w_lead
            + price_stability * 100 * w_price
            + fulfillment_rate * 100 * w_fill
        )
        grade = score_to_grade(score)
        suppliers.append(SupplierScore(
            supplier_id=supplier_id,
            supplier_name=group["supplier_name"].iloc[0],
            total_orders=total,
            delivered_orders=delivered,
            avg_lead_time_days=round2(mean(lead_times)),
            lead_time_std_dev=round2(lead_std),
            on_time_rate=round2(on_time_rate),
            price_stability=round2(price_stability),
            fulfillment_rate=round2(fulfillment_rate),
            overall_score=score,
            grade=grade,
            recommendation=supplier_recommendation(grade, on_time_rate, price_stability),
        ))

    suppliers.sort(key=lambda s: -s.overall_score)
    avg_score = round_int(sum(s.overall_score for s in suppliers) / len(suppliers))

    logger.info("Supplier performance analysis completed — %d suppliers, avg score %d",
                len(suppliers), avg_score)
    return SupplierPerformanceResult(
        suppliers=suppliers,
        avg_score=avg_score,
        best_supplier_id=suppliers[0].supplier_id,
        worst_supplier_id=suppliers[-1].supplier_id,
    )
