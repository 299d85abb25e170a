"""Demand pattern classification (Syntetos-Boylan) with per-pattern forecasting."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

import numpy as np

from inventory_insights.config import (
    ADI_CUTOFF,
    ADI_SENTINEL,
    CV2_CUTOFF,
    CV2_SENTINEL,
    DEFAULT_SERIES_MONTHS,
    FORECAST_HORIZON,
    DemandPattern,
)
from inventory_insights.analytics.forecasting import METHOD_NAMES, forecast_for
from inventory_insights.analytics.stats import cv_squared, round2, round_int
from inventory_insights.analytics.timeseries import build_monthly_series
from inventory_insights.frames import Records, ensure_orders_frame, inventory_frame
from inventory_insights.models import Record

logger = logging.getLogger(__name__)

PATTERN_LABELS = {
    DemandPattern.SMOOTH: "Smooth demand",
    DemandPattern.INTERMITTENT: "Intermittent demand",
    DemandPattern.ERRATIC: "Erratic demand",
    DemandPattern.LUMPY: "Lumpy demand",
}


@dataclass(frozen=True)
class DemandClassification(Record):
    product_id: str
    product_name: str
    sku: str
    pattern: DemandPattern
    pattern_label: str
    adi: float
    cv2: float
    optimal_method: str
    forecast: list[int]
    confidence: int
    monthly_demand: list[float]


@dataclass(frozen=True)
class DemandClassificationResult(Record):
    items: list[DemandClassification]
    pattern_summary: dict[DemandPattern, int]
    avg_confidence: int


def demand_indicators(series) -> tuple[float, float]:
    """ADI and CV² of the non-zero entries, with insufficient-data sentinels."""
    data = np.asarray(series, dtype=float)
    non_zero = data[data > 0]
    adi = len(data) / len(non_zero) if len(non_zero) > 0 else float(ADI_SENTINEL)
    cv2 = cv_squared(non_zero) if len(non_zero) >= 2 else float(CV2_SENTINEL)
    return adi, cv2


def classify_pattern(adi: float, cv2: float) -> DemandPattern:
    """Quadrant lookup; both cutoffs belong to the upper side."""
    if adi < ADI_CUTOFF:
        return DemandPattern.SMOOTH if cv2 < CV2_CUTOFF else DemandPattern.ERRATIC
    return DemandPattern.INTERMITTENT if cv2 < CV2_CUTOFF else DemandPattern.LUMPY


def classify_demand_patterns(
    inventory: Records,
    orders: Records,
    months: int = DEFAULT_SERIES_MONTHS,
    horizon: int = FORECAST_HORIZON,
    as_of: Optional[date] = None,
) -> DemandClassificationResult:
    """Classify every product's demand shape and forecast with the matching method."""
    logger.info("Demand classification started")
    inv = inventory_frame(inventory)
    series_map = build_monthly_series(ensure_orders_frame(orders), months, as_of)

    items = []
    for p in inv.itertuples(index=False):
        monthly = series_map.get(p.product_id, np.zeros(months))
        adi, cv2 = demand_indicators(monthly)
        pattern = classify_pattern(adi, cv2)
        result = forecast_for(pattern, monthly, horizon)
        items.append(DemandClassification(
            product_id=p.product_id,
            product_name=p.product_name,
            sku=p.sku,
            pattern=pattern,
            pattern_label=PATTERN_LABELS[pattern],
            adi=round2(adi),
            cv2=round2(cv2),
            optimal_method=METHOD_NAMES[pattern],
            forecast=result.forecast,
            confidence=result.confidence,
            monthly_demand=monthly.tolist(),
        ))

    summary = {pattern: 0 for pattern in DemandPattern}
    for item in items:
        summary[item.pattern] += 1
    avg_confidence = round_int(sum(i.confidence for i in items) / len(items)) if items else 0

    logger.info("Demand classification completed — %d products", len(items))
    return DemandClassificationResult(items=items, pattern_summary=summary, avg_confidence=avg_confidence)
