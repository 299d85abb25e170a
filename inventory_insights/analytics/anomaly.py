"""Month-over-month demand and cost anomaly detection via z-scores."""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
from scipy.stats import zscore

from inventory_insights.config import (
    COST_Z_THRESHOLD,
    DEMAND_Z_THRESHOLD,
    MIN_ANOMALY_MONTHS,
    SEVERITY_ORDER,
    AnomalyType,
    OrderType,
    Severity,
)
from inventory_insights.analytics.stats import round2, round_int, std_dev
from inventory_insights.frames import Records, ensure_orders_frame, inventory_frame
from inventory_insights.models import Record

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnomalyItem(Record):
    product_id: str
    product_name: str
    sku: str
    type: AnomalyType
    severity: Severity
    z_score: float
    description: str
    suggestion: str
    detected_at: str


@dataclass(frozen=True)
class AnomalyDetectionResult(Record):
    anomalies: list[AnomalyItem]
    critical_count: int
    warning_count: int
    info_count: int


def severity_for(z: float) -> Severity:
    if abs(z) > 3:
        return Severity.CRITICAL
    if abs(z) > 2:
        return Severity.WARNING
    return Severity.INFO


def _latest_z(values) -> Optional[float]:
    """z-score of the last value against the whole series, None without spread."""
    if len(values) < MIN_ANOMALY_MONTHS or std_dev(values) == 0:
        return None
    return float(zscore(np.asarray(values, dtype=float))[-1])


def detect_anomalies(inventory: Records, orders: Records) -> AnomalyDetectionResult:
    """Flag demand spikes/drops and transaction-value shifts in each product's latest month."""
    logger.info("Anomaly detection started")
    inv = inventory_frame(inventory).set_index("product_id")
    df = ensure_orders_frame(orders).copy()
    df["demand"] = df["quantity"].where(df["order_type"] == OrderType.SALE.value, 0.0)
    df["cost"] = df["unit_price"] * df["quantity"]
    monthly = df.groupby(["product_id", "month"])[["demand", "cost"]].sum().sort_index()

    anomalies = []
    for product_id, months in monthly.groupby(level=0):
        if product_id not in inv.index:
            continue
        product = inv.loc[product_id]
        latest = months.index.get_level_values("month")[-1]

        def emit(kind, z, description, suggestion):
            anomalies.append(AnomalyItem(
                product_id=product_id,
                product_name=product["product_name"],
                sku=product["sku"],
                type=kind,
                severity=severity_for(z),
                z_score=round2(z),
                description=description,
                suggestion=suggestion,
                detected_at=latest,
            ))

        z = _latest_z(months["demand"].tolist())
        if z is not None and z > DEMAND_Z_THRESHOLD:
            emit(AnomalyType.DEMAND_SPIKE, z,
                 f"Demand in {latest} is {round_int((z - 1) * 100)}% above normal",
                 "Raise safety stock and consider an urgent order")
        elif z is not None and z < -DEMAND_Z_THRESHOLD:
            emit(AnomalyType.DEMAND_DROP, z,
                 f"Demand in {latest} is {round_int((abs(z) - 1) * 100)}% below normal",
                 "Reduce stock and consider a promotion")

        z = _latest_z(months["cost"].tolist())
        if z is not None and abs(z) > COST_Z_THRESHOLD:
            direction = "increased" if z > 0 else "decreased"
            suggestion = (
                "Check for supplier price increases, evaluate alternative suppliers" if z > 0
                else "Check for discounted sales, review margins"
            )
            emit(AnomalyType.COST_CHANGE, z,
                 f"Transaction value in {latest} {direction} versus average (Z={abs(z):.1f})",
                 suggestion)

    anomalies.sort(key=lambda a: SEVERITY_ORDER[a.severity])
    counts = {s: sum(1 for a in anomalies if a.severity == s) for s in Severity}

    logger.info("Anomaly detection completed — %d anomalies (%d critical)",
                len(anomalies), counts[Severity.CRITICAL])
    return AnomalyDetectionResult(
        anomalies=anomalies,
        critical_count=counts[Severity.CRITICAL],
        warning_count=counts[Severity.WARNING],
        info_count=counts[Severity.INFO],
    )
