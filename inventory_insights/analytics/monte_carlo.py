"""Monte Carlo stockout simulation.

Each trial depletes current stock day by day with normally distributed daily
demand (clamped at zero) until stock runs out or the horizon ends. The random
source is an injected sampler so that a fixed seed reproduces the exact same
distribution.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

import numpy as np

from inventory_insights.config import (
    DAYS_PER_MONTH,
    DEFAULT_SERIES_MONTHS,
    HISTOGRAM_BUCKET_DAYS,
    LEAD_TIME_DAYS,
    MONTE_CARLO_SIMS,
    RISK_ORDER,
    RISK_THRESHOLDS,
    SIMULATION_HORIZON_DAYS,
    STOCKOUT_CHECKPOINTS,
    RiskLevel,
)
from inventory_insights.analytics.stats import Z_95, mean, round2, round_int, safety_stock, std_dev
from inventory_insights.analytics.timeseries import build_monthly_series
from inventory_insights.frames import Records, ensure_orders_frame, inventory_frame
from inventory_insights.models import Record

logger = logging.getLogger(__name__)


class BoxMullerSampler:
    """Normal draws via the Box-Muller transform over an injected uniform source."""

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng()

    def normal(self, mean: float, std: float, size) -> np.ndarray:
        u1 = self.rng.random(size)
        u2 = self.rng.random(size)
        u1 = np.where(u1 == 0, 1e-4, u1)  # log(0) guard
        z = np.sqrt(-2.0 * np.log(u1)) * np.cos(2.0 * np.pi * u2)
        return mean + z * std


def sampler_from_seed(seed: Optional[int] = None) -> BoxMullerSampler:
    return BoxMullerSampler(np.random.default_rng(seed))


@dataclass(frozen=True)
class StockoutProbability(Record):
    days: int
    probability: float


@dataclass(frozen=True)
class HistogramBucket(Record):
    bucket: int
    count: int


@dataclass(frozen=True)
class MonteCarloProduct(Record):
    product_id: str
    product_name: str
    sku: str
    current_stock: int
    avg_daily_demand: float
    demand_std_dev: float
    stockout_probabilities: list[StockoutProbability]
    expected_stockout_day: int
    optimal_safety_stock: int
    risk_level: RiskLevel
    histogram: list[HistogramBucket]

    def probability_at(self, days: int) -> float:
        for sp in self.stockout_probabilities:
            if sp.days == days:
                return sp.probability
        return 0.0


@dataclass(frozen=True)
class MonteCarloResult(Record):
    products: list[MonteCarloProduct]
    overall_risk_score: int
    high_risk_count: int
    critical_count: int
    simulation_count: int


def simulate_stockout_days(
    stock: float,
    daily_mean: float,
    daily_std: float,
    simulations: int,
    horizon: int,
    sampler,
) -> np.ndarray:
    """Day of stockout for each trial; ``horizon + 1`` if stock outlasts the horizon."""
    demand = np.maximum(0.0, sampler.normal(daily_mean, daily_std, (simulations, horizon)))
    depleted = np.cumsum(demand, axis=1) >= stock
    stocked_out = depleted.any(axis=1)
    first_day = depleted.argmax(axis=1) + 1
    return np.where(stocked_out, first_day, horizon + 1)


def classify_risk(prob_30: float) -> RiskLevel:
    critical, high, medium = RISK_THRESHOLDS
    if prob_30 >= critical:
        return RiskLevel.CRITICAL
    if prob_30 >= high:
        return RiskLevel.HIGH
    if prob_30 >= medium:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def build_histogram(stockout_days: np.ndarray, horizon: int) -> list[HistogramBucket]:
    """5-day buckets ``(b-5, b]`` up to the first bucket past the horizon."""
    width = HISTOGRAM_BUCKET_DAYS
    upper = horizon + width
    return [
        HistogramBucket(bucket=b, count=int(((stockout_days > b - width) & (stockout_days <= b)).sum()))
        for b in range(width, upper + 1, width)
    ]


def run_monte_carlo_simulation(
    inventory: Records,
    orders: Records,
    simulation_count: int = MONTE_CARLO_SIMS,
    lead_time_days: int = LEAD_TIME_DAYS,
    seed: Optional[int] = None,
    sampler=None,
    as_of: Optional[date] = None,
) -> MonteCarloResult:
    """Build an empirical stockout-day distribution for every stocked product with sales.

    Args:
        inventory: Product snapshots.
        orders: Order history.
        simulation_count: Trials per product.
        lead_time_days: Lead time for the 95% safety stock.
        seed: Seed for the default Box-Muller sampler. Ignored when ``sampler``
            is given.
        sampler: Any object with ``normal(mean, std, size)``.
        as_of: Reference date closing the monthly window.
    """
    if simulation_count < 1:
        raise ValueError(f"simulation_count must be positive, got {simulation_count}")
    logger.info("Monte Carlo simulation started — %d trials per product", simulation_count)
    sampler = sampler or sampler_from_seed(seed)
    horizon = SIMULATION_HORIZON_DAYS
    inv = inventory_frame(inventory)
    series_map = build_monthly_series(ensure_orders_frame(orders), DEFAULT_SERIES_MONTHS, as_of)

    products = []
    for p in inv.itertuples(index=False):
        if p.quantity <= 0:
            continue
        monthly = series_map.get(p.product_id)
        if monthly is None or not (monthly > 0).any():
            logger.debug("Skipping %s — no sales history", p.product_id)
            continue

        daily_mean = mean(monthly) / DAYS_PER_MONTH
        daily_std = std_dev(monthly) / DAYS_PER_MONTH
        if daily_mean <= 0:
            continue

        days = simulate_stockout_days(p.quantity, daily_mean, daily_std, simulation_count, horizon, sampler)
        probabilities = [
            StockoutProbability(days=d, probability=round2(float((days <= d).sum()) / simulation_count))
            for d in STOCKOUT_CHECKPOINTS
        ]
        prob_30 = next(sp.probability for sp in probabilities if sp.days == 30)

        products.append(MonteCarloProduct(
            product_id=p.product_id,
            product_name=p.product_name,
            sku=p.sku,
            current_stock=int(p.quantity),
            avg_daily_demand=round2(daily_mean),
            demand_std_dev=round2(daily_std),
            stockout_probabilities=probabilities,
            expected_stockout_day=int(np.sort(days)[len(days) // 2]),
            optimal_safety_stock=safety_stock(Z_95, daily_std, lead_time_days),
            risk_level=classify_risk(prob_30),
            histogram=build_histogram(days, horizon),
        ))

    products.sort(key=lambda item: RISK_ORDER[item.risk_level])
    high_risk = sum(1 for item in products if item.risk_level in (RiskLevel.HIGH, RiskLevel.CRITICAL))
    critical = sum(1 for item in products if item.risk_level == RiskLevel.CRITICAL)
    overall = (
        round_int(sum(item.probability_at(30) for item in products) / len(products) * 100)
        if products else 0
    )

    logger.info("Monte Carlo simulation completed — %d products, %d high risk", len(products), high_risk)
    return MonteCarloResult(
        products=products,
        overall_risk_score=overall,
        high_risk_count=high_risk,
        critical_count=critical,
        simulation_count=simulation_count,
    )
