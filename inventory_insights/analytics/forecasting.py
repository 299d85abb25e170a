"""Forecasting strategies, one per demand pattern.

Every strategy has the same shape, ``(series, horizon) -> ForecastResult``,
and is looked up from ``FORECASTERS`` by pattern. Forecasts are whole units,
never negative; confidence is a 0-100 integer.
"""

from dataclasses import dataclass
from typing import Callable, Sequence

import numpy as np

from inventory_insights.config import DemandPattern
from inventory_insights.analytics.stats import cv, mape, mean, round_int
from inventory_insights.models import Record

HOLT_ALPHA = 0.3
HOLT_BETA = 0.1
CROSTON_ALPHA = 0.2
WMA_WINDOW = 6
MAX_LEVEL_WINDOW = 6
MAX_LEVEL_BLEND = 0.7


@dataclass(frozen=True)
class ForecastResult(Record):
    forecast: list[int]
    confidence: int


Forecaster = Callable[[Sequence[float], int], ForecastResult]


def _flat(value: float, horizon: int) -> list[int]:
    return [max(0, round_int(value))] * horizon


def fallback_forecast(series: Sequence[float], horizon: int) -> ForecastResult:
    """Historical average, used when a method lacks the data it needs."""
    return ForecastResult(forecast=_flat(mean(series), horizon), confidence=15)


# ----------------------------------------------------------------------
# Smooth: Holt double exponential smoothing
# ----------------------------------------------------------------------
def _holt_pass(data: np.ndarray, alpha: float, beta: float):
    """Run the level/trend recursion; return final state and one-step fits."""
    level = data[0]
    trend = data[1] - data[0] if len(data) > 1 else 0.0
    fitted = [data[0]]
    for value in data[1:]:
        fitted.append(max(0.0, level + trend))
        prev_level = level
        level = alpha * value + (1 - alpha) * (level + trend)
        trend = beta * (level - prev_level) + (1 - beta) * trend
    return level, trend, fitted


def holt_forecast(series: Sequence[float], horizon: int) -> ForecastResult:
    data = np.asarray(series, dtype=float)
    if len(data) < 3:
        return fallback_forecast(data, horizon)

    level, trend, fitted = _holt_pass(data, HOLT_ALPHA, HOLT_BETA)
    forecast = [max(0, round_int(level + h * trend)) for h in range(1, horizon + 1)]
    confidence = max(10, round_int(100 - mape(data, fitted)))
    return ForecastResult(forecast=forecast, confidence=confidence)


# ----------------------------------------------------------------------
# Intermittent: Croston's method
# ----------------------------------------------------------------------
def _exp_smooth(values: Sequence[float], alpha: float) -> float:
    smoothed = values[0]
    for value in values[1:]:
        smoothed = alpha * value + (1 - alpha) * smoothed
    return smoothed


def croston_forecast(series: Sequence[float], horizon: int) -> ForecastResult:
    data = np.asarray(series, dtype=float)
    positions = np.flatnonzero(data > 0)
    sizes = data[positions]
    intervals = np.diff(positions)
    if len(sizes) < 2 or len(intervals) == 0:
        return fallback_forecast(data, horizon)

    demand = _exp_smooth(sizes.tolist(), CROSTON_ALPHA)
    interval = _exp_smooth(intervals.astype(float).tolist(), CROSTON_ALPHA)
    per_period = demand / interval if interval > 0 else demand

    confidence = min(70, round_int(30 + len(sizes) / len(data) * 60))
    return ForecastResult(forecast=_flat(per_period, horizon), confidence=confidence)


# ----------------------------------------------------------------------
# Erratic: weighted moving average
# ----------------------------------------------------------------------
def weighted_ma_forecast(series: Sequence[float], horizon: int) -> ForecastResult:
    data = np.asarray(series, dtype=float)
    if len(data) < 2:
        return fallback_forecast(data, horizon)

    window = data[-min(WMA_WINDOW, len(data)):]
    weights = 2.0 ** np.arange(len(window))  # 1, 2, 4, ... newest heaviest
    average = float(np.dot(window, weights) / weights.sum())

    confidence = max(10, round_int(60 - cv(data) * 20))
    return ForecastResult(forecast=_flat(average, horizon), confidence=confidence)


# ----------------------------------------------------------------------
# Lumpy: max-level blend
# ----------------------------------------------------------------------
def max_level_forecast(series: Sequence[float], horizon: int) -> ForecastResult:
    data = np.asarray(series, dtype=float)
    if len(data) == 0:
        return ForecastResult(forecast=[0] * horizon, confidence=10)

    recent_max = float(data[-MAX_LEVEL_WINDOW:].max())
    blended = recent_max * MAX_LEVEL_BLEND + mean(data) * (1 - MAX_LEVEL_BLEND)
    return ForecastResult(forecast=_flat(blended, horizon), confidence=30)


FORECASTERS: dict[DemandPattern, Forecaster] = {
    DemandPattern.SMOOTH: holt_forecast,
    DemandPattern.INTERMITTENT: croston_forecast,
    DemandPattern.ERRATIC: weighted_ma_forecast,
    DemandPattern.LUMPY: max_level_forecast,
}

METHOD_NAMES: dict[DemandPattern, str] = {
    DemandPattern.SMOOTH: "Holt double exponential smoothing",
    DemandPattern.INTERMITTENT: "Croston intermittent demand",
    DemandPattern.ERRATIC: "Weighted moving average + reinforced safety stock",
    DemandPattern.LUMPY: "Max-level policy + buffer",
}


def forecast_for(pattern: DemandPattern, series: Sequence[float], horizon: int) -> ForecastResult:
    return FORECASTERS[DemandPattern(pattern)](series, horizon)
