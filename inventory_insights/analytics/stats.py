"""Statistical primitives shared by every analyzer.

Dispersion measures use the population standard deviation. Rounding is
half-up so that ``2.5`` becomes ``3`` for quantities and ``x.xx5`` rounds up
for currency, matching what the presentation layer displays.
"""

import math
from typing import Sequence

import numpy as np
from scipy.stats import norm

from inventory_insights.config import GRADE_CUTOFFS, SERVICE_LEVEL, Grade


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves upward: ``floor(v * 10**digits + 0.5) / 10**digits``."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def round_int(value: float) -> int:
    return int(math.floor(value + 0.5))


def round2(value: float) -> float:
    return round_half_up(value, 2)


def safe_div(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide, substituting ``default`` when the denominator is zero."""
    if denominator == 0:
        return default
    return numerator / denominator


def mean(values: Sequence[float]) -> float:
    if len(values) == 0:
        return 0.0
    return float(np.mean(values))


def std_dev(values: Sequence[float]) -> float:
    """Population standard deviation; 0 for fewer than two values."""
    if len(values) < 2:
        return 0.0
    return float(np.std(np.asarray(values, dtype=float)))


def cv(values: Sequence[float]) -> float:
    """Coefficient of variation; 0 for fewer than two values or a zero mean."""
    if len(values) < 2:
        return 0.0
    m = mean(values)
    if m == 0:
        return 0.0
    return std_dev(values) / m


def cv_squared(values: Sequence[float]) -> float:
    return cv(values) ** 2


def mape(actual: Sequence[float], fitted: Sequence[float]) -> float:
    """Mean absolute percentage error in percent.

    Periods with zero actual demand are excluded. Returns 100 when no period
    can be compared.
    """
    actual = np.asarray(actual, dtype=float)
    fitted = np.asarray(fitted, dtype=float)
    mask = actual > 0
    if not mask.any():
        return 100.0
    return float(np.mean(np.abs((actual[mask] - fitted[mask]) / actual[mask])) * 100)


def service_level_z(level: float) -> float:
    """One-sided z value for a service level, e.g. 0.95 -> 1.645."""
    return float(norm.ppf(level))


Z_95 = round(service_level_z(SERVICE_LEVEL), 3)  # 1.645


def safety_stock(z: float, daily_std: float, lead_time_days: float) -> int:
    """``ceil(z * sigma_daily * sqrt(L))``."""
    return int(math.ceil(z * daily_std * math.sqrt(max(lead_time_days, 0))))


def score_to_grade(score: float) -> Grade:
    for cutoff, grade in GRADE_CUTOFFS:
        if score >= cutoff:
            return grade
    return Grade.F
