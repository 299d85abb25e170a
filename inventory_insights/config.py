"""Inventory Insights configuration."""

import os
from enum import Enum

# Time series
DEFAULT_SERIES_MONTHS = int(os.getenv("INSIGHTS_SERIES_MONTHS", "12"))
DAYS_PER_MONTH = 30
FORECAST_HORIZON = 3

# Service level
SERVICE_LEVEL = 0.95
LEAD_TIME_DAYS = int(os.getenv("INSIGHTS_LEAD_TIME_DAYS", "14"))

# Monte Carlo
MONTE_CARLO_SIMS = int(os.getenv("INSIGHTS_MONTE_CARLO_SIMS", "500"))
SIMULATION_HORIZON_DAYS = 90
STOCKOUT_CHECKPOINTS = (7, 14, 30, 60, 90)
HISTOGRAM_BUCKET_DAYS = 5
RISK_THRESHOLDS = (0.8, 0.5, 0.2)  # critical / high / medium on 30-day probability

# EOQ
ORDER_COST_RATE = 0.05    # 5% of unit cost per order
HOLDING_RATE = 0.20       # 20% of unit cost per year

# Demand classification (Syntetos-Boylan)
ADI_CUTOFF = 1.32
CV2_CUTOFF = 0.49

# Market basket
MIN_SUPPORT = 0.03
MIN_CONFIDENCE = 0.25
MIN_BASKETS = 3
MAX_RULES = 20
MAX_PAIRS = 15
STRONG_LIFT = 2.0

# ABC / XYZ
ABC_THRESHOLD_A = 0.80
ABC_THRESHOLD_B = 0.95
XYZ_THRESHOLD_X = 0.5
XYZ_THRESHOLD_Y = 1.0

# Anomaly detection
DEMAND_Z_THRESHOLD = 1.5
COST_Z_THRESHOLD = 2.0
MIN_ANOMALY_MONTHS = 3

# Supplier scoring
EXPECTED_LEAD_TIME_DAYS = 14
SUPPLIER_WEIGHTS = (0.40, 0.25, 0.20, 0.15)  # on-time, lead time, price, fulfillment

# Cost optimization
DEAD_STOCK_DAYS = 60
OVERSTOCK_MULTIPLIER = 3
LOW_MARGIN_THRESHOLD = 0.10
LOW_CATEGORY_MARGIN = 0.15
MAX_RECOMMENDATIONS = 5

# Turnover
TURNOVER_FAST = 8
TURNOVER_NORMAL = 4
TURNOVER_SLOW = 1

# Sentinels for "insufficient data"
ADI_SENTINEL = 999
CV2_SENTINEL = 4
CV_SENTINEL = 2
DAYS_SENTINEL = 999

UNCATEGORIZED = "Uncategorized"


# --- Enums ---

class OrderType(str, Enum):
    PURCHASE = "purchase"
    SALE = "sale"


class DemandPattern(str, Enum):
    SMOOTH = "smooth"
    INTERMITTENT = "intermittent"
    ERRATIC = "erratic"
    LUMPY = "lumpy"


class RiskLevel(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class AbcClass(str, Enum):
    A = "A"
    B = "B"
    C = "C"


class XyzClass(str, Enum):
    X = "X"
    Y = "Y"
    Z = "Z"


class AnomalyType(str, Enum):
    DEMAND_SPIKE = "demand_spike"
    DEMAND_DROP = "demand_drop"
    COST_CHANGE = "cost_change"


class Severity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


class Grade(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"


class TurnoverClass(str, Enum):
    FAST = "fast"
    NORMAL = "normal"
    SLOW = "slow"
    STAGNANT = "stagnant"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


GRADE_CUTOFFS = [(90, Grade.A), (75, Grade.B), (60, Grade.C), (40, Grade.D)]

RISK_ORDER = {RiskLevel.CRITICAL: 0, RiskLevel.HIGH: 1, RiskLevel.MEDIUM: 2, RiskLevel.LOW: 3}
SEVERITY_ORDER = {Severity.CRITICAL: 0, Severity.WARNING: 1, Severity.INFO: 2}
PRIORITY_ORDER = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}
