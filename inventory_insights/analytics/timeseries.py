"""Monthly demand aggregation.

Every analyzer that needs a per-product demand history goes through here.
The trailing-window series always has exactly ``months`` entries, oldest
first, with silent months zero-filled.
"""

import logging
import math
from datetime import date
from typing import Optional

import numpy as np
import pandas as pd

from inventory_insights.config import DAYS_PER_MONTH, DEFAULT_SERIES_MONTHS
from inventory_insights.frames import Records, ensure_orders_frame, sales_frame

logger = logging.getLogger(__name__)


def reference_date(orders: pd.DataFrame, as_of: Optional[date] = None) -> Optional[pd.Timestamp]:
    """The analysis "now": ``as_of`` if given, else the latest order date."""
    if as_of is not None:
        return pd.Timestamp(as_of).normalize()
    if orders.empty:
        return None
    return orders["order_date"].max()


def orders_until(orders: pd.DataFrame, as_of: Optional[date] = None) -> pd.DataFrame:
    """Order lines dated on or before ``as_of``; all of them when ``as_of`` is None."""
    if as_of is None:
        return orders
    return orders[orders["order_date"] <= pd.Timestamp(as_of).normalize()]


def month_keys(months: int, as_of) -> list[str]:
    """Trailing ``YYYY-MM`` keys ending at the month of ``as_of``, oldest first."""
    end = pd.Period(pd.Timestamp(as_of), freq="M")
    return [str(p) for p in pd.period_range(end=end, periods=months, freq="M")]


def build_monthly_series(
    orders: Records,
    months: int = DEFAULT_SERIES_MONTHS,
    as_of: Optional[date] = None,
) -> dict[str, np.ndarray]:
    """Sale quantities per product over the trailing ``months`` calendar months.

    Args:
        orders: Order history records or a normalized orders DataFrame.
        months: Window length.
        as_of: Reference date whose month closes the window; later lines
            are ignored. Defaults to the latest order date in ``orders``.

    Returns:
        Mapping of product id to a float array of length ``months``. Every
        product appearing in ``orders`` is present, even if its window is
        all zeros.
    """
    df = orders_until(ensure_orders_frame(orders), as_of)
    ref = reference_date(df, as_of)
    if ref is None:
        return {}

    keys = month_keys(months, ref)
    sales = sales_frame(df)
    sales = sales[sales["month"].isin(keys)]
    product_ids = df["product_id"].unique()
    if sales.empty:
        return {pid: np.zeros(months) for pid in product_ids}

    table = (
        sales.groupby(["product_id", "month"])["quantity"].sum()
        .unstack(fill_value=0.0)
        .reindex(index=product_ids, columns=keys, fill_value=0.0)
        .fillna(0.0)
    )
    logger.debug("Built %d monthly series over %s..%s", len(table), keys[0], keys[-1])
    return {pid: row.to_numpy(dtype=float) for pid, row in table.iterrows()}


def build_monthly_table(orders: Records, value: str = "quantity") -> dict[str, pd.Series]:
    """Sparse per-product sale totals keyed by observed month, no window applied."""
    sales = sales_frame(orders)
    if sales.empty:
        return {}
    grouped = sales.groupby(["product_id", "month"])[value].sum()
    return {pid: series.droplevel(0).sort_index() for pid, series in grouped.groupby(level=0)}


def month_span(orders: Records) -> int:
    """Number of 30-day months covered by the order log (at least 1)."""
    df = ensure_orders_frame(orders)
    if df.empty:
        return 1
    days = (df["order_date"].max() - df["order_date"].min()).days
    return max(1, math.ceil(days / DAYS_PER_MONTH))
