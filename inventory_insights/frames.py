"""Input normalization: turns caller-supplied records into typed DataFrames.

Analyzers accept either sequences of input records (dataclasses or plain
dicts with camelCase or snake_case keys) or pandas DataFrames. Everything is
normalized here once so the analyzers only ever see one column layout.
"""

import logging
from dataclasses import asdict, is_dataclass
from typing import Iterable, Union

import pandas as pd

from inventory_insights.config import UNCATEGORIZED, OrderType

logger = logging.getLogger(__name__)

INVENTORY_COLUMNS = [
    "product_id", "product_name", "sku", "category_name",
    "quantity", "min_quantity", "unit_price", "cost_price",
]
ORDER_COLUMNS = [
    "product_id", "quantity", "unit_price", "total_price",
    "order_date", "order_type",
]
SUPPLIER_COLUMNS = [
    "supplier_id", "supplier_name", "order_date", "delivered_date",
    "status", "total_amount",
]

CAMEL_ALIASES = {
    "productId": "product_id",
    "productName": "product_name",
    "categoryName": "category_name",
    "minQuantity": "min_quantity",
    "unitPrice": "unit_price",
    "costPrice": "cost_price",
    "totalPrice": "total_price",
    "orderDate": "order_date",
    "orderType": "order_type",
    "supplierId": "supplier_id",
    "supplierName": "supplier_name",
    "deliveredDate": "delivered_date",
    "totalAmount": "total_amount",
}

Records = Union[pd.DataFrame, Iterable]


def _to_frame(records: Records, columns: list[str]) -> pd.DataFrame:
    if isinstance(records, pd.DataFrame):
        df = records.copy()
    else:
        rows = [asdict(r) if is_dataclass(r) else dict(r) for r in records]
        df = pd.DataFrame(rows)
    df = df.rename(columns=CAMEL_ALIASES)
    if df.empty and len(df.columns) == 0:
        return pd.DataFrame(columns=columns)
    missing = set(columns) - set(df.columns)
    if missing:
        raise ValueError(f"Input missing required columns: {sorted(missing)}")
    return df[columns].copy()


def _enum_value(value):
    return getattr(value, "value", value)


def _naive_dates(values: pd.Series) -> pd.Series:
    """Parse to datetime64; timezone-aware stamps are converted to naive UTC."""
    return pd.to_datetime(values, utc=True).dt.tz_localize(None)


def inventory_frame(inventory: Records) -> pd.DataFrame:
    """Normalize inventory snapshots; one row per product."""
    df = _to_frame(inventory, INVENTORY_COLUMNS)
    df["product_id"] = df["product_id"].astype(str)
    df["category_name"] = df["category_name"].fillna("").replace("", UNCATEGORIZED)
    for col in ("quantity", "min_quantity"):
        df[col] = pd.to_numeric(df[col], errors="coerce").fillna(0).astype(int)
    for col in ("unit_price", "cost_price"):
        df[col] = pd.to_numeric(df[col], errors="coerce").fillna(0.0).astype(float)
    return df.reset_index(drop=True)


def orders_frame(orders: Records) -> pd.DataFrame:
    """Normalize the order event log; adds a ``month`` (YYYY-MM) column."""
    df = _to_frame(orders, ORDER_COLUMNS)
    df["product_id"] = df["product_id"].astype(str)
    df["order_type"] = df["order_type"].map(_enum_value)
    unknown = set(df["order_type"]) - {t.value for t in OrderType}
    if unknown:
        raise ValueError(f"Unknown order type(s): {sorted(unknown)}")
    for col in ("quantity", "unit_price", "total_price"):
        df[col] = pd.to_numeric(df[col], errors="coerce").fillna(0.0).astype(float)
    df["order_date"] = _naive_dates(df["order_date"]).dt.normalize()
    df["month"] = df["order_date"].dt.strftime("%Y-%m")
    logger.debug("Normalized %d order lines", len(df))
    return df.reset_index(drop=True)


def ensure_orders_frame(orders: Records) -> pd.DataFrame:
    """Return ``orders`` unchanged if already normalized, else normalize it."""
    if isinstance(orders, pd.DataFrame) and "month" in orders.columns:
        return orders
    return orders_frame(orders)


def sales_frame(orders: Records) -> pd.DataFrame:
    """Order lines of type ``sale`` only."""
    df = ensure_orders_frame(orders)
    return df[df["order_type"] == OrderType.SALE.value]


def supplier_orders_frame(supplier_orders: Records) -> pd.DataFrame:
    """Normalize supplier purchase orders and derive lead times in days."""
    df = _to_frame(supplier_orders, SUPPLIER_COLUMNS)
    df["supplier_id"] = df["supplier_id"].astype(str)
    df["order_date"] = _naive_dates(df["order_date"])
    df["delivered_date"] = _naive_dates(df["delivered_date"])
    df["total_amount"] = pd.to_numeric(df["total_amount"], errors="coerce").fillna(0.0)
    df["delivered"] = (df["status"] == "delivered") & df["delivered_date"].notna()
    lead = (df["delivered_date"] - df["order_date"]).dt.total_seconds() / 86400
    df["lead_time_days"] = lead.where(df["delivered"]).clip(lower=0)
    return df.reset_index(drop=True)
