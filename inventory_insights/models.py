"""Input records and the shared base for analyzer output records."""

from dataclasses import dataclass, fields, is_dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

import numpy as np

from inventory_insights.config import OrderType


def _to_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def to_serializable(obj: Any) -> Any:
    """Recursively convert records, enums and numpy types to plain Python."""
    if is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: to_serializable(getattr(obj, f.name)) for f in fields(obj)}
    if isinstance(obj, dict):
        return {to_serializable(k): to_serializable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_serializable(v) for v in obj]
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, (date, datetime)):
        return obj.isoformat()
    return obj


class Record:
    """Mixin for frozen output dataclasses."""

    def to_dict(self) -> dict:
        return to_serializable(self)


# ---- Inputs ----

@dataclass(frozen=True)
class ProductInventory(Record):
    """Current on-hand state of one product."""
    product_id: str
    product_name: str
    sku: str
    category_name: str
    quantity: int
    min_quantity: int
    unit_price: float
    cost_price: float


@dataclass(frozen=True)
class OrderHistory(Record):
    """One transaction line from the order log."""
    product_id: str
    quantity: float
    unit_price: float
    total_price: float
    order_date: date
    order_type: OrderType

    @classmethod
    def from_dict(cls, data: dict) -> "OrderHistory":
        """Build from a camelCase or snake_case mapping with an ISO date."""
        def get(snake, camel):
            return data[snake] if snake in data else data[camel]

        return cls(
            product_id=str(get("product_id", "productId")),
            quantity=float(get("quantity", "quantity")),
            unit_price=float(get("unit_price", "unitPrice")),
            total_price=float(get("total_price", "totalPrice")),
            order_date=_to_date(get("order_date", "orderDate")),
            order_type=OrderType(get("order_type", "orderType")),
        )


@dataclass(frozen=True)
class SupplierOrder(Record):
    """A purchase order placed with a supplier."""
    supplier_id: str
    supplier_name: str
    order_date: date
    delivered_date: Optional[date]
    status: str
    total_amount: float

