"""Inventory analytics engine: demand, risk, reorder, basket and cost insights."""

from inventory_insights.models import OrderHistory, ProductInventory, SupplierOrder

__all__ = ["OrderHistory", "ProductInventory", "SupplierOrder"]
