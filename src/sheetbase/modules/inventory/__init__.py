"""
Sheetbase Inventory Module

Typed adapters for the business tables:
- Stock items
- Material inward / issue entries
- Production orders
- Vendors
"""

from .repository import (
    MaterialInwardRepository,
    MaterialIssueRepository,
    ProductionOrderRepository,
    StockRepository,
    VendorRepository,
)
from .router import router
from .schemas import MaterialInward, MaterialIssue, ProductionOrder, StockItem, Vendor

__all__ = [
    "router",
    "MaterialInward",
    "MaterialInwardRepository",
    "MaterialIssue",
    "MaterialIssueRepository",
    "ProductionOrder",
    "ProductionOrderRepository",
    "StockItem",
    "StockRepository",
    "Vendor",
    "VendorRepository",
]
