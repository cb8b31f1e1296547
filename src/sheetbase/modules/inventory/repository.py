"""
Sheetbase Inventory - Repositories

One repository per inventory table. Stock items, production orders and
vendors have natural keys; issue and inward entries have none and are
addressed by the stable key column written on append.
"""

from sheetbase.core.repository import SheetRepository
from sheetbase.modules.inventory.schemas import (
    MaterialInward,
    MaterialIssue,
    ProductionOrder,
    StockItem,
    Vendor,
)

STOCK_TABLE = "Stock"
MATERIAL_INWARD_TABLE = "Material Inward"
MATERIAL_ISSUE_TABLE = "Material Issue"
PRODUCTION_ORDERS_TABLE = "Production Orders"
VENDOR_TABLE = "Vendor"


class StockRepository(SheetRepository[StockItem]):
    model = StockItem
    key_column = "itemCode"

    @property
    def table_name(self) -> str:
        return STOCK_TABLE


class MaterialInwardRepository(SheetRepository[MaterialInward]):
    model = MaterialInward

    @property
    def table_name(self) -> str:
        return MATERIAL_INWARD_TABLE


class MaterialIssueRepository(SheetRepository[MaterialIssue]):
    model = MaterialIssue

    @property
    def table_name(self) -> str:
        return MATERIAL_ISSUE_TABLE


class ProductionOrderRepository(SheetRepository[ProductionOrder]):
    model = ProductionOrder
    key_column = "orderNo"

    @property
    def table_name(self) -> str:
        return PRODUCTION_ORDERS_TABLE


class VendorRepository(SheetRepository[Vendor]):
    model = Vendor
    key_column = "SKU Code"

    @property
    def table_name(self) -> str:
        return VENDOR_TABLE


# URL slug -> repository class
REPOSITORIES: dict[str, type[SheetRepository]] = {
    "stock": StockRepository,
    "material-inward": MaterialInwardRepository,
    "material-issue": MaterialIssueRepository,
    "production-orders": ProductionOrderRepository,
    "vendors": VendorRepository,
}
