"""
Sheetbase Inventory - Schemas

Typed views of the inventory tables. Every value in a table is a string;
parsing numbers and mapping column headers to attributes happens here,
never in the core.
"""

import logging
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer, model_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)


def _parse_number(value: Any) -> float | None:
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    text = str(value).replace(",", "").strip()
    try:
        return float(text)
    except ValueError:
        logger.warning("Unparseable number in sheet cell: %r", value)
        return None


def _format_number(value: float | None) -> str:
    if value is None:
        return ""
    return str(int(value)) if float(value).is_integer() else str(value)


# Sheet cells hold text like "1,250" or ""; whole numbers are written back without ".0".
SheetNumber = Annotated[
    float | None,
    BeforeValidator(_parse_number),
    PlainSerializer(_format_number, return_type=str),
]


class SheetModel(BaseModel):
    """Base for entities stored one per row; aliases are the column headers."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _blank_cells_are_unset(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v != ""}
        return data


class CamelSheetModel(SheetModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", alias_generator=to_camel)


# =============================================================================
# Stock
# =============================================================================

class StockItem(CamelSheetModel):
    """A row of the Stock table."""
    item_code: str = ""
    item_name: str = ""
    category: str = ""
    current_stock: SheetNumber = None
    min_level: SheetNumber = None
    max_level: SheetNumber = None
    reorder_point: SheetNumber = None
    unit: str = ""
    location: str = ""
    make: str = ""
    specifications: str = Field(default="", alias="item specifications")
    last_updated: str = ""
    status: str = ""


# =============================================================================
# Issue / Inward entries
# =============================================================================

class MaterialInward(CamelSheetModel):
    """Goods received into stock."""
    row_id: str = Field(default="", alias="RowId")
    date: str = ""
    item_code: str = ""
    item_name: str = ""
    quantity: SheetNumber = None
    unit: str = ""
    supplier: str = ""
    status: str = ""
    last_updated: str = ""
    po_id: str = ""
    grn_id: str = ""
    source: str = ""


class MaterialIssue(CamelSheetModel):
    """Goods issued out of stock."""
    row_id: str = Field(default="", alias="RowId")
    date: str = ""
    item_code: str = ""
    item_name: str = ""
    quantity: SheetNumber = None
    unit: str = ""
    issued_to: str = ""
    department: str = ""
    status: str = ""
    remarks: str = ""
    last_updated: str = ""


# =============================================================================
# Production Orders
# =============================================================================

class ProductionOrder(CamelSheetModel):
    order_no: str = ""
    product_code: str = ""
    product_name: str = ""
    quantity_to_produce: SheetNumber = None
    status: str = "Planned"
    priority: str = "Medium"
    planned_start_date: str = ""
    planned_end_date: str = ""
    remarks: str = ""


# =============================================================================
# Vendors
# =============================================================================

class Vendor(SheetModel):
    """A row of the Vendor table (one supplied SKU per row)."""
    sku_code: str = Field(default="", alias="SKU Code")
    sku_description: str = Field(default="", alias="SKU Description")
    category: str = Field(default="", alias="Category")
    uom: str = Field(default="", alias="UOM")
    vendor_name: str = Field(default="", alias="Vendor Name")
    alternate_vendors: str = Field(default="", alias="Alternate Vendors")
    vendor_code: str = Field(default="", alias="Vendor Code")
    vendor_contact: str = Field(default="", alias="Vendor Contact")
    vendor_email: str = Field(default="", alias="Vendor Email")
    address: str = Field(default="", alias="Address")
    state: str = Field(default="", alias="State")
    state_code: str = Field(default="", alias="State Code")
    account_code: str = Field(default="", alias="A/C Code")
    gstin: str = Field(default="", alias="GSTIN")
    pan_number: str = Field(default="", alias="PAN No.")
    moq: SheetNumber = Field(default=None, alias="MOQ")
    lead_time_days: SheetNumber = Field(default=None, alias="Lead Time (Days)")
    last_purchase_rate: SheetNumber = Field(default=None, alias="Last Purchase Rate (₹)")
    rate_validity: str = Field(default="", alias="Rate Validity")
    payment_terms: str = Field(default="", alias="Payment Terms")
    remarks: str = Field(default="", alias="Remarks")

