"""
Sheetbase Core - Tabular Remote Datastore Client.

Components, leaves first:
- schema: header-defined column order <-> keyed records
- cache: full-table record sets with a time-to-live
- transport: remote spreadsheet calls (Google Sheets REST, in-memory)
- datastore: read-through / write-through CRUD by row position or key

The core knows nothing about stock, vendors, or any other business entity.
"""

from sheetbase.core.cache import TableCache
from sheetbase.core.credentials import CallableTokenProvider, StaticTokenProvider, TokenProvider
from sheetbase.core.datastore import TabularDatastore
from sheetbase.core.memory_transport import InMemorySheetsTransport
from sheetbase.core.schema import Record, extract_headers, record_to_row, rows_to_records
from sheetbase.core.transport import GoogleSheetsTransport, SheetsTransport

__all__ = [
    "CallableTokenProvider",
    "GoogleSheetsTransport",
    "InMemorySheetsTransport",
    "Record",
    "SheetsTransport",
    "StaticTokenProvider",
    "TableCache",
    "TabularDatastore",
    "TokenProvider",
    "extract_headers",
    "record_to_row",
    "rows_to_records",
]
