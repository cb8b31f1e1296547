"""
Sheetbase Core - Schema Mapper.

Converts between positional spreadsheet rows and keyed records. The header
row (row 1) is the only schema a table has; its order decides which column
each record field lands in.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any

from sheetbase.exceptions import SchemaUnavailableException

Record = dict[str, str]

HEADER_ROW = 1
FIRST_DATA_ROW = 2


def extract_headers(table: str, rows: Sequence[Sequence[Any]]) -> list[str]:
    """
    Return the column names from the first row of a value grid.

    Raises:
        SchemaUnavailableException: If the grid has no rows or an empty header row
    """
    if not rows or not rows[0]:
        raise SchemaUnavailableException(table)
    return [str(h) for h in rows[0]]


def stringify(value: Any) -> str:
    """Render a record value the way the spreadsheet stores it."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, (list, tuple, dict)):
        return json.dumps(value, default=str)
    return str(value)


def rows_to_records(headers: Sequence[str], data_rows: Sequence[Sequence[Any]]) -> list[Record]:
    """
    Build one record per data row, keyed by header.

    Short rows are padded with "" (the API trims trailing blank cells).
    Cells beyond the last header are ignored.
    """
    records: list[Record] = []
    for row in data_rows:
        record: Record = {}
        for i, header in enumerate(headers):
            cell = row[i] if i < len(row) else None
            record[header] = stringify(cell)
        records.append(record)
    return records


def record_to_row(headers: Sequence[str], record: Mapping[str, Any]) -> list[str]:
    """
    Serialize a record into header order.

    Missing keys become "". Keys that are not headers are dropped.
    A header with stray surrounding whitespace still matches its trimmed key.
    """
    row: list[str] = []
    for header in headers:
        if header in record:
            value = record[header]
        else:
            value = record.get(header.strip())
        row.append(stringify(value))
    return row


def dropped_fields(headers: Sequence[str], record: Mapping[str, Any]) -> list[str]:
    """Fields of ``record`` that ``record_to_row`` will not write."""
    known = set(headers) | {h.strip() for h in headers}
    return [key for key in record if key not in known]


def position_of(offset: int) -> int:
    """1-based row position of the record at ``offset`` in a fetched record list."""
    return offset + FIRST_DATA_ROW
