"""
Sheetbase Core - Remote Transport.

The only code that talks to the spreadsheet. ``SheetsTransport`` is the
remote contract the datastore depends on; ``GoogleSheetsTransport``
implements it against the Google Sheets v4 REST API with httpx.

Failures are mapped here, because only the transport knows whether a
request could have reached the server:
- nothing sent (connect errors, pool timeouts, HTTP errors) -> DatastoreUnavailableException
- sent but no answer observed, on a mutation -> AmbiguousMutationOutcomeException
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any
from urllib.parse import quote

import httpx

from sheetbase.core.credentials import TokenProvider
from sheetbase.exceptions import (
    AmbiguousMutationOutcomeException,
    DatastoreUnavailableException,
    TableNotFoundException,
)

logger = logging.getLogger(__name__)

Row = list[str]


class SheetsTransport(ABC):
    """Remote table operations, addressed by table name and 1-based row position."""

    @abstractmethod
    async def get_values(self, table: str) -> list[list[str]]:
        """Full value grid (header + data rows), row-major."""
        ...

    @abstractmethod
    async def get_header(self, table: str) -> list[str]:
        """Row 1 only; empty list when the table has no header."""
        ...

    @abstractmethod
    async def append_rows(self, table: str, rows: Sequence[Row]) -> None:
        """Append rows after the last row of the table."""
        ...

    @abstractmethod
    async def write_row(self, table: str, position: int, values: Row) -> None:
        """Overwrite the row at ``position`` starting at column A."""
        ...

    @abstractmethod
    async def write_rows(self, table: str, updates: Sequence[tuple[int, Row]]) -> None:
        """Overwrite several rows in one call."""
        ...

    @abstractmethod
    async def delete_row(self, table: str, position: int) -> None:
        """Remove the row at ``position``; every row below shifts up by one."""
        ...

    @abstractmethod
    async def list_tables(self) -> list[str]:
        ...

    @abstractmethod
    async def create_table(self, table: str) -> None:
        ...

    @abstractmethod
    async def clear_rows(self, table: str, first_row: int) -> None:
        """Blank every cell from ``first_row`` down, keeping the rows themselves."""
        ...

    async def aclose(self) -> None:
        return None


def a1_range(table: str, cells: str | None = None) -> str:
    """A1 notation for ``table`` (quoted, so names with spaces work)."""
    quoted = "'" + table.replace("'", "''") + "'"
    return f"{quoted}!{cells}" if cells else quoted


def _error_message(response: httpx.Response) -> str:
    try:
        return str(response.json()["error"]["message"])
    except (ValueError, KeyError, TypeError):
        return response.text[:200]


class GoogleSheetsTransport(SheetsTransport):
    """Google Sheets v4 REST implementation."""

    def __init__(
        self,
        spreadsheet_id: str,
        tokens: TokenProvider,
        base_url: str = "https://sheets.googleapis.com/v4/spreadsheets",
        timeout_seconds: float = 15.0,
        value_input_option: str = "USER_ENTERED",
        client: httpx.AsyncClient | None = None,
    ):
        self.spreadsheet_id = spreadsheet_id
        self._tokens = tokens
        self._base = f"{base_url.rstrip('/')}/{spreadsheet_id}"
        self._value_input_option = value_input_option
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout_seconds))
        # Sheet ids are stable for the lifetime of a sheet; titles are not keys.
        self._sheet_ids: dict[str, int] = {}

    # -------------------------------------------------------------------------
    # HTTP plumbing
    # -------------------------------------------------------------------------

    def _values_url(self, rng: str, action: str = "") -> str:
        return f"{self._base}/values/{quote(rng, safe='')}{action}"

    async def _request(
        self,
        method: str,
        url: str,
        *,
        table: str | None,
        operation: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        mutating = operation != "read"
        token = await self._tokens.get_token()

        try:
            response = await self._client.request(
                method,
                url,
                params=params,
                json=json,
                headers={"Authorization": f"Bearer {token}"},
            )
        except (httpx.ConnectError, httpx.ConnectTimeout, httpx.PoolTimeout) as e:
            logger.warning("Sheets %s %s on %s: connection failed: %s", method, operation, table, e)
            raise DatastoreUnavailableException(table, operation, f"connection failed: {e}") from e
        except (httpx.TimeoutException, httpx.RemoteProtocolError, httpx.ReadError, httpx.WriteError) as e:
            logger.warning("Sheets %s %s on %s: no response: %s", method, operation, table, e)
            if mutating:
                raise AmbiguousMutationOutcomeException(table or "", operation, str(e) or type(e).__name__) from e
            raise DatastoreUnavailableException(table, operation, f"no response: {e}") from e
        except httpx.HTTPError as e:
            raise DatastoreUnavailableException(table, operation, str(e)) from e

        if response.status_code >= 400:
            message = _error_message(response)
            if response.status_code == 400 and "Unable to parse range" in message and table:
                raise TableNotFoundException(table)
            logger.warning(
                "Sheets %s %s on %s -> %s: %s", method, operation, table, response.status_code, message
            )
            raise DatastoreUnavailableException(
                table, operation, message, upstream_status=response.status_code
            )

        if not response.content:
            return {}
        return response.json()

    async def _batch_update(self, table: str, operation: str, requests: list[dict[str, Any]]) -> dict[str, Any]:
        return await self._request(
            "POST",
            f"{self._base}:batchUpdate",
            table=table,
            operation=operation,
            json={"requests": requests},
        )

    async def _sheet_id(self, table: str) -> int:
        if table not in self._sheet_ids:
            await self._load_sheet_ids()
        try:
            return self._sheet_ids[table]
        except KeyError:
            raise TableNotFoundException(table) from None

    async def _load_sheet_ids(self) -> None:
        data = await self._request(
            "GET",
            self._base,
            table=None,
            operation="read",
            params={"fields": "sheets.properties(sheetId,title)"},
        )
        self._sheet_ids = {
            sheet["properties"]["title"]: sheet["properties"]["sheetId"]
            for sheet in data.get("sheets", [])
        }

    # -------------------------------------------------------------------------
    # SheetsTransport
    # -------------------------------------------------------------------------

    async def get_values(self, table: str) -> list[list[str]]:
        data = await self._request("GET", self._values_url(a1_range(table)), table=table, operation="read")
        return data.get("values") or []

    async def get_header(self, table: str) -> list[str]:
        data = await self._request(
            "GET", self._values_url(a1_range(table, "1:1")), table=table, operation="read"
        )
        values = data.get("values") or []
        return values[0] if values else []

    async def append_rows(self, table: str, rows: Sequence[Row]) -> None:
        await self._request(
            "POST",
            self._values_url(a1_range(table, "A1"), ":append"),
            table=table,
            operation="append",
            params={"valueInputOption": self._value_input_option, "insertDataOption": "INSERT_ROWS"},
            json={"majorDimension": "ROWS", "values": [list(r) for r in rows]},
        )

    async def write_row(self, table: str, position: int, values: Row) -> None:
        rng = a1_range(table, f"A{position}")
        await self._request(
            "PUT",
            self._values_url(rng),
            table=table,
            operation="update",
            params={"valueInputOption": self._value_input_option},
            json={"range": rng, "majorDimension": "ROWS", "values": [list(values)]},
        )

    async def write_rows(self, table: str, updates: Sequence[tuple[int, Row]]) -> None:
        await self._request(
            "POST",
            f"{self._base}/values:batchUpdate",
            table=table,
            operation="update",
            json={
                "valueInputOption": self._value_input_option,
                "data": [
                    {"range": a1_range(table, f"A{position}"), "majorDimension": "ROWS", "values": [list(values)]}
                    for position, values in updates
                ],
            },
        )

    async def delete_row(self, table: str, position: int) -> None:
        sheet_id = await self._sheet_id(table)
        await self._batch_update(
            table,
            "delete",
            [
                {
                    "deleteDimension": {
                        "range": {
                            "sheetId": sheet_id,
                            "dimension": "ROWS",
                            "startIndex": position - 1,
                            "endIndex": position,
                        }
                    }
                }
            ],
        )

    async def list_tables(self) -> list[str]:
        await self._load_sheet_ids()
        return list(self._sheet_ids)

    async def create_table(self, table: str) -> None:
        data = await self._batch_update(
            table, "create", [{"addSheet": {"properties": {"title": table}}}]
        )
        try:
            self._sheet_ids[table] = data["replies"][0]["addSheet"]["properties"]["sheetId"]
        except (KeyError, IndexError, TypeError):
            self._sheet_ids.pop(table, None)

    async def clear_rows(self, table: str, first_row: int) -> None:
        await self._request(
            "POST",
            self._values_url(a1_range(table, f"A{first_row}:ZZZ"), ":clear"),
            table=table,
            operation="clear",
            json={},
        )

    async def aclose(self) -> None:
        await self._client.aclose()
