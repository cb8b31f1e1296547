"""
Sheetbase Core - Tabular Datastore.

Read-through / write-through client over a SheetsTransport. This is the
only component allowed to mutate remote tables.

Contract:
- ``read`` serves from the cache while the entry is younger than the TTL,
  otherwise fetches the whole table and caches the records.
- Every mutation fetches the header row fresh, serializes against it, sends
  one remote call, and invalidates the table's cache entry only after that
  call succeeded. A failed or ambiguous mutation leaves the cache untouched.
- Errors from the remote store propagate unchanged. Nothing is retried.

Row positions are 1-based and header-inclusive (first data row = 2). A
position is only meaningful for the fetch it came from: a delete shifts
every row below it up by one. The ``*_by_key`` operations resolve a key
column value to a position from a fresh fetch immediately before writing,
which narrows that window to a single round trip.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Iterable, Mapping, Sequence
from typing import Any, TypeVar
from uuid import uuid4

from sheetbase.core.cache import TableCache
from sheetbase.core.schema import (
    FIRST_DATA_ROW,
    HEADER_ROW,
    Record,
    dropped_fields,
    extract_headers,
    position_of,
    record_to_row,
    rows_to_records,
)
from sheetbase.core.transport import SheetsTransport
from sheetbase.exceptions import (
    AmbiguousMutationOutcomeException,
    InvalidRowPositionException,
    RecordNotFoundException,
    SheetbaseException,
    ValidationException,
)
from sheetbase.observability import MetricsStore, get_metrics_store

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _new_row_id() -> str:
    return uuid4().hex


class TabularDatastore:
    """Remote spreadsheet tables as keyed records."""

    def __init__(
        self,
        transport: SheetsTransport,
        cache: TableCache | None = None,
        *,
        local_fallback: bool = False,
        mutation_timeout: float | None = None,
        key_column: str = "RowId",
        id_factory: Callable[[], str] = _new_row_id,
        metrics: MetricsStore | None = None,
    ):
        self.transport = transport
        self.cache = cache if cache is not None else TableCache()
        self.local_fallback = local_fallback
        self.mutation_timeout = mutation_timeout
        self.key_column = key_column
        self._id_factory = id_factory
        self._metrics = metrics or get_metrics_store()

    # -------------------------------------------------------------------------
    # Plumbing
    # -------------------------------------------------------------------------

    async def _call(self, table: str, operation: str, awaitable: Awaitable[T], *, mutating: bool = False) -> T:
        started = time.perf_counter()
        try:
            if mutating and self.mutation_timeout is not None:
                try:
                    return await asyncio.wait_for(awaitable, self.mutation_timeout)
                except asyncio.TimeoutError:
                    raise AmbiguousMutationOutcomeException(
                        table, operation, f"abandoned after {self.mutation_timeout}s"
                    ) from None
            return await awaitable
        except asyncio.CancelledError:
            if mutating:
                logger.warning("%s on %s cancelled before its outcome was observed", operation, table)
            raise
        except SheetbaseException as e:
            self._metrics.record_error(operation, e.code)
            raise
        finally:
            self._metrics.record_latency(operation, (time.perf_counter() - started) * 1000)

    @staticmethod
    def _require_table(table: str) -> None:
        if not table or not table.strip():
            raise ValidationException("Table name is required")

    @staticmethod
    def _require_position(table: str, position: int) -> None:
        if position < FIRST_DATA_ROW:
            raise InvalidRowPositionException(table, position)

    def _skip(self, operation: str, table: str) -> bool:
        if self.local_fallback:
            logger.info("Local fallback: %s on %s skipped", operation, table)
            return True
        return False

    def _serialize(self, table: str, headers: list[str], record: Mapping[str, Any]) -> list[str]:
        dropped = dropped_fields(headers, record)
        if dropped:
            logger.debug("%s: fields not in header dropped: %s", table, ", ".join(dropped))
        return record_to_row(headers, record)

    def _with_key(self, headers: list[str], record: Mapping[str, Any]) -> tuple[dict[str, Any], str | None]:
        record = dict(record)
        if self.key_column not in headers:
            return record, None
        key = str(record.get(self.key_column) or "").strip()
        if not key:
            key = self._id_factory()
            record[self.key_column] = key
        return record, key

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def read(self, table: str, force_refresh: bool = False) -> list[Record]:
        """
        All data rows of ``table`` as records.

        Args:
            table: Table (sheet) name
            force_refresh: Skip the cache and fetch from the remote store

        Returns:
            One record per data row, every header present as a key. A table
            with no rows at all reads as [].

        Raises:
            DatastoreUnavailableException: Transport or authorization failure
            SchemaUnavailableException: Data rows exist under a blank header row
        """
        self._require_table(table)
        if self._skip("read", table):
            return []

        if not force_refresh:
            cached = self.cache.get(table)
            if cached is not None:
                self._metrics.record_cache(table, hit=True)
                logger.debug("Cache hit for %s (%d records)", table, len(cached))
                return cached
            self._metrics.record_cache(table, hit=False)

        grid = await self._call(table, "read", self.transport.get_values(table))
        if grid:
            headers = extract_headers(table, grid)
            records = rows_to_records(headers, grid[1:])
        else:
            records = []
        self.cache.set(table, records)
        logger.debug("Fetched %s (%d records)", table, len(records))
        return records

    async def headers(self, table: str) -> list[str]:
        """Current header row, always fetched fresh (never from the cache)."""
        self._require_table(table)
        if self._skip("headers", table):
            return []
        header = await self._call(table, "headers", self.transport.get_header(table))
        return extract_headers(table, [header] if header else [])

    async def find_position(self, table: str, key: str, key_column: str | None = None) -> int:
        """
        Resolve a key column value to its current row position.

        Always reads fresh, so the position is valid for the very next call.

        Raises:
            RecordNotFoundException: No row carries ``key``
        """
        column = key_column or self.key_column
        wanted = str(key).strip()
        records = await self.read(table, force_refresh=True)
        if records and column not in records[0]:
            raise ValidationException(f"Table '{table}' has no column '{column}'")
        for offset, record in enumerate(records):
            if record.get(column, "").strip() == wanted:
                return position_of(offset)
        raise RecordNotFoundException(table, column, wanted)

    async def find(
        self, table: str, key: str, key_column: str | None = None, force_refresh: bool = False
    ) -> Record | None:
        """First record whose key column equals ``key``, or None."""
        column = key_column or self.key_column
        wanted = str(key).strip()
        for record in await self.read(table, force_refresh=force_refresh):
            if record.get(column, "").strip() == wanted:
                return record
        return None

    async def table_exists(self, table: str) -> bool:
        self._require_table(table)
        if self._skip("table_exists", table):
            return False
        return table in await self._call(table, "list_tables", self.transport.list_tables())

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    async def append(self, table: str, record: Mapping[str, Any]) -> str | None:
        """
        Append ``record`` after the last row.

        The remote store picks the row position; it is not reported back.
        When the header contains the key column and the record leaves it
        blank, a fresh identifier is written there.

        Returns:
            The record's key column value, or None if the table has no key column
        """
        self._require_table(table)
        if self._skip("append", table):
            return None

        headers = await self.headers(table)
        record, key = self._with_key(headers, record)
        row = self._serialize(table, headers, record)
        await self._call(table, "append", self.transport.append_rows(table, [row]), mutating=True)
        self.cache.invalidate(table)
        return key

    async def append_many(self, table: str, records: Sequence[Mapping[str, Any]]) -> list[str | None]:
        """Append several records in one remote call (one header fetch, one invalidation)."""
        self._require_table(table)
        if not records:
            return []
        if self._skip("append_many", table):
            return [None] * len(records)

        headers = await self.headers(table)
        keyed = [self._with_key(headers, r) for r in records]
        rows = [self._serialize(table, headers, r) for r, _ in keyed]
        await self._call(table, "append", self.transport.append_rows(table, rows), mutating=True)
        self.cache.invalidate(table)
        return [key for _, key in keyed]

    async def update(self, table: str, position: int, record: Mapping[str, Any]) -> None:
        """
        Overwrite the row at ``position`` with ``record``.

        The whole row is rewritten: headers missing from ``record`` are
        written as "". The position is trusted as given; if a delete shifted
        rows since it was computed, the wrong row is overwritten.
        """
        self._require_table(table)
        self._require_position(table, position)
        if self._skip("update", table):
            return

        headers = await self.headers(table)
        row = self._serialize(table, headers, record)
        await self._call(table, "update", self.transport.write_row(table, position, row), mutating=True)
        self.cache.invalidate(table)

    async def batch_update(self, table: str, updates: Mapping[int, Mapping[str, Any]]) -> None:
        """Overwrite several rows, keyed by position, in one remote call."""
        self._require_table(table)
        for position in updates:
            self._require_position(table, position)
        if not updates or self._skip("batch_update", table):
            return

        headers = await self.headers(table)
        rows = [(position, self._serialize(table, headers, r)) for position, r in sorted(updates.items())]
        await self._call(table, "update", self.transport.write_rows(table, rows), mutating=True)
        self.cache.invalidate(table)

    async def delete(self, table: str, position: int) -> None:
        """
        Remove the row at ``position``.

        Every row below it moves up by one, so any position computed before
        this call for a row at or below ``position`` is now stale.
        """
        self._require_table(table)
        self._require_position(table, position)
        if self._skip("delete", table):
            return

        await self._call(table, "delete", self.transport.delete_row(table, position), mutating=True)
        self.cache.invalidate(table)

    async def delete_many(self, table: str, positions: Iterable[int]) -> int:
        """
        Remove several rows identified by positions from one fetch.

        Deletes run highest position first, so no delete shifts a row that
        is still waiting to be deleted. Returns the number of rows removed.
        """
        self._require_table(table)
        ordered = sorted(set(positions), reverse=True)
        for position in ordered:
            self._require_position(table, position)
        if self._skip("delete_many", table):
            return 0

        removed = 0
        for position in ordered:
            await self._call(table, "delete", self.transport.delete_row(table, position), mutating=True)
            self.cache.invalidate(table)
            removed += 1
        return removed

    async def update_by_key(
        self, table: str, key: str, record: Mapping[str, Any], key_column: str | None = None
    ) -> int | None:
        """Overwrite the row whose key column equals ``key``; returns the position written."""
        column = key_column or self.key_column
        if self._skip("update_by_key", table):
            return None
        position = await self.find_position(table, key, column)
        await self.update(table, position, {**record, column: key})
        return position

    async def delete_by_key(self, table: str, key: str, key_column: str | None = None) -> int | None:
        """Remove the row whose key column equals ``key``; returns the position removed."""
        if self._skip("delete_by_key", table):
            return None
        position = await self.find_position(table, key, key_column)
        await self.delete(table, position)
        return position

    # -------------------------------------------------------------------------
    # Table lifecycle
    # -------------------------------------------------------------------------

    async def ensure_table(self, table: str, headers: Sequence[str] = ()) -> bool:
        """
        Create ``table`` if missing and write ``headers`` into an empty header row.

        Clears the whole cache afterwards. Returns True if the table was created.
        """
        self._require_table(table)
        if self._skip("ensure_table", table):
            return False

        created = False
        if not await self.table_exists(table):
            await self._call(table, "create", self.transport.create_table(table), mutating=True)
            created = True
            logger.info("Created table %s", table)

        if headers:
            current = await self._call(table, "headers", self.transport.get_header(table))
            if not current:
                await self._call(
                    table,
                    "update",
                    self.transport.write_row(table, HEADER_ROW, [str(h) for h in headers]),
                    mutating=True,
                )
                logger.info("Wrote %d headers to %s", len(headers), table)

        self.cache.invalidate()
        return created

    async def clear(self, table: str, keep_header: bool = True) -> None:
        """Blank every data row (and the header too unless ``keep_header``)."""
        self._require_table(table)
        if self._skip("clear", table):
            return
        first_row = FIRST_DATA_ROW if keep_header else HEADER_ROW
        await self._call(table, "clear", self.transport.clear_rows(table, first_row), mutating=True)
        self.cache.invalidate(table)

    def invalidate(self, table: str | None = None) -> None:
        """Drop the cached entry for ``table``, or every entry."""
        self.cache.invalidate(table)

    async def aclose(self) -> None:
        await self.transport.aclose()
