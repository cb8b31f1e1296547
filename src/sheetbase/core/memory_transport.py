from __future__ import annotations

import asyncio
from collections import Counter, defaultdict, deque
from collections.abc import Sequence

from sheetbase.core.transport import Row, SheetsTransport
from sheetbase.exceptions import TableNotFoundException


class InMemorySheetsTransport(SheetsTransport):
    """Process-local spreadsheet (SHEETS_BACKEND=memory, and tests).

    Behaves like the remote store where it matters: trailing blank cells are
    trimmed on read, deletes shift rows up, appends land after the last row.
    Every call is counted in ``calls``; ``fail_next`` and ``latency`` let
    callers simulate outages and slow responses.
    """

    def __init__(self, tables: dict[str, Sequence[Sequence[str]]] | None = None):
        self._grids: dict[str, list[list[str]]] = {}
        self.calls: Counter[str] = Counter()
        self.latency: dict[str, float] = {}
        self._failures: dict[str, deque[Exception]] = defaultdict(deque)
        for name, rows in (tables or {}).items():
            self.seed(name, rows)

    # -------------------------------------------------------------------------
    # Test / demo helpers
    # -------------------------------------------------------------------------

    def seed(self, table: str, rows: Sequence[Sequence[str]]) -> None:
        self._grids[table] = [list(r) for r in rows]

    def rows(self, table: str) -> list[list[str]]:
        return [list(r) for r in self._grids[table]]

    def fail_next(self, operation: str, exc: Exception) -> None:
        """Raise ``exc`` from the next call to ``operation`` (a method name)."""
        self._failures[operation].append(exc)

    async def _enter(self, operation: str, table: str | None = None) -> list[list[str]] | None:
        self.calls[operation] += 1
        delay = self.latency.get(operation)
        if delay:
            await asyncio.sleep(delay)
        if self._failures[operation]:
            raise self._failures[operation].popleft()
        if table is None:
            return None
        try:
            return self._grids[table]
        except KeyError:
            raise TableNotFoundException(table) from None

    @staticmethod
    def _trim(row: list[str]) -> list[str]:
        end = len(row)
        while end and row[end - 1] == "":
            end -= 1
        return row[:end]

    @staticmethod
    def _place(grid: list[list[str]], position: int, values: Row) -> None:
        while len(grid) < position:
            grid.append([])
        current = grid[position - 1]
        merged = list(values) + current[len(values):]
        grid[position - 1] = merged

    # -------------------------------------------------------------------------
    # SheetsTransport
    # -------------------------------------------------------------------------

    async def get_values(self, table: str) -> list[list[str]]:
        grid = await self._enter("get_values", table)
        rows = [self._trim(r) for r in grid]
        while rows and not rows[-1]:
            rows.pop()
        return rows

    async def get_header(self, table: str) -> list[str]:
        grid = await self._enter("get_header", table)
        return self._trim(grid[0]) if grid else []

    async def append_rows(self, table: str, rows: Sequence[Row]) -> None:
        grid = await self._enter("append_rows", table)
        while grid and not any(grid[-1]):
            grid.pop()
        grid.extend(list(r) for r in rows)

    async def write_row(self, table: str, position: int, values: Row) -> None:
        grid = await self._enter("write_row", table)
        self._place(grid, position, values)

    async def write_rows(self, table: str, updates: Sequence[tuple[int, Row]]) -> None:
        grid = await self._enter("write_rows", table)
        for position, values in updates:
            self._place(grid, position, values)

    async def delete_row(self, table: str, position: int) -> None:
        grid = await self._enter("delete_row", table)
        if position <= len(grid):
            del grid[position - 1]

    async def list_tables(self) -> list[str]:
        await self._enter("list_tables")
        return list(self._grids)

    async def create_table(self, table: str) -> None:
        await self._enter("create_table")
        self._grids.setdefault(table, [])

    async def clear_rows(self, table: str, first_row: int) -> None:
        grid = await self._enter("clear_rows", table)
        for i in range(first_row - 1, len(grid)):
            grid[i] = [""] * len(grid[i])
