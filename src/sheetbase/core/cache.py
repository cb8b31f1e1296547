from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from sheetbase.core.schema import Record

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300.0


@dataclass(frozen=True)
class CacheEntry:
    records: tuple[Record, ...]
    fetched_at: float


class TableCache:
    """Full-table record sets keyed by table name, valid for ``ttl_seconds``.

    Not locked: one cache belongs to one datastore client serving a single
    session. Records are copied on the way in and out, so callers editing
    a returned record never change what the cache holds.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def get(self, table: str) -> list[Record] | None:
        entry = self._entries.get(table)
        if entry is None:
            return None
        if self._clock() - entry.fetched_at >= self.ttl_seconds:
            # Expired entries are logically absent; evict lazily.
            del self._entries[table]
            return None
        return [dict(r) for r in entry.records]

    def set(self, table: str, records: list[Record]) -> None:
        self._entries[table] = CacheEntry(
            records=tuple(dict(r) for r in records),
            fetched_at=self._clock(),
        )

    def invalidate(self, table: str | None = None) -> None:
        if table is None:
            logger.debug("Cache cleared (%d tables)", len(self._entries))
            self._entries.clear()
            return
        if self._entries.pop(table, None) is not None:
            logger.debug("Cache invalidated for %s", table)

    def __contains__(self, table: str) -> bool:
        return self.get(table) is not None

    def __len__(self) -> int:
        return len(self._entries)
