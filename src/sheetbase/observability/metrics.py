"""
Sheetbase Metrics Store.

In-process metrics collection for observability without external dependencies.
Tracks:
- Remote call latencies per datastore operation (percentiles)
- Error counts by code (SheetbaseException.code)
- Cache hits/misses per table

Thread-safe via locks. Singleton pattern for global access.
"""

from __future__ import annotations

import statistics
import threading
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any


@dataclass
class OperationMetrics:
    """Metrics for a single datastore operation (read, append, ...)."""

    latencies_ms: list[float] = field(default_factory=list)
    error_counts: dict[str, int] = field(default_factory=lambda: defaultdict(int))
    call_count: int = 0
    last_called: datetime | None = None

    # Keep last N latencies to avoid unbounded memory
    MAX_LATENCIES = 1000

    def record_latency(self, ms: float) -> None:
        self.latencies_ms.append(ms)
        if len(self.latencies_ms) > self.MAX_LATENCIES:
            self.latencies_ms = self.latencies_ms[-self.MAX_LATENCIES :]
        self.call_count += 1
        self.last_called = datetime.now(timezone.utc)

    def record_error(self, code: str) -> None:
        self.error_counts[code] += 1

    def get_percentiles(self) -> dict[str, float]:
        if not self.latencies_ms:
            return {}
        ordered = sorted(self.latencies_ms)
        n = len(ordered)
        return {
            "p50_ms": ordered[int(n * 0.5)],
            "p90_ms": ordered[int(n * 0.9)],
            "p99_ms": ordered[int(n * 0.99)] if n > 1 else ordered[-1],
            "mean_ms": statistics.mean(ordered),
            "max_ms": ordered[-1],
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "call_count": self.call_count,
            "last_called": self.last_called.isoformat() if self.last_called else None,
            **self.get_percentiles(),
            "errors": dict(self.error_counts),
        }


class MetricsStore:
    """
    Central metrics store for datastore observability.

    Thread-safe singleton for collecting metrics across the application.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._operations: dict[str, OperationMetrics] = defaultdict(OperationMetrics)
        self._global_errors: dict[str, int] = defaultdict(int)
        self._cache: dict[str, dict[str, int]] = defaultdict(lambda: {"hits": 0, "misses": 0})
        self._started_at = datetime.now(timezone.utc)

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def record_latency(self, operation: str, ms: float) -> None:
        with self._lock:
            self._operations[operation].record_latency(ms)

    def record_error(self, operation: str, code: str) -> None:
        with self._lock:
            self._operations[operation].record_error(code)
            self._global_errors[code] += 1

    # -------------------------------------------------------------------------
    # Cache
    # -------------------------------------------------------------------------

    def record_cache(self, table: str, hit: bool) -> None:
        with self._lock:
            self._cache[table]["hits" if hit else "misses"] += 1

    # -------------------------------------------------------------------------
    # Summary / Export
    # -------------------------------------------------------------------------

    def get_summary(self) -> dict[str, Any]:
        """Summary suitable for JSON serialization and the /metrics endpoint."""
        with self._lock:
            now = datetime.now(timezone.utc)
            return {
                "uptime_seconds": round((now - self._started_at).total_seconds(), 1),
                "collected_at": now.isoformat(),
                "operations": {name: m.to_dict() for name, m in self._operations.items()},
                "global_errors": dict(self._global_errors),
                "cache": {table: dict(counts) for table, counts in self._cache.items()},
            }

    def reset(self) -> None:
        """Reset all metrics. Useful for testing."""
        with self._lock:
            self._operations.clear()
            self._global_errors.clear()
            self._cache.clear()
            self._started_at = datetime.now(timezone.utc)


# -----------------------------------------------------------------------------
# Singleton accessor
# -----------------------------------------------------------------------------

@lru_cache(maxsize=1)
def get_metrics_store() -> MetricsStore:
    """Get the global MetricsStore singleton."""
    return MetricsStore()
