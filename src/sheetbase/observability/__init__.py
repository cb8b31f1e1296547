"""
Sheetbase Observability Module.

Provides in-process metrics collection for datastore calls, errors, and cache use.
"""

from sheetbase.observability.metrics import MetricsStore, get_metrics_store

__all__ = ["MetricsStore", "get_metrics_store"]
