"""
Sheetbase Metrics Endpoint.

Exposes observability metrics for monitoring and debugging.
"""

from fastapi import APIRouter

from sheetbase.observability import get_metrics_store

router = APIRouter(tags=["metrics"])


@router.get("/metrics")
def get_metrics() -> dict:
    """
    Get current metrics summary.

    Returns metrics for:
    - Remote call latencies per datastore operation (p50, p90, p99, mean, max)
    - Error counts by code
    - Cache hits/misses per table

    Example response:
    ```json
    {
      "uptime_seconds": 3600.5,
      "collected_at": "2026-01-05T19:00:00Z",
      "operations": {
        "read": {"call_count": 150, "p50_ms": 210.4, "errors": {"DATASTORE_UNAVAILABLE": 2}},
        "append": {"call_count": 12, "p50_ms": 340.0, "errors": {}}
      },
      "global_errors": {"DATASTORE_UNAVAILABLE": 2},
      "cache": {"Stock": {"hits": 40, "misses": 3}}
    }
    ```
    """
    return get_metrics_store().get_summary()
