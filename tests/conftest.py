"""Shared fixtures: an in-memory spreadsheet and a datastore over it."""

import itertools

import pytest

from sheetbase.core import InMemorySheetsTransport, TableCache, TabularDatastore
from sheetbase.observability import MetricsStore


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


STOCK_ROWS = [
    ["itemCode", "itemName", "category", "currentStock", "unit", "location", "make"],
    ["A1", "Bolt", "Hardware", "120", "pcs", "Warehouse A", "Local"],
    ["A2", "Nut", "Hardware", "80", "pcs", "Warehouse B", "Imported"],
    ["A3", "Copper wire", " Raw Materials ", "1,250.5", "m", "Warehouse A", ""],
]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def transport():
    return InMemorySheetsTransport({"Stock": STOCK_ROWS, "Empty": []})


@pytest.fixture
def metrics():
    return MetricsStore()


@pytest.fixture
def datastore(transport, clock, metrics):
    ids = (f"id-{n}" for n in itertools.count(1))
    return TabularDatastore(
        transport,
        TableCache(ttl_seconds=300.0, clock=clock),
        id_factory=lambda: next(ids),
        metrics=metrics,
    )

