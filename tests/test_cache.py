"""Tests for the TTL table cache."""

from sheetbase.core import TableCache


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class TestTableCache:

    def test_miss_when_empty(self):
        assert TableCache().get("Stock") is None

    def test_hit_within_ttl(self):
        clock = FakeClock()
        cache = TableCache(ttl_seconds=300, clock=clock)
        cache.set("Stock", [{"a": "1"}])

        clock.now = 299.9
        assert cache.get("Stock") == [{"a": "1"}]

    def test_expired_entry_is_absent_and_evicted(self):
        clock = FakeClock()
        cache = TableCache(ttl_seconds=300, clock=clock)
        cache.set("Stock", [{"a": "1"}])

        clock.now = 300.0
        assert cache.get("Stock") is None
        assert len(cache) == 0

    def test_set_overwrites_and_restarts_ttl(self):
        clock = FakeClock()
        cache = TableCache(ttl_seconds=10, clock=clock)
        cache.set("Stock", [{"a": "old"}])
        clock.now = 8
        cache.set("Stock", [{"a": "new"}])
        clock.now = 15

        assert cache.get("Stock") == [{"a": "new"}]

    def test_invalidate_one_table(self):
        cache = TableCache()
        cache.set("Stock", [])
        cache.set("Vendor", [])

        cache.invalidate("Stock")

        assert "Stock" not in cache
        assert "Vendor" in cache

    def test_invalidate_everything(self):
        cache = TableCache()
        cache.set("Stock", [])
        cache.set("Vendor", [])

        cache.invalidate()

        assert len(cache) == 0

    def test_invalidate_unknown_table_is_noop(self):
        cache = TableCache()
        cache.invalidate("Nope")
        assert len(cache) == 0

    def test_callers_cannot_edit_cached_records(self):
        cache = TableCache()
        records = [{"a": "1"}]
        cache.set("Stock", records)

        records[0]["a"] = "changed before get"
        first = cache.get("Stock")
        first[0]["a"] = "changed after get"

        assert cache.get("Stock") == [{"a": "1"}]
