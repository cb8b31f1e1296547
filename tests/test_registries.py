"""Tests for derived field-value registries."""

import json

import pytest

from sheetbase.exceptions import DatastoreUnavailableException, NotFoundException
from sheetbase.modules.registries import FieldRegistry, FieldRegistryStore
from sheetbase.modules.registries.service import DEFAULT_VALUES


@pytest.fixture
def store(tmp_path):
    return FieldRegistryStore(tmp_path / "registries.json")


@pytest.fixture
def registry(datastore, store):
    return FieldRegistry(datastore, store)


class TestFieldRegistryStore:

    def test_missing_file_is_empty(self, store):
        assert store.get("units") is None

    def test_put_survives_reload(self, tmp_path, store):
        store.put("units", ["kg", "pcs"])

        reloaded = FieldRegistryStore(tmp_path / "registries.json")
        assert reloaded.get("units") == ["kg", "pcs"]

    def test_unreadable_file_is_ignored(self, tmp_path):
        path = tmp_path / "registries.json"
        path.write_text("{not json", encoding="utf-8")

        assert FieldRegistryStore(path).get("units") is None

    def test_remove_and_clear(self, tmp_path, store):
        store.put("units", ["kg"])
        store.put("makes", ["Local"])

        store.remove("units")
        assert store.get("units") is None
        assert store.get("makes") == ["Local"]

        store.clear()
        assert json.loads((tmp_path / "registries.json").read_text(encoding="utf-8")) == {}


class TestFieldRegistry:

    @pytest.mark.asyncio
    async def test_values_are_trimmed_deduplicated_sorted(self, registry):
        assert await registry.values("categories") == ["Hardware", "Raw Materials"]
        assert await registry.values("units") == ["m", "pcs"]

    @pytest.mark.asyncio
    async def test_blank_cells_are_skipped(self, registry):
        assert await registry.values("makes") == ["Imported", "Local"]

    @pytest.mark.asyncio
    async def test_scanned_values_are_stored(self, registry, store):
        await registry.values("locations")

        assert store.get("locations") == ["Warehouse A", "Warehouse B"]

    @pytest.mark.asyncio
    async def test_all_values_reads_table_once(self, registry, transport):
        result = await registry.all_values()

        assert set(result) == {"categories", "units", "locations", "makes"}
        assert transport.calls["get_values"] == 1

    @pytest.mark.asyncio
    async def test_empty_table_falls_back_to_defaults(self, datastore, store):
        registry = FieldRegistry(datastore, store, table="Empty")

        assert await registry.values("units") == DEFAULT_VALUES["units"]

    @pytest.mark.asyncio
    async def test_failed_read_falls_back_to_stored_values(self, registry, store, transport):
        store.put("units", ["box"])
        transport.fail_next("get_values", DatastoreUnavailableException("Stock", "read", "down"))

        assert await registry.values("units") == ["box"]

    @pytest.mark.asyncio
    async def test_unknown_registry(self, registry):
        with pytest.raises(NotFoundException):
            await registry.values("colours")

    @pytest.mark.asyncio
    async def test_add_value_only_touches_store(self, registry, store, transport):
        await registry.values("units")

        updated = await registry.add_value("units", " box ")

        assert updated == ["box", "m", "pcs"]
        assert store.get("units") == ["box", "m", "pcs"]
        assert transport.calls["append_rows"] == 0

    @pytest.mark.asyncio
    async def test_add_value_ignores_case_duplicates(self, registry):
        await registry.values("units")

        assert await registry.add_value("units", "PCS") == ["m", "pcs"]

    @pytest.mark.asyncio
    async def test_refresh_rescans_table(self, registry, store, transport):
        store.put("units", ["stale"])
        await registry.values("units")

        result = await registry.refresh_all()

        assert result["units"] == ["m", "pcs"]
        assert transport.calls["get_values"] == 2
