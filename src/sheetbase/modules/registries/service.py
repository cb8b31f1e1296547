"""
Sheetbase Registries - Service

Value lists (categories, units, locations, makes) derived from the current
contents of the Stock table, for pick lists and autocompletion.

Lookup order for a registry:
1. scan the table through the datastore (trimmed, deduplicated, sorted)
2. the durable store, when the scan fails or finds nothing
3. built-in defaults

New values are only ever added to the durable store, never to the table.
"""

import logging
from collections.abc import Mapping
from functools import lru_cache

from sheetbase.config import get_settings
from sheetbase.core import TabularDatastore
from sheetbase.deps import get_datastore
from sheetbase.exceptions import NotFoundException, SheetbaseException
from sheetbase.modules.registries.store import FieldRegistryStore

logger = logging.getLogger(__name__)

# Registry name -> column scanned
REGISTRY_FIELDS: dict[str, str] = {
    "categories": "category",
    "units": "unit",
    "locations": "location",
    "makes": "make",
}

DEFAULT_VALUES: dict[str, list[str]] = {
    "categories": ["Raw Materials", "Finished Goods", "Components", "Tools", "Others"],
    "units": ["kg", "pcs", "m", "cm", "mm", "l", "ml", "g", "mg", "Others"],
    "locations": ["Warehouse A", "Warehouse B", "Production Floor", "Office", "Others"],
    "makes": ["Local", "Imported", "Brand A", "Brand B", "Others"],
}


class FieldRegistry:
    """Derived value lists with a durable fallback."""

    def __init__(
        self,
        datastore: TabularDatastore,
        store: FieldRegistryStore,
        table: str = "Stock",
        fields: Mapping[str, str] = REGISTRY_FIELDS,
        defaults: Mapping[str, list[str]] = DEFAULT_VALUES,
    ):
        self._datastore = datastore
        self._store = store
        self.table = table
        self._fields = dict(fields)
        self._defaults = {k: list(v) for k, v in defaults.items()}

    @property
    def names(self) -> list[str]:
        return list(self._fields)

    def _column(self, name: str) -> str:
        try:
            return self._fields[name]
        except KeyError:
            raise NotFoundException("registry", name) from None

    def _fallback(self, name: str) -> list[str]:
        stored = self._store.get(name)
        if stored is not None:
            return stored
        return list(self._defaults.get(name, []))

    async def values(self, name: str) -> list[str]:
        """Current values for a registry."""
        column = self._column(name)
        try:
            records = await self._datastore.read(self.table)
        except SheetbaseException as e:
            logger.warning("Registry %s: reading %s failed (%s), using fallback", name, self.table, e.code)
            return self._fallback(name)

        found = sorted({(r.get(column) or "").strip() for r in records} - {""})
        if not found:
            return self._fallback(name)

        self._store.put(name, found)
        return found

    async def add_value(self, name: str, value: str) -> list[str]:
        """
        Add a value to the durable store (case-insensitive dedupe).

        Returns:
            The stored list after the addition
        """
        self._column(name)
        current = self._fallback(name)
        trimmed = (value or "").strip()
        if not trimmed:
            return current
        if any(v.lower() == trimmed.lower() for v in current):
            return current
        updated = sorted([*current, trimmed])
        self._store.put(name, updated)
        return updated

    async def all_values(self) -> dict[str, list[str]]:
        # Sequential: the first read fills the cache for the rest.
        return {name: await self.values(name) for name in self.names}

    async def refresh_all(self) -> dict[str, list[str]]:
        """Forget the stored lists, then rescan every registry."""
        self.clear()
        self._datastore.invalidate(self.table)
        return await self.all_values()

    def clear(self) -> None:
        for name in self.names:
            self._store.remove(name)


@lru_cache
def get_field_registry() -> FieldRegistry:
    """Get the process-wide field registry."""
    settings = get_settings()
    return FieldRegistry(
        get_datastore(),
        FieldRegistryStore(settings.registry.fallback_path),
        table=settings.registry.table,
    )
