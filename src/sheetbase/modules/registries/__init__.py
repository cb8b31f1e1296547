"""
Sheetbase Registries Module

Derived field-value lists (categories, units, locations, makes) scanned
from the Stock table, with a durable local fallback.
"""

from .router import router
from .service import FieldRegistry, get_field_registry
from .store import FieldRegistryStore

__all__ = ["router", "FieldRegistry", "FieldRegistryStore", "get_field_registry"]
