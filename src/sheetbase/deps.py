"""
Sheetbase - Dependency Injection.

FastAPI dependencies for settings, feature flags, and the datastore client.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from sheetbase.config import FeatureFlags, Settings, get_settings
from sheetbase.core import (
    GoogleSheetsTransport,
    InMemorySheetsTransport,
    SheetsTransport,
    StaticTokenProvider,
    TableCache,
    TabularDatastore,
)
from sheetbase.exceptions import FeatureDisabledException


# =============================================================================
# Settings Dependencies
# =============================================================================


def get_features(settings: Annotated[Settings, Depends(get_settings)]) -> FeatureFlags:
    """Get feature flags from settings."""
    return settings.features


# =============================================================================
# Datastore
# =============================================================================


def build_transport(settings: Settings) -> SheetsTransport:
    """Transport selected by SHEETS_BACKEND."""
    if settings.sheets.backend == "memory":
        return InMemorySheetsTransport()
    return GoogleSheetsTransport(
        spreadsheet_id=settings.sheets.spreadsheet_id,
        tokens=StaticTokenProvider(settings.sheets.access_token),
        base_url=settings.sheets.base_url,
        timeout_seconds=settings.sheets.timeout_seconds,
        value_input_option=settings.sheets.value_input_option,
    )


def build_datastore(settings: Settings) -> TabularDatastore:
    return TabularDatastore(
        build_transport(settings),
        TableCache(ttl_seconds=settings.cache.ttl_seconds),
        local_fallback=settings.local_fallback,
        mutation_timeout=settings.mutation_timeout_seconds,
        key_column=settings.key_column,
    )


@lru_cache
def get_datastore() -> TabularDatastore:
    """
    Get the process-wide datastore client.

    One client (and so one cache) per process, built on first use.
    """
    return build_datastore(get_settings())


# =============================================================================
# Feature Flag Guards
# =============================================================================


def require_feature(feature_name: str):
    """Create a dependency that requires a specific feature to be enabled."""

    def check_feature(features: Annotated[FeatureFlags, Depends(get_features)]) -> bool:
        if not getattr(features, feature_name, False):
            raise FeatureDisabledException(feature_name)
        return True

    return check_feature


# Specific feature guards
require_tables = Depends(require_feature("tables"))
require_inventory = Depends(require_feature("inventory"))
require_registries = Depends(require_feature("registries"))
