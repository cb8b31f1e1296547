"""
Tests for configuration module.
"""

import pytest

from sheetbase.config import FeatureFlags, Settings
from sheetbase.core import GoogleSheetsTransport, InMemorySheetsTransport
from sheetbase.deps import build_datastore


class TestFeatureFlags:
    """Feature flags tests."""

    def test_default_features_enabled(self):
        """Test all features are enabled by default."""
        flags = FeatureFlags()
        assert flags.tables is True
        assert flags.inventory is True
        assert flags.registries is True

    def test_env_disables_feature(self, monkeypatch):
        monkeypatch.setenv("FEATURE_INVENTORY", "false")

        assert FeatureFlags().to_dict() == {"tables": True, "inventory": False, "registries": True}


class TestSettings:
    """Settings loaded from the environment."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("DATASTORE_LOCAL_FALLBACK", raising=False)
        monkeypatch.delenv("CACHE_TTL_SECONDS", raising=False)

        settings = Settings(_env_file=None)

        assert settings.local_fallback is False
        assert settings.cache.ttl_seconds == 300.0
        assert settings.key_column == "RowId"
        assert settings.mutation_timeout_seconds is None

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("DATASTORE_LOCAL_FALLBACK", "true")
        monkeypatch.setenv("DATASTORE_MUTATION_TIMEOUT_SECONDS", "20")
        monkeypatch.setenv("CACHE_TTL_SECONDS", "60")
        monkeypatch.setenv("SHEETS_BACKEND", "memory")
        monkeypatch.setenv("REGISTRY_TABLE", "Inventory")

        settings = Settings(_env_file=None)

        assert settings.local_fallback is True
        assert settings.mutation_timeout_seconds == 20
        assert settings.cache.ttl_seconds == 60
        assert settings.sheets.backend == "memory"
        assert settings.registry.table == "Inventory"

    def test_production(self, monkeypatch):
        monkeypatch.setenv("APP_ENV", "production")

        assert Settings(_env_file=None).is_production is True


class TestBuildDatastore:
    """Datastore construction from settings."""

    def test_memory_backend(self, monkeypatch):
        monkeypatch.setenv("SHEETS_BACKEND", "memory")
        monkeypatch.setenv("CACHE_TTL_SECONDS", "30")
        monkeypatch.setenv("DATASTORE_KEY_COLUMN", "Id")

        datastore = build_datastore(Settings(_env_file=None))

        assert isinstance(datastore.transport, InMemorySheetsTransport)
        assert datastore.cache.ttl_seconds == 30
        assert datastore.key_column == "Id"

    def test_google_backend(self, monkeypatch):
        monkeypatch.setenv("SHEETS_BACKEND", "google")
        monkeypatch.setenv("SHEETS_SPREADSHEET_ID", "sheet-1")

        datastore = build_datastore(Settings(_env_file=None))

        assert isinstance(datastore.transport, GoogleSheetsTransport)
        assert datastore.transport.spreadsheet_id == "sheet-1"


class TestExceptions:
    """Exception tests."""

    def test_not_found_exception(self):
        """Test NotFoundException."""
        from sheetbase.exceptions import NotFoundException

        exc = NotFoundException("registry", "colours")
        assert exc.status_code == 404
        assert exc.code == "NOT_FOUND"
        assert "registry" in exc.message

    def test_feature_disabled_exception(self):
        """Test FeatureDisabledException."""
        from sheetbase.exceptions import FeatureDisabledException

        exc = FeatureDisabledException("inventory")
        assert exc.status_code == 503
        assert exc.code == "FEATURE_DISABLED"
        assert "inventory" in exc.message

    def test_unavailable_messages_depend_on_operation(self):
        from sheetbase.exceptions import DatastoreUnavailableException

        read = DatastoreUnavailableException("Stock", "read", "HTTP 500", upstream_status=500)
        write = DatastoreUnavailableException("Stock", "delete", "HTTP 500")

        assert read.message == "Data temporarily unavailable, retry."
        assert read.details["upstream_status"] == 500
        assert write.message == "Change not saved, retry."
        assert "upstream_status" not in write.details

    @pytest.mark.parametrize(
        "name, code, status_code",
        [
            ("SchemaUnavailableException", "SCHEMA_UNAVAILABLE", 409),
            ("TableNotFoundException", "TABLE_NOT_FOUND", 404),
        ],
    )
    def test_table_exceptions(self, name, code, status_code):
        from sheetbase import exceptions

        exc = getattr(exceptions, name)("Stock")
        assert exc.code == code
        assert exc.status_code == status_code
        assert exc.details == {"table": "Stock"}
