"""
Sheetbase Configuration Module.

Handles all application settings, feature flags, and environment configuration.
Uses pydantic-settings for validation and type safety.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FeatureFlags(BaseSettings):
    """Feature flags for enabling/disabling modules."""

    model_config = SettingsConfigDict(env_prefix="FEATURE_")

    tables: bool = True
    inventory: bool = True
    registries: bool = True

    def to_dict(self) -> dict[str, bool]:
        """Return feature flags as dictionary for health endpoint."""
        return {
            "tables": self.tables,
            "inventory": self.inventory,
            "registries": self.registries,
        }


class SheetsSettings(BaseSettings):
    """Remote spreadsheet configuration."""

    model_config = SettingsConfigDict(env_prefix="SHEETS_")

    backend: Literal["google", "memory"] = Field(
        default="google",
        description="'google' talks to the Sheets v4 REST API; 'memory' keeps tables in process",
    )
    spreadsheet_id: str = Field(default="", description="Spreadsheet holding every table")
    base_url: str = Field(
        default="https://sheets.googleapis.com/v4/spreadsheets",
        description="Sheets API base URL",
    )
    access_token: str = Field(default="", description="OAuth bearer token attached to every call")
    timeout_seconds: float = Field(default=15.0, description="HTTP timeout per remote call")
    value_input_option: Literal["RAW", "USER_ENTERED"] = "USER_ENTERED"


class CacheSettings(BaseSettings):
    """Table cache configuration."""

    model_config = SettingsConfigDict(env_prefix="CACHE_")

    ttl_seconds: float = Field(default=300.0, description="Max age of a cached table (5 minutes)")


class RegistrySettings(BaseSettings):
    """Derived-value registry configuration."""

    model_config = SettingsConfigDict(env_prefix="REGISTRY_")

    fallback_path: str = Field(
        default="uploads/field_registry.json",
        description="Durable JSON file used when the remote table cannot be read",
    )
    table: str = Field(default="Stock", description="Table scanned for field values")


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_env: Literal["development", "staging", "production"] = "development"
    app_debug: bool = False
    app_log_level: str = "INFO"

    # Datastore
    local_fallback: bool = Field(
        default=False,
        description="If true, reads return empty results and mutations are no-op successes (offline/demo).",
        validation_alias="DATASTORE_LOCAL_FALLBACK",
    )
    mutation_timeout_seconds: float | None = Field(
        default=None,
        description="Abandon a mutation after this many seconds and report its outcome as ambiguous.",
        validation_alias="DATASTORE_MUTATION_TIMEOUT_SECONDS",
    )
    key_column: str = Field(
        default="RowId",
        description="Header of the stable identifier column filled in on append.",
        validation_alias="DATASTORE_KEY_COLUMN",
    )

    # Nested settings
    features: FeatureFlags = Field(default_factory=FeatureFlags)
    sheets: SheetsSettings = Field(default_factory=SheetsSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    registry: RegistrySettings = Field(default_factory=RegistrySettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
