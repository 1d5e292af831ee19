"""
Configuration Management for Bill Splitter

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The engine itself is pure; settings only supply defaults (base currency,
history window, ranking sizes) and the location of the bill history file.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Bill history storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="BILLSPLIT_STORAGE_",
        extra="ignore"
    )

    history_path: str = Field(
        default="bill_history.json",
        description="Path to the JSON file holding archived bills"
    )
    encoding: str = Field(
        default="utf-8",
        description="Text encoding of the history file"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="BILLSPLIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    debug_mode: bool = Field(
        default=False,
        description="Log at DEBUG regardless of log_level"
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level for structured logging"
    )

    # Engine defaults
    default_base_currency: str = Field(
        default="USD",
        min_length=3,
        max_length=3,
        description="Currency analytics are reported in when none is given"
    )

    # History window
    history_limit: int = Field(
        default=100,
        ge=1,
        le=10000,
        description="Number of most recent bills kept in history"
    )

    # Analytics ranking sizes
    frequent_items_limit: int = Field(
        default=10,
        ge=1,
        description="How many items the frequent-items ranking keeps"
    )
    favorite_items_limit: int = Field(
        default=5,
        ge=1,
        description="How many favorite items are reported per person"
    )

    @field_validator('default_base_currency')
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        """Currency codes are stored upper-case."""
        return v.strip().upper()

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only accept stdlib logging level names."""
        level = v.strip().upper()
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if level not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {sorted(allowed)}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def app(self) -> AppSettings:
        return AppSettings()

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.app
        results["app"] = True
    except ValueError as e:
        results["app"] = False
        results["app_error"] = str(e)

    try:
        _ = settings.storage
        results["storage"] = True
    except ValueError as e:
        results["storage"] = False
        results["storage_error"] = str(e)

    return results
