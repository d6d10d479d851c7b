"""
Configuration Management for the Three-Fund Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Nothing is required: every setting has a working default, so a fresh
install starts with an empty ledger in the user's home directory.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fundledger.models.ledger import Percentages


class StorageSettings(BaseSettings):
    """Where the ledger document lives."""

    model_config = SettingsConfigDict(
        env_prefix="FUNDLEDGER_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_dir: str = Field(
        default="~/.fundledger",
        description="Directory holding one JSON file per storage key"
    )
    state_key: str = Field(
        default="moneys-wisdom-ledger-v1",
        min_length=1,
        description="Storage key of the ledger document"
    )

    @field_validator('state_key')
    @classmethod
    def validate_state_key(cls, v: str) -> str:
        """The key becomes a file name, so no path separators."""
        if "/" in v or "\\" in v:
            raise ValueError("state_key must not contain path separators")
        return v


class AllocationSettings(BaseSettings):
    """Percentages used for a brand-new ledger."""

    model_config = SettingsConfigDict(
        env_prefix="FUNDLEDGER_ALLOCATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    freedom_percent: Decimal = Field(
        default=Decimal("50"),
        description="Default share for the freedom fund"
    )
    dream_percent: Decimal = Field(
        default=Decimal("40"),
        description="Default share for the dream fund"
    )
    play_percent: Decimal = Field(
        default=Decimal("10"),
        description="Default share for the play fund"
    )

    @property
    def default_percentages(self) -> Percentages:
        return Percentages(
            freedom=self.freedom_percent,
            dream=self.dream_percent,
            play=self.play_percent,
        )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for structured logs"
    )

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_log_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug_mode else self.log_level


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
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def allocation(self) -> AllocationSettings:
        return AllocationSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus `<name>_error`
    entries for the ones that failed. Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "allocation", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
