"""
Application settings with Pydantic v2 validation.

Loads configuration from environment variables with sensible defaults.
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "ledger.db"

    # SQLite settings
    readers: int = 4  # reader connections; writes use one dedicated connection
    busy_timeout: int = 30000  # ms

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class APISettings(BaseSettings):
    """API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["*"]


class AuthSettings(BaseSettings):
    """Bearer token verification settings.

    The secret is shared with the account service that issues tokens.
    """

    model_config = SettingsConfigDict(env_prefix="AUTH_")

    secret_key: str = "change-me-in-production"
    token_ttl_minutes: int = 24 * 60


class LedgerSettings(BaseSettings):
    """Daily ledger behaviour."""

    model_config = SettingsConfigDict(env_prefix="LEDGER_")

    history_days: int = 30


class CatalogSettings(BaseSettings):
    """Product and shop catalog.

    Values may be overridden with JSON in the environment, e.g.
    CATALOG_SHOPS='{"SHOP_47": "Shop 47"}'.
    """

    model_config = SettingsConfigDict(env_prefix="CATALOG_")

    products: dict[str, str] = {
        "KK_KENYA_LAMB": "KK (Kenya Lamb)",
        "KENYA_BAKRA_GOAT": "Kenya Bakra (Goat)",
        "BEEF_DASTI_SHOULDER": "Beef Dasti (Shoulder)",
        "BEEF_RAAN_LEG": "Beef Raan (Leg)",
        "AFQ_AFRICA_LAMB": "AFQ (Africa Lamb)",
        "MAHALI_LOCAL_LAMB": "Mahali (Local Lamb)",
        "AUSTRALIAN_LAMB": "Australian Lamb",
        "KAZAKHSTAN_LAMB": "Kazakhstan Lamb",
    }
    shops: dict[str, str] = {
        "SHOP_47": "Shop 47",
        "SHOP_43": "Shop 43",
        "SHOP_59": "Shop 59",
    }
    parts_categories: list[str] = ["BEEF PARTS", "MUTTON PARTS"]


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Store Ledger"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sub-settings
    storage: StorageSettings = Field(default_factory=StorageSettings)
    api: APISettings = Field(default_factory=APISettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    ledger: LedgerSettings = Field(default_factory=LedgerSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)

    @field_validator("storage", mode="before")
    @classmethod
    def ensure_data_dir(cls, v: Any) -> StorageSettings:
        if isinstance(v, dict):
            settings = StorageSettings(**v)
        else:
            settings = v or StorageSettings()
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        return settings


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
