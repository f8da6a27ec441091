"""Centralized configuration management using pydantic-settings.

Configuration is loaded from environment variables with sensible defaults.
All settings can be overridden via environment variables or a .env file.
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fx_bank.domain.rounding import RoundingMode, resolve_rounding


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Log level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class RateStoreType(str, Enum):
    """Supported rate store backends."""

    MEMORY = "memory"
    HISTORICAL = "historical"
    SQLITE = "sqlite"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Override via environment variables (prefixed with FXB_) or .env file.

    Examples:
        FXB_RATE_STORE_TYPE=sqlite
        FXB_SQLITE_PATH=/var/lib/fx/rates.db
        FXB_DEFAULT_ROUNDING=half_even
        FXB_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="FXB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "fx-bank"
    app_version: str = "0.1.0"
    environment: Environment = Environment.DEVELOPMENT

    # Rate storage
    rate_store_type: RateStoreType = RateStoreType.MEMORY
    sqlite_path: Path = Field(
        default=Path("fx_rates.db"),
        description="SQLite database file path (when rate_store_type=sqlite)",
    )

    # Arithmetic
    default_rounding: RoundingMode | None = Field(
        default=None,
        description="Rounding applied to every conversion unless overridden per call",
    )
    decimal_precision: int = Field(
        default=50,
        ge=28,
        le=1000,
        description="Significant digits used for conversion arithmetic",
    )

    # Logging
    log_level: LogLevel = LogLevel.INFO
    log_format: Literal["json", "console"] = Field(
        default="console",
        description="Log output format: 'json' for production, 'console' for development",
    )
    log_file: Path | None = Field(default=None, description="Optional log file path")

    @field_validator("log_format", mode="before")
    @classmethod
    def set_log_format_from_environment(cls, v: str, info) -> str:
        """Default to JSON logging in production."""
        if v is None:
            env = info.data.get("environment")
            if env == Environment.PRODUCTION:
                return "json"
        return v or "console"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PRODUCTION

    @field_validator("default_rounding", mode="before")
    @classmethod
    def parse_rounding_name(cls, v: object) -> object:
        """Accept mode names in any case, e.g. HALF_EVEN or half_even."""
        if isinstance(v, str):
            return resolve_rounding(v) if v.strip() else None
        return v

    @field_validator("sqlite_path", mode="after")
    @classmethod
    def expand_sqlite_path(cls, v: Path) -> Path:
        return v.expanduser()


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Call get_settings.cache_clear() to reload settings.
    """
    return Settings()
