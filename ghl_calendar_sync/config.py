"""
Centralized configuration management for the calendar sync engine.

Configuration is read from environment variables and validated with
Pydantic. A single global AppConfig is created lazily and can be replaced
in tests with set_config().
"""

import os
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from .constants import (
    DEFAULT_API_BASE_URL,
    DEFAULT_API_VERSION,
    DEFAULT_OAUTH_URL,
    UTC_ZONE,
    EnvironmentVariable,
    Limits,
    LogLevel,
    Timeouts,
)


class GHLApiConfig(BaseModel):
    """Remote CRM API configuration."""

    base_url: str = Field(
        default_factory=lambda: os.getenv(
            EnvironmentVariable.GHL_API_BASE_URL.value, DEFAULT_API_BASE_URL
        ),
        description="Base URL of the LeadConnector API",
    )
    api_version: str = Field(
        default_factory=lambda: os.getenv(
            EnvironmentVariable.GHL_API_VERSION.value, DEFAULT_API_VERSION
        ),
        description="Value of the Version header",
    )
    oauth_url: str = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.GHL_OAUTH_URL.value, DEFAULT_OAUTH_URL),
        description="OAuth token endpoint",
    )
    client_id: str = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.GHL_CLIENT_ID.value, ""),
        description="OAuth client id",
    )
    client_secret: str = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.GHL_CLIENT_SECRET.value, ""),
        description="OAuth client secret",
    )
    app_name: str = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.GHL_APP_NAME.value, "Calendar Sync"),
        description="Application name, used to label custom fields",
    )
    timeout: int = Field(
        default_factory=lambda: int(
            os.getenv(EnvironmentVariable.GHL_TIMEOUT.value, str(Timeouts.EXTERNAL_API_CALL))
        ),
        description="Request timeout in seconds",
    )
    max_retries: int = Field(
        default_factory=lambda: int(
            os.getenv(EnvironmentVariable.GHL_MAX_RETRIES.value, str(Limits.MAX_RETRY_ATTEMPTS))
        ),
        description="Maximum retries for idempotent remote calls",
    )
    backoff_factor: float = Field(
        default=Limits.RETRY_BACKOFF_FACTOR, description="Exponential backoff factor (seconds)"
    )

    @field_validator("base_url", "oauth_url")
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize URLs so paths can be appended with a leading slash."""
        return v.rstrip("/")


class DatabaseSettings(BaseModel):
    """Database connection settings."""

    connection_string: str = Field(
        default_factory=lambda: os.getenv(
            EnvironmentVariable.DATABASE_URL.value, "sqlite:///./ghl_calendar_sync.db"
        ),
        description="Database connection string",
    )
    echo: bool = Field(default=False, description="Echo SQL statements")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.LOG_LEVEL.value, LogLevel.INFO.value),
        description="Logging level",
    )
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string",
    )

    @field_validator("level")
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = {level.value for level in LogLevel}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()


class SyncConfig(BaseModel):
    """Behavior of the calendar and booking synchronizers."""

    default_timezone: str = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.DEFAULT_TIMEZONE.value, UTC_ZONE),
        description="Timezone used when a location has no stored timezone",
    )
    booking_window_years: int = Field(
        default=1, ge=1, description="Calendar years of future events to fetch"
    )
    preserve_always_active: bool = Field(
        default=False,
        description="Store every synced calendar as active regardless of the remote flag",
    )


class AppConfig(BaseModel):
    """Main application configuration."""

    environment: str = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.APP_ENV.value, "development"),
        description="Application environment",
    )
    debug: bool = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.DEBUG.value, "false").lower()
        == "true",
        description="Debug mode",
    )

    ghl: GHLApiConfig = Field(default_factory=GHLApiConfig, description="Remote API configuration")
    database: DatabaseSettings = Field(
        default_factory=DatabaseSettings, description="Database configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    sync: SyncConfig = Field(default_factory=SyncConfig, description="Sync behavior")

    custom: Dict[str, Any] = Field(default_factory=dict, description="Custom configuration values")

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create configuration from environment variables."""
        return cls()

    def get_custom(self, key: str, default: Any = None) -> Any:
        """Get a custom configuration value."""
        return self.custom.get(key, default)


# Global configuration instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def set_config(config: AppConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset the global configuration instance."""
    global _config
    _config = None
