"""
Constants and enums for the calendar sync engine.

Centralizes magic strings used for account kinds, remote duration units,
environment variable names and numeric limits.
"""

from enum import Enum


class AccountKind(str, Enum):
    """Kind of tenant account a credential belongs to."""

    LOCATION = "Location"
    COMPANY = "Company"


class DurationUnit(str, Enum):
    """Duration units used by the remote calendar API."""

    MINUTES = "mins"
    HOURS = "hours"
    DAYS = "days"


class OAuthGrantType(str, Enum):
    """OAuth grant types accepted by the token endpoint."""

    AUTHORIZATION_CODE = "authorization_code"
    REFRESH_TOKEN = "refresh_token"


class LogLevel(str, Enum):
    """Standard logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class EnvironmentVariable(str, Enum):
    """Standard environment variable names."""

    DATABASE_URL = "DATABASE_URL"
    APP_ENV = "APP_ENV"
    LOG_LEVEL = "LOG_LEVEL"
    DEBUG = "DEBUG"
    GHL_API_BASE_URL = "GHL_API_BASE_URL"
    GHL_API_VERSION = "GHL_API_VERSION"
    GHL_OAUTH_URL = "GHL_OAUTH_URL"
    GHL_CLIENT_ID = "GHL_CLIENT_ID"
    GHL_CLIENT_SECRET = "GHL_CLIENT_SECRET"
    GHL_APP_NAME = "GHL_APP_NAME"
    GHL_TIMEOUT = "GHL_TIMEOUT"
    GHL_MAX_RETRIES = "GHL_MAX_RETRIES"
    DEFAULT_TIMEZONE = "DEFAULT_TIMEZONE"


UTC_ZONE = "UTC"
DEFAULT_API_VERSION = "2021-07-28"
DEFAULT_API_BASE_URL = "https://services.leadconnectorhq.com"
DEFAULT_OAUTH_URL = "https://services.leadconnectorhq.com/oauth/token"


class Timeouts:
    """Timeout values in seconds."""

    EXTERNAL_API_CALL = 30


class Limits:
    """Retry limits for remote calls."""

    MAX_RETRY_ATTEMPTS = 3
    RETRY_BACKOFF_FACTOR = 0.5
    RETRY_STATUS_CODES = (429, 500, 502, 503, 504)
