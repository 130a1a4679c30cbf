"""Utility modules for the calendar sync engine."""

# Logging utilities
from .logger import (
    AccountContextFilter,
    ContextAwareLogger,
    configure_logging,
    get_logger,
)

# Generic CRUD helpers
from .crud_helpers import (
    count_records,
    create_record,
    get_record,
    get_record_by_id,
    list_records,
    update_record,
)

# Time normalization
from .time_utils import (
    booking_window,
    normalize_duration,
    resolve_timezone,
    seconds_since,
    to_epoch_millis,
    to_epoch_seconds,
    wall_clock_to_utc,
)

# Business logic utilities
from .account_utils import get_account_timezone, store_account_details
from .credential_utils import apply_token_response, get_credential, store_credential

__all__ = [
    # Logging utilities
    "AccountContextFilter",
    "ContextAwareLogger",
    "configure_logging",
    "get_logger",
    # Generic CRUD helpers
    "count_records",
    "create_record",
    "get_record",
    "get_record_by_id",
    "list_records",
    "update_record",
    # Time normalization
    "booking_window",
    "normalize_duration",
    "resolve_timezone",
    "seconds_since",
    "to_epoch_millis",
    "to_epoch_seconds",
    "wall_clock_to_utc",
    # Business logic utilities
    "apply_token_response",
    "get_account_timezone",
    "get_credential",
    "store_account_details",
    "store_credential",
]
