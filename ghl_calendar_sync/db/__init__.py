"""
SQLAlchemy models for the local calendar mirror.

This module provides a common entry point for all models.
"""

from .db_account_models import AccountDetails
from .db_base import TimestampMixin, UUIDMixin, utc_now
from .db_booking_models import BookedSlotEvent
from .db_calendar_models import CalendarRecord, OpenHoursEntry, TeamMemberAssignment
from .db_config import (
    Base,
    IN_MEMORY_URL,
    DatabaseConfig,
    DatabaseManager,
    import_all_models,
    init_db,
)
from .db_credential_models import AccountCredential

__all__ = [
    # Base definitions
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "utc_now",
    # Configuration
    "DatabaseConfig",
    "DatabaseManager",
    "IN_MEMORY_URL",
    "import_all_models",
    "init_db",
    # Models
    "AccountCredential",
    "AccountDetails",
    "BookedSlotEvent",
    "CalendarRecord",
    "OpenHoursEntry",
    "TeamMemberAssignment",
]
