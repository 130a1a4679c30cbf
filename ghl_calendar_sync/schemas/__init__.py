"""Pydantic schemas for remote payloads, stored rows and results."""

from .booking_schemas import BookedSlotData, RemoteEvent
from .calendar_schemas import (
    CalendarRecordData,
    CalendarSummary,
    OpenHoursData,
    RemoteCalendar,
    RemoteHourBlock,
    RemoteOpenHours,
    RemoteTeamMember,
    TeamMemberData,
)
from .credential_schemas import (
    AccountCredentialCreate,
    OAuthTokenResponse,
    RefreshedToken,
    RefreshResult,
)
from .sync_result import SyncResult, SyncStatus

__all__ = [
    "AccountCredentialCreate",
    "BookedSlotData",
    "CalendarRecordData",
    "CalendarSummary",
    "OAuthTokenResponse",
    "OpenHoursData",
    "RefreshedToken",
    "RefreshResult",
    "RemoteCalendar",
    "RemoteEvent",
    "RemoteHourBlock",
    "RemoteOpenHours",
    "RemoteTeamMember",
    "SyncResult",
    "SyncStatus",
    "TeamMemberData",
]
