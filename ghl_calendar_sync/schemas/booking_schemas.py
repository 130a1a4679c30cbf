"""
Pydantic schemas for remote calendar events and booked-slot rows.
"""

from typing import Any, Optional, Union

from pydantic import BaseModel, Field

from ..utils.time_utils import to_epoch_seconds
from .calendar_schemas import RemoteModel

Timestamp = Union[str, int, float, None]


class RemoteEvent(RemoteModel):
    """Event object from ``GET /calendars/events``."""

    id: str
    appointment_status: Optional[str] = Field(default=None, alias="appointmentStatus")
    location_id: Optional[str] = Field(default=None, alias="locationId")
    assigned_user_id: Optional[str] = Field(default=None, alias="assignedUserId")
    calendar_id: Optional[str] = Field(default=None, alias="calendarId")
    start_time: Timestamp = Field(default=None, alias="startTime")
    end_time: Timestamp = Field(default=None, alias="endTime")


class BookedSlotData(BaseModel):
    """Column values for one BookedSlotEvent row."""

    ghl_event_id: str
    appointment_status: Optional[str] = None
    ghl_location_id: Optional[str] = None
    ghl_assigned_user_id: Optional[str] = None
    ghl_calendar_id: Optional[str] = None
    start_time: Optional[int] = None
    end_time: Optional[int] = None

    @classmethod
    def from_remote(cls, event: RemoteEvent) -> "BookedSlotData":
        return cls(
            ghl_event_id=event.id,
            appointment_status=event.appointment_status,
            ghl_location_id=event.location_id,
            ghl_assigned_user_id=event.assigned_user_id,
            ghl_calendar_id=event.calendar_id,
            start_time=to_epoch_seconds(event.start_time),
            end_time=to_epoch_seconds(event.end_time),
        )


def event_id_of(raw_event: Any) -> Optional[str]:
    """Best-effort id of a raw event payload, for log context."""
    if isinstance(raw_event, dict) and raw_event.get("id") is not None:
        return str(raw_event["id"])
    return None
