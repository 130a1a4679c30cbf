"""
Pydantic schemas for remote calendar payloads and the rows built from them.

Remote models accept the API's camelCase keys (including its
``appoinmentPerSlot`` spelling), ignore unknown keys, and leave every field
optional because the API omits fields freely. Child collections stay raw on
RemoteCalendar and are validated one record at a time by the synchronizer,
so a single malformed block or member never rejects the whole calendar.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..utils.time_utils import normalize_duration


class RemoteModel(BaseModel):
    """Base for payloads received from the remote API."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class RemoteHourBlock(RemoteModel):
    open_hour: int = Field(default=0, alias="openHour")
    open_minute: int = Field(default=0, alias="openMinute")
    close_hour: int = Field(default=0, alias="closeHour")
    close_minute: int = Field(default=0, alias="closeMinute")


class RemoteOpenHours(RemoteModel):
    days_of_the_week: List[Any] = Field(default_factory=list, alias="daysOfTheWeek")
    hours: List[Any] = Field(default_factory=list)


class RemoteTeamMember(RemoteModel):
    user_id: Optional[str] = Field(default=None, alias="userId")
    priority: Optional[float] = None
    is_primary: Optional[bool] = Field(default=None, alias="isPrimary")


class RemoteCalendar(RemoteModel):
    """Calendar object returned by ``GET /calendars/{id}``."""

    id: str
    name: Optional[str] = None
    location_id: Optional[str] = Field(default=None, alias="locationId")
    group_id: Optional[str] = Field(default=None, alias="groupId")
    slug: Optional[str] = None
    is_active: Optional[bool] = Field(default=None, alias="isActive")

    slot_interval: Optional[float] = Field(default=None, alias="slotInterval")
    slot_interval_unit: Optional[str] = Field(default=None, alias="slotIntervalUnit")
    slot_duration: Optional[float] = Field(default=None, alias="slotDuration")
    slot_duration_unit: Optional[str] = Field(default=None, alias="slotDurationUnit")
    pre_buffer: Optional[float] = Field(default=None, alias="preBuffer")
    pre_buffer_unit: Optional[str] = Field(default=None, alias="preBufferUnit")
    allow_booking_after: Optional[float] = Field(default=None, alias="allowBookingAfter")
    allow_booking_after_unit: Optional[str] = Field(default=None, alias="allowBookingAfterUnit")
    allow_booking_for: Optional[float] = Field(default=None, alias="allowBookingFor")
    allow_booking_for_unit: Optional[str] = Field(default=None, alias="allowBookingForUnit")

    appointments_per_slot: Optional[int] = Field(default=None, alias="appoinmentPerSlot")
    appointments_per_day: Optional[int] = Field(default=None, alias="appoinmentPerDay")
    allow_cancellation: Optional[bool] = Field(default=None, alias="allowCancellation")
    allow_reschedule: Optional[bool] = Field(default=None, alias="allowReschedule")

    open_hours: Optional[List[Any]] = Field(default=None, alias="openHours")
    team_members: Optional[List[Any]] = Field(default=None, alias="teamMembers")


class CalendarRecordData(BaseModel):
    """Column values for one CalendarRecord row."""

    ghl_calendar_id: str
    name: Optional[str] = None
    slot_interval: int = 0
    slot_duration: int = 0
    pre_buffer_time: int = 0
    is_active: bool = True
    group_id: Optional[str] = None
    slug: Optional[str] = None
    appointments_per_slot: int = 0
    appointments_per_day: int = 0
    allow_booking_after: int = 0
    allow_cancellation: Optional[bool] = None
    allow_reschedule: Optional[bool] = None
    allow_booking_for: int = 0
    ghl_location_id: Optional[str] = None

    @classmethod
    def from_remote(
        cls, calendar: RemoteCalendar, always_active: bool = False
    ) -> "CalendarRecordData":
        """
        Build the row from a remote calendar, normalizing durations to seconds.

        ``is_active`` follows the remote flag and defaults to True only when
        the flag is absent; ``always_active`` forces True.
        """
        is_active = True if calendar.is_active is None else calendar.is_active
        return cls(
            ghl_calendar_id=calendar.id,
            name=calendar.name,
            slot_interval=normalize_duration(calendar.slot_interval, calendar.slot_interval_unit),
            slot_duration=normalize_duration(calendar.slot_duration, calendar.slot_duration_unit),
            pre_buffer_time=normalize_duration(calendar.pre_buffer, calendar.pre_buffer_unit),
            is_active=True if always_active else is_active,
            group_id=calendar.group_id,
            slug=calendar.slug,
            appointments_per_slot=calendar.appointments_per_slot or 0,
            appointments_per_day=calendar.appointments_per_day or 0,
            allow_booking_after=normalize_duration(
                calendar.allow_booking_after, calendar.allow_booking_after_unit
            ),
            allow_cancellation=calendar.allow_cancellation,
            allow_reschedule=calendar.allow_reschedule,
            allow_booking_for=normalize_duration(
                calendar.allow_booking_for, calendar.allow_booking_for_unit
            ),
            ghl_location_id=calendar.location_id,
        )


class OpenHoursData(BaseModel):
    """Column values for one OpenHoursEntry row, hours already in UTC."""

    calendar_id: str
    day_of_week: int = Field(ge=0, le=6)
    open_hour: int = Field(ge=0, le=24)
    open_minute: int = Field(ge=0, le=59)
    close_hour: int = Field(ge=0, le=24)
    close_minute: int = Field(ge=0, le=59)
    ghl_calendar_id: Optional[str] = None


class TeamMemberData(BaseModel):
    """Column values for one TeamMemberAssignment row."""

    calendar_id: str
    user_id: str
    priority: Optional[float] = None
    is_primary: Optional[bool] = None
    ghl_calendar_id: Optional[str] = None


class CalendarSummary(RemoteModel):
    """Entry of ``GET /calendars/`` used by the active-calendar listing."""

    id: str
    name: Optional[str] = None
    is_active: Optional[bool] = Field(default=None, alias="isActive")

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name}
