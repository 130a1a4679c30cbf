"""
Calendar models: the calendar row and its open-hours and team-member children.

Children reference the calendar by its local surrogate id. Composite unique
constraints make (calendar, day) and (calendar, user) the natural keys the
synchronizer reconciles on.
"""

from sqlalchemy import Boolean, Column, Float, ForeignKey, Integer, String, UniqueConstraint

from .db_base import TimestampMixin, UUIDMixin
from .db_config import Base


class CalendarRecord(Base, UUIDMixin, TimestampMixin):
    """Local mirror of one remote calendar's configuration."""

    __tablename__ = "calendar_records"

    ghl_calendar_id = Column(String(100), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=True)

    # Durations, all in seconds
    slot_interval = Column(Integer, nullable=False, default=0)
    slot_duration = Column(Integer, nullable=False, default=0)
    pre_buffer_time = Column(Integer, nullable=False, default=0)
    allow_booking_after = Column(Integer, nullable=False, default=0)
    allow_booking_for = Column(Integer, nullable=False, default=0)

    is_active = Column(Boolean, nullable=False, default=True)
    group_id = Column(String(100), nullable=True)
    slug = Column(String(255), nullable=True)
    appointments_per_slot = Column(Integer, nullable=False, default=0)
    appointments_per_day = Column(Integer, nullable=False, default=0)
    allow_cancellation = Column(Boolean, nullable=True)
    allow_reschedule = Column(Boolean, nullable=True)
    ghl_location_id = Column(String(100), nullable=True, index=True)


class OpenHoursEntry(Base, UUIDMixin, TimestampMixin):
    """Weekly availability window for a calendar, stored in UTC."""

    __tablename__ = "calendar_open_hours"

    calendar_id = Column(
        String(36), ForeignKey("calendar_records.id", ondelete="CASCADE"), nullable=False
    )
    day_of_week = Column(Integer, nullable=False)
    open_hour = Column(Integer, nullable=False)
    open_minute = Column(Integer, nullable=False)
    close_hour = Column(Integer, nullable=False)
    close_minute = Column(Integer, nullable=False)
    ghl_calendar_id = Column(String(100), nullable=True)

    __table_args__ = (
        UniqueConstraint("calendar_id", "day_of_week", name="uq_open_hours_calendar_day"),
    )


class TeamMemberAssignment(Base, UUIDMixin, TimestampMixin):
    """Remote user assigned to a calendar."""

    __tablename__ = "calendar_team_members"

    calendar_id = Column(
        String(36), ForeignKey("calendar_records.id", ondelete="CASCADE"), nullable=False
    )
    user_id = Column(String(100), nullable=False)
    priority = Column(Float, nullable=True)
    is_primary = Column(Boolean, nullable=True)
    ghl_calendar_id = Column(String(100), nullable=True)

    __table_args__ = (
        UniqueConstraint("calendar_id", "user_id", name="uq_team_member_calendar_user"),
    )
