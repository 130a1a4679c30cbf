"""
Booked slot model, a flat copy of remote calendar events.
"""

from sqlalchemy import BigInteger, Column, String

from .db_base import TimestampMixin, UUIDMixin
from .db_config import Base


class BookedSlotEvent(Base, UUIDMixin, TimestampMixin):
    """One booked event; start/end are UTC epoch seconds."""

    __tablename__ = "calendar_booked_slots"

    ghl_event_id = Column(String(100), nullable=False, unique=True, index=True)
    appointment_status = Column(String(50), nullable=True)
    ghl_location_id = Column(String(100), nullable=True)
    ghl_assigned_user_id = Column(String(100), nullable=True)
    ghl_calendar_id = Column(String(100), nullable=True, index=True)
    start_time = Column(BigInteger, nullable=True)
    end_time = Column(BigInteger, nullable=True)
