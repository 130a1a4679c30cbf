"""
Account details model, the local copy of a location's or company's profile.
"""

from sqlalchemy import Column, String

from ..constants import UTC_ZONE
from .db_base import TimestampMixin, UUIDMixin
from .db_config import Base


class AccountDetails(Base, UUIDMixin, TimestampMixin):
    """Profile data for a tenant account; the timezone drives open-hours conversion."""

    __tablename__ = "account_details"

    ghl_id = Column(String(100), nullable=False, unique=True, index=True)
    account_kind = Column(String(20), nullable=True)
    name = Column(String(200), nullable=True)
    email = Column(String(200), nullable=True)
    timezone = Column(String(64), nullable=True, default=UTC_ZONE)
