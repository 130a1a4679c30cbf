"""
Credential model for tenant accounts.

Just the data structure - staleness and refresh live in the token service.
"""

from sqlalchemy import Column, Index, Integer, String, Text

from ..constants import AccountKind
from .db_base import TimestampMixin, UUIDMixin
from .db_config import Base


class AccountCredential(Base, UUIDMixin, TimestampMixin):
    """One OAuth credential per (account id, account kind); updated_at is the issue time."""

    __tablename__ = "account_credentials"

    account_id = Column(String(100), nullable=False, index=True)
    account_kind = Column(String(20), nullable=False, default=AccountKind.LOCATION.value)
    company_id = Column(String(100), nullable=True)
    user_type = Column(String(20), nullable=True)

    access_token = Column(Text, nullable=False)
    refresh_token = Column(Text, nullable=True)
    expires_in = Column(Integer, nullable=False, default=0)
    scope = Column(Text, nullable=True)

    __table_args__ = (
        Index("ix_account_credential_lookup", "account_id", "account_kind", unique=True),
    )
