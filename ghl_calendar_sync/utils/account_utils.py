"""
Account details utilities: profile storage and timezone lookup.
"""

from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from ..constants import UTC_ZONE
from ..db.db_account_models import AccountDetails
from .crud_helpers import create_record, get_record, update_record


def get_account_timezone(session: Session, ghl_id: str, default: str = UTC_ZONE) -> str:
    """Stored timezone of a location or company, or default when unknown."""
    details = get_record(session, AccountDetails, {"ghl_id": ghl_id})
    if details is None or not details.timezone:
        return default
    return details.timezone


def store_account_details(
    session: Session,
    ghl_id: str,
    values: Dict[str, Any],
    account_kind: Optional[str] = None,
) -> str:
    """Create or update the profile row for ghl_id; returns its id."""
    data = {k: v for k, v in values.items() if k in ("name", "email", "timezone")}
    if account_kind is not None:
        data["account_kind"] = account_kind

    existing = get_record(session, AccountDetails, {"ghl_id": ghl_id})
    if existing:
        return update_record(session, AccountDetails, existing.id, data).id

    data["ghl_id"] = ghl_id
    return create_record(session, AccountDetails, data).id
