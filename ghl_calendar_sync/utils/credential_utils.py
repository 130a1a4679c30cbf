"""
Credential utilities using the generic CRUD helpers.

One AccountCredential exists per (account id, account kind). Storing a
credential for a pair that already has one updates that row in place.
"""

from typing import Optional

from sqlalchemy.orm import Session

from ..constants import AccountKind
from ..db.db_credential_models import AccountCredential
from ..schemas.credential_schemas import AccountCredentialCreate, OAuthTokenResponse
from .crud_helpers import create_record, get_record, update_record
from .logger import get_logger


def get_credential(
    session: Session, account_id: str, account_kind: Optional[AccountKind] = None
) -> Optional[AccountCredential]:
    """
    Get the credential for an account.

    Args:
        session: Database session
        account_id: Location or company id
        account_kind: Narrow the lookup to one kind; any kind when None

    Returns:
        The credential row or None
    """
    filters = {"account_id": account_id}
    if account_kind is not None:
        filters["account_kind"] = AccountKind(account_kind).value
    return get_record(session, AccountCredential, filters)


def store_credential(session: Session, credential_create: AccountCredentialCreate) -> str:
    """
    Create or replace the credential for (account id, account kind).

    Returns:
        Credential row id
    """
    values = {
        "access_token": credential_create.access_token,
        "refresh_token": credential_create.refresh_token,
        "expires_in": credential_create.expires_in,
        "company_id": credential_create.company_id,
        "user_type": credential_create.user_type,
        "scope": credential_create.scope,
    }

    existing = get_credential(session, credential_create.account_id, credential_create.account_kind)
    if existing:
        updated = update_record(session, AccountCredential, existing.id, values)
        credential_id = updated.id
    else:
        values["account_id"] = credential_create.account_id
        values["account_kind"] = credential_create.account_kind.value
        credential_id = create_record(session, AccountCredential, values).id

    get_logger().info(
        "Credential stored",
        extra={
            "account_id": credential_create.account_id,
            "account_kind": credential_create.account_kind.value,
            "credential_id": credential_id,
            "replaced": existing is not None,
        },
    )
    return credential_id


def apply_token_response(
    session: Session, credential: AccountCredential, response: OAuthTokenResponse
) -> AccountCredential:
    """
    Write a refreshed token into an existing credential row.

    The refresh token is kept when the response does not rotate it.
    """
    return update_record(
        session,
        AccountCredential,
        credential.id,
        {
            "access_token": response.access_token,
            "refresh_token": response.refresh_token or credential.refresh_token,
            "expires_in": response.expires_in,
            "scope": response.scope or credential.scope,
        },
    )
