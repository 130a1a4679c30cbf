"""
Storage capability handed to every sync component.

SyncRepository wraps one SQLAlchemy session and exposes only the primitives
the sync engine needs: exact-match lookup, insert, update, plus the two
account lookups (credential and timezone). Tests build it on an in-memory
SQLite session; production code builds it on a DatabaseManager session.
"""

import logging
from typing import Any, Dict, List, Optional, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..constants import UTC_ZONE, AccountKind
from ..db.db_credential_models import AccountCredential
from ..exceptions import ErrorCode, RepositoryError
from ..utils.account_utils import get_account_timezone
from ..utils.credential_utils import get_credential
from ..utils.crud_helpers import (
    count_records,
    create_record,
    get_record,
    list_records,
    update_record,
)
from ..utils.logger import get_logger

T = TypeVar("T")


class SyncRepository:
    """Session-scoped storage primitives for the sync engine."""

    def __init__(self, session: Session, logger: Optional[logging.Logger] = None):
        self.session = session
        self.logger = logger or get_logger()

    def find_one(self, model_class: Type[T], lookup: Dict[str, Any]) -> Optional[T]:
        """
        Exact-match lookup on every column in ``lookup``.

        Raises:
            RepositoryError: If more than one row matches; lookups are always
                on a unique key, so this means the store is inconsistent.
        """
        matches = list_records(self.session, model_class, lookup, limit=2)
        if len(matches) > 1:
            raise RepositoryError(
                f"Lookup on {model_class.__name__} is not unique",
                error_code=ErrorCode.DUPLICATE,
                status_code=409,
                model=model_class.__name__,
                lookup=lookup,
            )
        return matches[0] if matches else None

    def insert_row(self, model_class: Type[T], record: Dict[str, Any]) -> str:
        """Insert a row and return its id."""
        return create_record(self.session, model_class, record).id  # type: ignore[attr-defined]

    def update_row(self, model_class: Type[T], record_id: str, record: Dict[str, Any]) -> str:
        """Overwrite the given columns of an existing row and return its id."""
        return update_record(self.session, model_class, record_id, record).id  # type: ignore[attr-defined]

    def get(self, model_class: Type[T], record_id: str) -> Optional[T]:
        return get_record(self.session, model_class, {"id": record_id})

    def list(self, model_class: Type[T], filters: Optional[Dict[str, Any]] = None) -> List[T]:
        return list_records(self.session, model_class, filters)

    def count(self, model_class: Type[T], filters: Optional[Dict[str, Any]] = None) -> int:
        return count_records(self.session, model_class, filters)

    def get_credential(
        self, account_id: str, account_kind: Optional[AccountKind] = None
    ) -> Optional[AccountCredential]:
        return get_credential(self.session, account_id, account_kind)

    def get_account_timezone(self, ghl_id: str, default: str = UTC_ZONE) -> str:
        """
        Stored timezone of a location or company, or default when unknown.

        Raises:
            RepositoryError: If the profile lookup fails
        """
        try:
            return get_account_timezone(self.session, ghl_id, default)
        except SQLAlchemyError as e:
            self.session.rollback()
            raise RepositoryError(
                f"Failed to read timezone for '{ghl_id}'",
                error_code=ErrorCode.DATABASE_ERROR,
                cause=e,
                ghl_id=ghl_id,
            )
