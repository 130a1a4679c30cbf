"""
Result object returned by every sync and pass-through entry point.

Entry points never raise past their boundary; they return a SyncResult whose
``success`` flag and ``error_code`` say what happened. Partial success
(``success=True`` with some records skipped) is represented by the
PARTIAL_SUCCESS status.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from ..exceptions import BaseError


class SyncStatus(str, Enum):
    """Status of a sync operation."""

    SUCCESS = "success"
    FAILURE = "failure"
    PARTIAL_SUCCESS = "partial_success"


class SyncResult(BaseModel):
    """Outcome of one sync or pass-through call."""

    status: SyncStatus
    success: bool
    message: Optional[str] = None
    error_code: Optional[str] = None
    details: Optional[Any] = None

    saved_id: Optional[str] = Field(default=None, description="Local id of the calendar row")
    open_hours_ids: List[str] = Field(default_factory=list)
    team_member_ids: List[str] = Field(default_factory=list)

    events: List[Any] = Field(
        default_factory=list, description="Every remote event fetched, persisted or not"
    )
    persisted_ids: List[str] = Field(default_factory=list)
    failed_record_ids: List[str] = Field(default_factory=list)

    data: Optional[Any] = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def success_result(cls, **kwargs) -> "SyncResult":
        failed = kwargs.get("failed_record_ids") or []
        status = SyncStatus.PARTIAL_SUCCESS if failed else SyncStatus.SUCCESS
        return cls(status=status, success=True, **kwargs)

    @classmethod
    def failure_result(
        cls,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Any] = None,
        **kwargs,
    ) -> "SyncResult":
        return cls(
            status=SyncStatus.FAILURE,
            success=False,
            message=message,
            error_code=error_code,
            details=details,
            **kwargs,
        )

    @classmethod
    def from_error(cls, error: BaseError, **kwargs) -> "SyncResult":
        """Build a failure result from a domain error, keeping its code and context."""
        return cls.failure_result(
            message=error.message,
            error_code=error.error_code.name,
            details=error.to_dict(include_cause=True),
            **kwargs,
        )

    @property
    def is_partial(self) -> bool:
        return self.status == SyncStatus.PARTIAL_SUCCESS
