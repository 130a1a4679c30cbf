"""
Exception hierarchy for the calendar sync engine.

Every error carries an ErrorCode, an HTTP-style status code and a context
dictionary, and logs itself on construction so callers only decide whether
to propagate or convert it into a result object.
"""

import threading
import traceback
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

_thread_local = threading.local()


class ErrorCode(str, Enum):
    """Standardized error codes."""

    # System errors (1xxx)
    INTERNAL_ERROR = "1000"
    DATABASE_ERROR = "1001"
    CONNECTION_ERROR = "1002"
    CONFIGURATION_ERROR = "1003"
    TIMEOUT_ERROR = "1004"

    # Validation errors (2xxx)
    VALIDATION_FAILED = "2000"
    INVALID_FORMAT = "2001"
    MISSING_REQUIRED = "2002"

    # Resource errors (3xxx)
    NOT_FOUND = "3000"
    DUPLICATE = "3001"
    EXPIRED = "3004"

    # Sync errors (4xxx)
    TOKEN_UNAVAILABLE = "4100"
    REMOTE_CALENDAR_NOT_FOUND = "4101"
    CALENDAR_PERSIST_FAILED = "4102"
    PERSIST_FAILED = "4103"

    # External service errors (5xxx)
    EXTERNAL_API_ERROR = "5002"
    REMOTE_FETCH_FAILED = "5005"


class BaseError(Exception):
    """Base exception with context, error codes, logging, and error chaining."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        status_code: int = 500,
        cause: Optional[Exception] = None,
        **context: Any,
    ):
        """
        Initialize base error with rich context.

        Args:
            message: Human-readable error message
            error_code: Standardized error code from ErrorCode enum
            status_code: HTTP status code for API responses
            cause: Original exception that caused this error
            **context: Additional context information
        """
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc).isoformat()
        self.error_id = str(uuid.uuid4())
        self.context = context

        correlation_id = get_correlation_id()
        if correlation_id:
            self.context["correlation_id"] = correlation_id

        self.context["error_id"] = self.error_id

        if cause:
            self.context["cause"] = {
                "type": type(cause).__name__,
                "message": str(cause),
                "traceback": traceback.format_exception(type(cause), cause, cause.__traceback__),
            }

        self._log_error()
        super().__init__(message)

    def _log_error(self) -> None:
        """Log error with a level chosen from the status code."""
        # Lazy import, the logger module imports this one indirectly
        from .utils.logger import get_logger

        logger = get_logger()

        log_data = {
            "error_id": self.error_id,
            "error_code": self.error_code.value,
            "status_code": self.status_code,
            "error_message": self.message,
            "context": {k: v for k, v in self.context.items() if k not in ["cause", "traceback"]},
        }

        if self.status_code >= 500:
            logger.error(f"Error {self.error_code.name}: {self.message}", extra=log_data)
        elif self.status_code >= 400:
            logger.warning(f"Client error {self.error_code.name}: {self.message}", extra=log_data)
        else:
            logger.info(f"Error {self.error_code.name}: {self.message}", extra=log_data)

    def to_dict(self, include_cause: bool = False) -> Dict[str, Any]:
        """
        Convert to dict for result payloads.

        Args:
            include_cause: Include cause type and message

        Returns:
            Dictionary representation suitable for JSON serialization
        """
        result: Dict[str, Any] = {
            "id": self.error_id,
            "code": self.error_code.value,
            "name": self.error_code.name,
            "message": self.message,
            "timestamp": self.timestamp,
            "context": {
                k: v
                for k, v in self.context.items()
                if k not in ["cause", "error_id", "correlation_id"]
            },
        }

        if "correlation_id" in self.context:
            result["correlation_id"] = self.context["correlation_id"]

        if include_cause and "cause" in self.context:
            result["cause"] = {
                "type": self.context["cause"]["type"],
                "message": self.context["cause"]["message"],
            }

        return result

    @property
    def error_chain(self) -> List[Exception]:
        """Get the full chain of errors."""
        chain: List[Exception] = [self]
        current = self.cause
        while current:
            chain.append(current)
            current = getattr(current, "cause", None)
        return chain


class RepositoryError(BaseError):
    """Storage layer errors."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.DATABASE_ERROR,
        status_code: int = 500,
        cause: Optional[Exception] = None,
        **context,
    ):
        super().__init__(message, error_code, status_code, cause, **context)


class ServiceError(BaseError):
    """Service layer errors."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        operation: Optional[str] = None,
        cause: Optional[Exception] = None,
        **context,
    ):
        if operation:
            context["operation"] = operation
        super().__init__(message, error_code, 500, cause, **context)


class ValidationError(BaseError):
    """Validation errors."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.VALIDATION_FAILED,
        cause: Optional[Exception] = None,
        **context,
    ):
        if field:
            context["field"] = field
        super().__init__(message, error_code, 400, cause, **context)


class ExternalServiceError(BaseError):
    """Errors raised while talking to the remote CRM platform."""

    def __init__(
        self,
        message: str,
        service_name: str = "leadconnector",
        error_code: ErrorCode = ErrorCode.EXTERNAL_API_ERROR,
        cause: Optional[Exception] = None,
        **context,
    ):
        context["service_name"] = service_name
        super().__init__(message, error_code, 502, cause, **context)


def not_found(
    resource_type: str, cause: Optional[Exception] = None, **identifiers
) -> RepositoryError:
    """
    Factory for not found errors.

    Args:
        resource_type: Type of resource (e.g., 'CalendarRecord')
        cause: Original exception if any
        **identifiers: Resource identifiers (e.g., record_id='123')

    Returns:
        Configured RepositoryError instance with 404 status
    """
    id_parts = [f"{k}={v}" for k, v in identifiers.items()]
    message = f"{resource_type} not found"
    if id_parts:
        message += f": {', '.join(id_parts)}"

    return RepositoryError(
        message,
        error_code=ErrorCode.NOT_FOUND,
        status_code=404,
        cause=cause,
        resource_type=resource_type,
        **identifiers,
    )


# Correlation ID management
def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID for the current thread."""
    _thread_local.correlation_id = correlation_id


def get_correlation_id() -> Optional[str]:
    """Get the current thread's correlation ID."""
    return getattr(_thread_local, "correlation_id", None)


def clear_correlation_id() -> None:
    """Clear the current thread's correlation ID."""
    if hasattr(_thread_local, "correlation_id"):
        delattr(_thread_local, "correlation_id")


# ==================== TOKEN LIFECYCLE EXCEPTIONS ====================


class CredentialNotFoundError(BaseError):
    """Raised when no credential row exists for an account."""

    def __init__(self, message: str = "Credential not found", **kwargs):
        super().__init__(message=message, error_code=ErrorCode.NOT_FOUND, status_code=404, **kwargs)


class TokenUnavailableError(BaseError):
    """Raised when no usable access token can be produced for an account."""

    def __init__(self, message: str = "No usable access token", **kwargs):
        super().__init__(
            message=message, error_code=ErrorCode.TOKEN_UNAVAILABLE, status_code=401, **kwargs
        )


# ==================== SYNC EXCEPTIONS ====================


class RemoteCalendarNotFoundError(BaseError):
    """Raised when the remote API returns no calendar payload."""

    def __init__(self, message: str = "Calendar data not found", **kwargs):
        super().__init__(
            message=message,
            error_code=ErrorCode.REMOTE_CALENDAR_NOT_FOUND,
            status_code=404,
            **kwargs,
        )


class CalendarPersistFailedError(BaseError):
    """Raised when the top-level calendar row could not be saved."""

    def __init__(self, message: str = "Failed to save calendar data", **kwargs):
        super().__init__(
            message=message,
            error_code=ErrorCode.CALENDAR_PERSIST_FAILED,
            status_code=500,
            **kwargs,
        )


class RemoteFetchFailedError(ExternalServiceError):
    """Raised on network or API errors from the remote platform."""

    def __init__(self, message: str = "Remote fetch failed", **kwargs):
        super().__init__(message=message, error_code=ErrorCode.REMOTE_FETCH_FAILED, **kwargs)


class PersistFailedError(RepositoryError):
    """Raised when reconciling a single record fails."""

    def __init__(self, message: str = "Failed to persist record", **kwargs):
        super().__init__(message=message, error_code=ErrorCode.PERSIST_FAILED, **kwargs)
