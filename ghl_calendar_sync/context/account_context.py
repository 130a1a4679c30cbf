"""
Account context management.

Each sync runs on behalf of exactly one tenant account (a location or a
company). The active account id is held in thread-local storage so log
records and errors raised deep inside a sync can be attributed to it.
"""

import threading
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Generator, Optional

from ..exceptions import ErrorCode, ValidationError
from ..utils.logger import get_logger


class AccountContext:
    """
    Tracks the account currently being synced using thread-local storage.
    """

    _thread_local = threading.local()

    @classmethod
    def set_current_account(cls, account_id: str) -> None:
        """
        Set the current account id for the execution context.

        Raises:
            ValidationError: If account_id is empty
        """
        if not account_id or not isinstance(account_id, str) or not account_id.strip():
            raise ValidationError(
                "account_id must be a non-empty string",
                error_code=ErrorCode.MISSING_REQUIRED,
                field="account_id",
                value=account_id,
            )

        cls._thread_local.account_id = account_id.strip()
        get_logger().debug(f"Current account set to: {account_id}")

    @classmethod
    def get_current_account_id(cls) -> Optional[str]:
        return getattr(cls._thread_local, "account_id", None)

    @classmethod
    def clear_current_account(cls) -> None:
        if hasattr(cls._thread_local, "account_id"):
            delattr(cls._thread_local, "account_id")


@contextmanager
def account_context(account_id: str) -> Generator[None, None, None]:
    """
    Set the current account for the duration of the block and restore the
    previous one afterward.
    """
    previous_account = AccountContext.get_current_account_id()
    AccountContext.set_current_account(account_id)
    try:
        yield
    finally:
        if previous_account:
            AccountContext.set_current_account(previous_account)
        else:
            AccountContext.clear_current_account()


def account_aware(func: Callable) -> Callable:
    """
    Run a service method inside account_context(account_id).

    The decorated method must accept ``account_id`` as a keyword or as its
    second positional argument after ``self`` and a leading identifier, e.g.
    ``sync_calendar(self, calendar_id, account_id)``.
    """

    @wraps(func)
    def wrapper(self, *args: Any, **kwargs: Any) -> Any:
        account_id = kwargs.get("account_id")
        if account_id is None and len(args) >= 2:
            account_id = args[1]

        if account_id and isinstance(account_id, str):
            with account_context(account_id):
                return func(self, *args, **kwargs)
        return func(self, *args, **kwargs)

    return wrapper
