"""Execution context helpers."""

from .account_context import AccountContext, account_aware, account_context

__all__ = ["AccountContext", "account_aware", "account_context"]
