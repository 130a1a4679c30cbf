"""
Console logging for the calendar sync engine.

ContextAwareLogger renders the ``extra`` mapping as pipe-delimited
``key=value`` pairs so the context is visible in plain console output, and
AccountContextFilter stamps the current tenant account id on every record.
"""

import logging
import sys
from typing import Optional, Union

from ..config import get_config

_module_logger = None


class ContextAwareLogger:
    """
    Logger wrapper that formats extra attributes in message while preserving them.
    """

    def __init__(self, logger):
        """Initialize with an existing logger."""
        self.logger = logger

    def _log_with_formatted_extra(self, level, msg, **kwargs):
        extra = kwargs.pop("extra", {})

        if extra:
            extra_str = " | ".join([f"{k}={v}" for k, v in extra.items()])
            full_msg = f"{msg} | {extra_str}"
        else:
            full_msg = msg

        # LogRecord reserves some attribute names, keep the raw extras under one key
        log_method = getattr(self.logger, level)
        log_method(full_msg, extra={"context": extra}, **kwargs)

    def info(self, msg, **kwargs):
        self._log_with_formatted_extra("info", msg, **kwargs)

    def error(self, msg, **kwargs):
        self._log_with_formatted_extra("error", msg, **kwargs)

    def warning(self, msg, **kwargs):
        self._log_with_formatted_extra("warning", msg, **kwargs)

    def debug(self, msg, **kwargs):
        self._log_with_formatted_extra("debug", msg, **kwargs)

    def exception(self, msg, **kwargs):
        """Log exception with formatted extra."""
        self._log_with_formatted_extra("exception", msg, **kwargs)


class AccountContextFilter(logging.Filter):
    """
    Logging filter that adds the current account id to log records.
    """

    def filter(self, record):
        # Lazy import to avoid circular dependency
        from ..context.account_context import AccountContext

        account_id = AccountContext.get_current_account_id()
        if account_id:
            record.account_id = account_id

        return True


def configure_logging(
    name: str,
    log_level: Optional[Union[int, str]] = None,
) -> "ContextAwareLogger":
    """
    Configure console logging for a named component.

    Args:
        name: Name of the component (used as the logger name suffix)
        log_level: Logging level (default: from config.logging.level)

    Returns:
        The configured logger wrapped with ContextAwareLogger
    """
    global _module_logger

    app_config = get_config()

    if log_level is None:
        log_level = app_config.logging.level

    if isinstance(log_level, str):
        log_level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger(f"ghl_calendar_sync.{name}")
    logger.setLevel(log_level)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(app_config.logging.format))
    console_handler.addFilter(AccountContextFilter())
    logger.addHandler(console_handler)

    wrapped_logger = ContextAwareLogger(logger)
    wrapped_logger.info("Logger configured", extra={"logger_name": name})

    _module_logger = wrapped_logger
    return wrapped_logger


def get_logger(
    log_level: Optional[Union[int, str]] = None,
) -> "ContextAwareLogger":
    """
    Get the configured logger, or a wrapped package logger as fallback.

    Args:
        log_level: Optional log level to set on the fallback logger

    Returns:
        ContextAwareLogger instance
    """
    if _module_logger is not None:
        return _module_logger

    logger = logging.getLogger("ghl_calendar_sync")

    if log_level is None:
        log_level = get_config().logging.level

    if isinstance(log_level, str):
        log_level = getattr(logging, log_level.upper(), logging.INFO)
    logger.setLevel(log_level)

    return ContextAwareLogger(logger)
