"""Error categorization and structured error reporting."""

from __future__ import annotations

from ..logging_config import log_structured_error
from .internal import (
    FramingError,
    InternalError,
    NetworkError,
    ParsingError,
    SettingsLoadError,
)


def categorize_error(error: BaseException) -> str:
    """Map an exception to the error category used for aggregation."""
    if isinstance(error, FramingError):
        return "framing"
    if isinstance(error, NetworkError | OSError | ConnectionError | TimeoutError):
        return "network"
    if isinstance(error, ParsingError):
        return "parsing"
    if isinstance(error, SettingsLoadError):
        return "config"
    if isinstance(error, InternalError):
        return "internal"
    return "unknown"


def log_error(message: str, error: Exception, context: dict | None = None) -> None:
    """Logs an error message with the associated exception details.

    The exception is categorized (network, framing, parsing, config,
    internal or unknown) and reported through structured logging so that
    repeated failures show up in the error summary.

    Args:
        message: A descriptive message about the error context.
        error: The exception instance to be logged.
        context: Optional additional context data for debugging.
    """
    merged: dict = {}
    if isinstance(error, InternalError):
        merged.update(error.data)
    if context:
        merged.update(context)
    log_structured_error(
        error_type=categorize_error(error),
        message=f"{message}: {str(error)}",
        exception=error,
        context=merged or None,
    )
