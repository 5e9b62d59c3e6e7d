r"""
Logging configuration module for the pseudoserver link.

Provides a clean, configurable logging setup using colorlog library with
structured error logging and per-category error counts.
"""

import atexit
import logging
import os
import sys
from collections import Counter
from typing import Any

import colorlog


class ErrorAggregator:
    """Counts errors per category; the totals are logged when the process exits."""

    def __init__(self) -> None:
        self.counts: Counter[str] = Counter()
        self.last_message: dict[str, str] = {}

    def record_error(self, error_type: str, message: str) -> None:
        self.counts[error_type] += 1
        self.last_message[error_type] = message

    def get_error_summary(self) -> dict[str, dict[str, Any]]:
        return {
            error_type: {"count": count, "last": self.last_message[error_type]}
            for error_type, count in self.counts.items()
        }

    def log_summary_report(self) -> None:
        summary = self.get_error_summary()
        if not summary:
            logging.info("No errors recorded in current session")
            return
        for error_type, stats in summary.items():
            logging.warning(
                f"{error_type}: {stats['count']} error(s), last: {stats['last']}"
            )

    def clear(self) -> None:
        self.counts.clear()
        self.last_message.clear()


# Global error aggregator instance
error_aggregator = ErrorAggregator()


def log_structured_error(
    error_type: str,
    message: str,
    exception: BaseException | None = None,
    context: dict[str, Any] | None = None,
    level: int = logging.ERROR,
) -> None:
    """Log an error with structured context and count it by category.

    Args:
        error_type: Category of the error (e.g., 'network', 'framing', 'config')
        message: Descriptive error message
        exception: The exception that occurred (optional)
        context: Additional context data for debugging
        level: Logging level (default: ERROR)
    """
    structured_message = f"[{error_type.upper()}] {message}"

    if exception:
        structured_message += f" | Exception: {type(exception).__name__}: {str(exception)}"

    if context:
        context_str = " | ".join(f"{k}={v}" for k, v in context.items())
        structured_message += f" | Context: {context_str}"

    logging.log(level, structured_message)

    error_aggregator.record_error(error_type, message)


def _debug_enabled() -> bool:
    return os.environ.get("DEBUG", "").lower() in ("true", "1", "yes")


class LoggerConfigurator:
    """Handles logging configuration cleanly using colorlog.

    Supports environment variable configuration for log levels.
    """

    def __init__(self, stream=None):
        """Initialize the configurator.

        Args:
            stream: Output stream for the console handler, stderr by default.
        """
        self.stream = stream or sys.stderr
        self._exit_hook_registered = False

    def build_formatter(self) -> colorlog.ColoredFormatter:
        return colorlog.ColoredFormatter(
            "%(asctime)s %(log_color)s%(levelname)-8s%(reset)s %(message_log_color)s%(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "magenta",
            },
            secondary_log_colors={
                "message": {
                    "ERROR": "red",
                    "CRITICAL": "magenta",
                }
            },
            reset=True,
        )

    def configure(self):
        """Configure logging with colored output using colorlog.

        Uses environment variables:
        - DEBUG: Set to 'true', '1', or 'yes' for DEBUG level, otherwise INFO
        """
        log_level = logging.DEBUG if _debug_enabled() else logging.INFO

        handler = logging.StreamHandler(self.stream)
        handler.setFormatter(self.build_formatter())

        root_logger = logging.getLogger()
        for existing in list(root_logger.handlers):
            root_logger.removeHandler(existing)
        root_logger.addHandler(handler)
        root_logger.setLevel(log_level)

        # asyncio debug chatter is not useful on a single connection
        logging.getLogger("asyncio").setLevel(logging.WARNING)

        if not self._exit_hook_registered:
            atexit.register(self._log_final_error_summary)
            self._exit_hook_registered = True

    def _log_final_error_summary(self):
        """Log final error summary on application exit."""
        try:
            logging.info("Error summary before shutdown:")
            error_aggregator.log_summary_report()
        except Exception as e:  # noqa: BLE001
            logging.error(f"Failed to log final error summary: {e}")
