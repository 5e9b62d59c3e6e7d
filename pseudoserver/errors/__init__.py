"""Error hierarchy and reporting helpers."""

from .handling import categorize_error, log_error  # noqa: F401
from .internal import (  # noqa: F401
    FramingError,
    InternalError,
    MalformedMessage,
    NetworkError,
    ParsingError,
    SettingsLoadError,
)

__all__ = [
    "InternalError",
    "NetworkError",
    "FramingError",
    "ParsingError",
    "MalformedMessage",
    "SettingsLoadError",
    "categorize_error",
    "log_error",
]
