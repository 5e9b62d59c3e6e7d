"""Centralized internal error hierarchy.

These exceptions give semantic categories to failures on the link so the
read loop and the entry point can decide what is fatal and what is
recovered. Never surface raw socket / ssl / pydantic errors past a module
boundary; wrap them instead.

Classes:
  InternalError        – Base for all internal errors.
  NetworkError         – Transport faults (connect, read, write, EOF). Fatal.
  FramingError         – Inbound data without a line terminator. Fatal.
  ParsingError         – Inbound content that could not be interpreted.
  MalformedMessage     – A protocol line violating the wire grammar. Recovered.
  SettingsLoadError    – Settings file missing, unreadable or invalid.
"""

from __future__ import annotations

from collections.abc import Mapping


class InternalError(Exception):
    """Base class for all internal application errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.

    Args:
        message: Descriptive error message.
        data: Optional mapping of additional context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class NetworkError(InternalError):
    """Exception raised for transport layer errors.

    Connect failures, read/write failures, deadlines and the peer closing
    the stream all end the connection; there is no reconnect.
    """


class FramingError(NetworkError):
    """Exception raised when the stream ends mid-line or a line is too long."""


class ParsingError(InternalError):
    """Exception raised for content that cannot be interpreted."""


class MalformedMessage(ParsingError):
    """A protocol line that does not follow the message grammar.

    Reported to the peer as an ERROR line; the link stays up.
    """

    def __init__(self, message: str, *, line: str | None = None) -> None:
        super().__init__(message, data={"line": line} if line is not None else None)
        self.line = line


class SettingsLoadError(InternalError):
    """Exception raised when the settings record cannot be loaded.

    Args:
        message: Descriptive error message.
        path: Settings file path, when known.
        lineno: 1-based line number of the offending line, when known.
    """

    def __init__(
        self, message: str, *, path: str | None = None, lineno: int | None = None
    ) -> None:
        data: dict[str, object] = {}
        if path is not None:
            data["path"] = path
        if lineno is not None:
            data["lineno"] = lineno
        super().__init__(message, data=data)
        self.path = path
        self.lineno = lineno


__all__ = [
    "InternalError",
    "NetworkError",
    "FramingError",
    "ParsingError",
    "MalformedMessage",
    "SettingsLoadError",
]
