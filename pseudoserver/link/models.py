"""Shared link data models."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

from ..config import LinkSettings


class ConnectionState(Enum):
    DISCONNECTED = auto()
    CONNECTING = auto()
    BURSTING = auto()
    LINKED = auto()


@dataclass(slots=True)
class ParsedMessage:
    """One tokenized protocol line.

    ``tags`` is the raw tag block without its leading ``@``; it is detected
    and kept but never parsed further.
    """

    command: str
    params: list[str] = field(default_factory=list)
    prefix: str | None = None
    tags: str | None = None

    def to_line(self) -> str:
        """Rebuild a wire line (without terminator) from the message."""
        parts: list[str] = []
        if self.tags is not None:
            parts.append(f"@{self.tags}")
        if self.prefix is not None:
            parts.append(f":{self.prefix}")
        parts.append(self.command)
        if self.params:
            *middle, last = self.params
            parts.extend(middle)
            if not last or " " in last or last.startswith(":"):
                last = f":{last}"
            parts.append(last)
        return " ".join(parts)


@dataclass(slots=True)
class BotCommand:
    name: str
    args: list[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return " ".join(self.args)


class LineWriter(Protocol):
    async def send_line(self, line: str) -> None: ...


# Handler for one top-level command: (link, settings, prefix, params)
CommandHandler = Callable[
    [LineWriter, LinkSettings, str | None, Sequence[str]], Awaitable[None]
]
