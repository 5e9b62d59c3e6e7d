"""Command dispatch for inbound link traffic."""

from __future__ import annotations

import logging

from ..config import LinkSettings
from ..logs.logger import logger
from .botcmd import handle_privmsg
from .models import CommandHandler, LineWriter, ParsedMessage
from .ping import handle_ping


def default_handlers() -> dict[str, CommandHandler]:
    return {
        "PING": handle_ping,
        "PRIVMSG": handle_privmsg,
    }


class CommandDispatcher:
    """Routes tokenized messages to handlers by exact command name.

    The table is open: ``register`` adds or replaces a handler. Commands
    without a handler are ignored.
    """

    def __init__(
        self,
        link: LineWriter,
        settings: LinkSettings,
        handlers: dict[str, CommandHandler] | None = None,
    ) -> None:
        self.link = link
        self.settings = settings
        self.handlers: dict[str, CommandHandler] = (
            default_handlers() if handlers is None else dict(handlers)
        )

    def register(self, command: str, handler: CommandHandler) -> None:
        self.handlers[command] = handler

    def unregister(self, command: str) -> None:
        self.handlers.pop(command, None)

    async def dispatch(self, message: ParsedMessage) -> bool:
        """Run the handler for ``message``; returns False if none matched."""
        handler = self.handlers.get(message.command)
        if handler is None:
            logger.log_event(
                "dispatch",
                "unknown_command",
                level=logging.DEBUG,
                command=message.command,
            )
            return False
        await handler(self.link, self.settings, message.prefix, message.params)
        return True
