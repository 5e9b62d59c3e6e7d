"""Link subsystem package.

Tokenizer, handshake/burst, command dispatch, the PING and PRIVMSG
handlers, and the connection that ties them to the transport.
"""

from .botcmd import BOT_COMMANDS, handle_privmsg, parse_bot_command  # noqa: F401
from .connection import LinkConnection  # noqa: F401
from .dispatcher import CommandDispatcher  # noqa: F401
from .handshake import build_handshake, send_handshake  # noqa: F401
from .models import BotCommand, ConnectionState, ParsedMessage  # noqa: F401
from .parser import parse_message  # noqa: F401
from .ping import handle_ping  # noqa: F401

__all__ = [
    "BOT_COMMANDS",
    "BotCommand",
    "CommandDispatcher",
    "ConnectionState",
    "LinkConnection",
    "ParsedMessage",
    "build_handshake",
    "handle_ping",
    "handle_privmsg",
    "parse_bot_command",
    "parse_message",
    "send_handshake",
]
