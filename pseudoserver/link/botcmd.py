"""Addressed PRIVMSG handling and the bot's sub-commands."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass

from .. import __version__
from ..config import LinkSettings
from ..logs.logger import logger
from .models import BotCommand, LineWriter


@dataclass(slots=True)
class BotContext:
    """Everything a sub-command needs to reply."""

    link: LineWriter
    settings: LinkSettings
    source: str
    reply_to: str

    async def notice(self, text: str) -> None:
        await self.link.send_line(
            f":{self.settings.full_uid} NOTICE {self.reply_to} :{text}"
        )


BotCommandHandler = Callable[[BotContext, BotCommand], Awaitable[None]]


def parse_bot_command(text: str) -> BotCommand:
    """Split addressed text into an upper-cased name and its arguments.

    Tokens are split on single spaces and empty tokens are kept, so
    ``command.text`` gives back the argument text exactly.
    """
    tokens = text.split(" ")
    return BotCommand(name=tokens[0].upper(), args=tokens[1:])


def help_text(settings: LinkSettings) -> str:
    text = f"pseudoserver {__version__}, an InspIRCd link bot. Commands: HELP"
    if settings.source_url:
        text = f"{text}. Source: {settings.source_url}"
    return text


async def _cmd_help(ctx: BotContext, command: BotCommand) -> None:
    await ctx.notice(help_text(ctx.settings))


async def _cmd_unknown(ctx: BotContext, command: BotCommand) -> None:
    logger.log_event(
        "bot",
        "unknown_command",
        level=logging.DEBUG,
        source=ctx.source,
        command=command.name,
        target=ctx.reply_to,
    )
    await ctx.notice(f"Unknown command {command.name}")


async def _cmd_raw(ctx: BotContext, command: BotCommand) -> None:
    # Debug passthrough: the arguments go out unvalidated as a raw line.
    if not command.text:
        await _cmd_unknown(ctx, command)
        return
    if not ctx.settings.is_operator(ctx.source):
        logger.log_event(
            "bot", "raw_denied", level=logging.WARNING, source=ctx.source
        )
        await ctx.notice(f"Permission denied for {command.name}")
        return
    logger.log_event(
        "bot", "raw", level=logging.WARNING, source=ctx.source, line=command.text
    )
    await ctx.link.send_line(command.text)


BOT_COMMANDS: dict[str, BotCommandHandler] = {
    "HELP": _cmd_help,
    "`": _cmd_raw,
}


def resolve_reply_target(
    settings: LinkSettings, source: str, target: str, text: str
) -> tuple[str, str] | None:
    """Work out whether a PRIVMSG is addressed to the bot.

    Returns ``(reply_to, command_text)``, or None when the message is not
    for us. Channel messages must be in a joined channel and start with
    ``"<nick>: "``; direct messages must target the bot's UID.
    """
    if target.startswith("#"):
        if target not in settings.channels:
            return None
        address = f"{settings.nick}: "
        if not text.startswith(address):
            return None
        return target, text[len(address) :]
    if target == settings.full_uid:
        return source, text
    return None


async def handle_privmsg(
    link: LineWriter,
    settings: LinkSettings,
    prefix: str | None,
    params: Sequence[str],
    commands: dict[str, BotCommandHandler] | None = None,
) -> None:
    if not prefix:
        logger.log_event("bot", "no_source", level=logging.WARNING)
        await link.send_line("ERROR :PRIVMSG from unknown source")
        return
    if len(params) < 2:
        logger.log_event(
            "bot", "too_few_params", level=logging.DEBUG, count=len(params)
        )
        return

    target, text = params[0], params[1]
    resolved = resolve_reply_target(settings, prefix, target, text)
    if resolved is None:
        logger.log_event(
            "bot", "not_addressed", level=logging.DEBUG, source=prefix, target=target
        )
        return
    reply_to, command_text = resolved

    command = parse_bot_command(command_text)
    table = BOT_COMMANDS if commands is None else commands
    handler = table.get(command.name, _cmd_unknown)
    logger.log_event(
        "bot",
        "command",
        level=logging.DEBUG,
        channel=reply_to if reply_to.startswith("#") else None,
        source=prefix,
        command=command.name,
        target=reply_to,
    )
    await handler(BotContext(link, settings, prefix, reply_to), command)
