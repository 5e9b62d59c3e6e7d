"""Link handshake and burst."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from ..config import LinkSettings
from ..constants import PROTOCOL_VERSION
from ..logs.logger import logger
from .models import LineWriter


def build_handshake(settings: LinkSettings, now: int) -> list[str]:
    """Build the outbound handshake for one connection.

    Capability negotiation, SERVER introduction, then the burst: the bot
    user and, per channel, an FJOIN followed by a MODE for the bot.

    Args:
        settings: Link settings.
        now: Unix timestamp used for BURST, channel creation and any unset
            user timestamps.

    Returns:
        Protocol lines without terminators, in send order.
    """
    s = settings
    sid = s.sid
    uid = s.full_uid
    nick_ts = s.nick_ts if s.nick_ts is not None else now
    user_ts = s.user_ts if s.user_ts is not None else now

    lines = [
        f"CAPAB START {PROTOCOL_VERSION}",
        "CAPAB END",
        f"SERVER {s.server_name} {s.password} 0 {sid} :{s.description}",
        f":{sid} BURST {now}",
        f":{sid} UID {uid} {nick_ts} {s.nick} {s.real_host} {s.host} {s.ident}"
        f" {s.address} {user_ts} {s.user_modes} :{s.gecos}",
    ]
    for channel in s.channels:
        lines.append(f":{sid} FJOIN {channel} {now} + :{s.join_mode},{uid}")
        lines.append(f":{sid} MODE {channel} {s.after_join_mode} {uid}")
    lines.append(f":{sid} ENDBURST")
    return lines


async def send_handshake(
    link: LineWriter,
    settings: LinkSettings,
    clock: Callable[[], float] = time.time,
) -> int:
    """Write the handshake through ``link``; returns the number of lines.

    Write errors propagate to the caller and end the connection.
    """
    logger.log_event(
        "link",
        "handshake_start",
        server=settings.server_name,
        sid=settings.sid,
        server_name=settings.server_name,
    )
    lines = build_handshake(settings, int(clock()))
    for line in lines:
        await link.send_line(line)
    logger.log_event(
        "link",
        "handshake_complete",
        level=logging.INFO,
        server=settings.server_name,
        lines=len(lines),
        channels=len(settings.channels),
    )
    return len(lines)
