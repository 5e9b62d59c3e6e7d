"""PING handler."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ..config import LinkSettings
from ..logs.logger import logger
from .models import LineWriter


async def handle_ping(
    link: LineWriter,
    settings: LinkSettings,
    prefix: str | None,
    params: Sequence[str],
) -> None:
    """Answer a keepalive.

    ``PING <our sid>`` must carry a source prefix and is answered with
    ``PONG :<source>``. The two-parameter form is echoed back as
    ``PONG <p1> :<p2>`` without further checks. Anything else gets an
    ERROR line.
    """
    sid = settings.sid
    if len(params) == 1:
        target = params[0]
        if target != sid:
            logger.log_event(
                "ping", "bad_target", level=logging.WARNING, target=target, sid=sid
            )
            await link.send_line(f"ERROR :PING target {target} is not {sid}")
            return
        if not prefix:
            logger.log_event("ping", "no_source", level=logging.WARNING)
            await link.send_line("ERROR :PING from unknown source")
            return
        logger.log_event("ping", "pong", level=logging.DEBUG, source=prefix)
        await link.send_line(f":{sid} PONG :{prefix}")
    elif len(params) == 2:
        logger.log_event("ping", "pong", level=logging.DEBUG, source=params[0])
        await link.send_line(f":{sid} PONG {params[0]} :{params[1]}")
    else:
        logger.log_event(
            "ping", "bad_params", level=logging.WARNING, count=len(params)
        )
        await link.send_line(f"ERROR :Invalid PING parameter count {len(params)}")
