"""Link connection: transport, handshake and the read loop."""

from __future__ import annotations

import asyncio
import logging
import ssl
import time
from collections.abc import Awaitable, Callable
from typing import TypeVar

from ..config import LinkSettings
from ..constants import (
    LINK_CONNECT_TIMEOUT,
    LINK_MAX_LINE_BYTES,
    LINK_READ_TIMEOUT,
    LINK_WRITE_TIMEOUT,
)
from ..errors import FramingError, MalformedMessage, NetworkError
from ..logs.logger import logger
from .dispatcher import CommandDispatcher
from .handshake import send_handshake
from .models import ConnectionState
from .parser import parse_message

T = TypeVar("T")


async def _with_deadline(aw: Awaitable[T], timeout: float) -> T:
    if timeout and timeout > 0:
        return await asyncio.wait_for(aw, timeout=timeout)
    return await aw


def build_ssl_context(verify: bool) -> ssl.SSLContext:
    """TLS client context for the uplink; verification is opt-in."""
    context = ssl.create_default_context()
    if not verify:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


class LinkConnection:  # pylint: disable=too-many-instance-attributes
    """One uplink session.

    Runs strictly sequentially: the handshake is fully written before the
    first read, and each reply is written before the next line is read.
    Transport and framing errors propagate out of ``run``.
    """

    def __init__(
        self,
        settings: LinkSettings,
        *,
        reader: asyncio.StreamReader | None = None,
        writer: asyncio.StreamWriter | None = None,
        clock: Callable[[], float] = time.time,
        connect_timeout: float = LINK_CONNECT_TIMEOUT,
        read_timeout: float = LINK_READ_TIMEOUT,
        write_timeout: float = LINK_WRITE_TIMEOUT,
    ) -> None:
        self.settings = settings
        self.reader = reader
        self.writer = writer
        self.clock = clock
        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout
        self.write_timeout = write_timeout
        self.state = ConnectionState.DISCONNECTED
        self.lines_received = 0
        self.lines_sent = 0
        self.dispatcher = CommandDispatcher(self, settings)

    def _set_state(self, new_state: ConnectionState) -> None:
        if self.state != new_state:
            logger.log_event(
                "link",
                "state_change",
                level=logging.DEBUG,
                server=self.settings.server_name,
                old_state=self.state.name,
                new_state=new_state.name,
            )
            self.state = new_state

    async def connect(self) -> None:
        host = self.settings.remote_host
        port = self.settings.remote_port
        self._set_state(ConnectionState.CONNECTING)
        logger.log_event(
            "link", "connect_start", server=self.settings.server_name, host=host, port=port
        )
        context = build_ssl_context(self.settings.tls_verify)
        try:
            self.reader, self.writer = await _with_deadline(
                asyncio.open_connection(
                    host,
                    port,
                    ssl=context,
                    server_hostname=host if self.settings.tls_verify else None,
                    limit=LINK_MAX_LINE_BYTES,
                ),
                self.connect_timeout,
            )
        except (TimeoutError, asyncio.TimeoutError, OSError) as e:
            self._set_state(ConnectionState.DISCONNECTED)
            raise NetworkError(
                f"cannot connect to {host}:{port}: {str(e) or type(e).__name__}",
                data={"host": host, "port": port},
            ) from e
        logger.log_event(
            "link", "connected", server=self.settings.server_name, host=host, port=port
        )

    async def send_line(self, line: str) -> None:
        """Write one protocol line followed by ``\\n``."""
        if self.writer is None:
            raise NetworkError("send on a closed link")
        logger.log_event("link", "send", level=logging.DEBUG, line=line)
        try:
            self.writer.write(f"{line}\n".encode("utf-8"))
            await _with_deadline(self.writer.drain(), self.write_timeout)
        except (TimeoutError, asyncio.TimeoutError) as e:
            raise NetworkError(
                f"write timed out after {self.write_timeout}s"
            ) from e
        except (OSError, ConnectionError) as e:
            raise NetworkError(f"write failed: {e}") from e
        self.lines_sent += 1

    async def read_line(self) -> str:
        """Read one line; the ``\\n`` terminator (and a ``\\r`` before it) is removed."""
        if self.reader is None:
            raise NetworkError("read on a closed link")
        try:
            data = await _with_deadline(self.reader.readline(), self.read_timeout)
        except (TimeoutError, asyncio.TimeoutError) as e:
            logger.log_event(
                "link", "read_timeout", level=logging.WARNING, timeout=self.read_timeout
            )
            raise NetworkError(f"no data from uplink for {self.read_timeout}s") from e
        except ValueError as e:
            # StreamReader.readline reports an overlong line this way
            raise FramingError(f"inbound line too long: {e}") from e
        except (OSError, ConnectionError) as e:
            raise NetworkError(f"read failed: {e}") from e
        if not data:
            logger.log_event("link", "eof", level=logging.WARNING)
            raise NetworkError("uplink closed the stream")
        if not data.endswith(b"\n"):
            raise FramingError(
                "stream ended inside a line", data={"partial": data[:80]}
            )
        self.lines_received += 1
        line = data[:-1]
        if line.endswith(b"\r"):
            line = line[:-1]
        return line.decode("utf-8", errors="replace")

    async def process_line(self, line: str) -> None:
        """Tokenize and dispatch one inbound line.

        Malformed lines are answered with an ERROR line; the link stays up.
        """
        logger.log_event("link", "recv", level=logging.DEBUG, line=line)
        if not line:
            return
        try:
            message = parse_message(line)
        except MalformedMessage as e:
            logger.log_event(
                "link", "malformed", level=logging.WARNING, error=str(e), line=line
            )
            await self.send_line(f"ERROR :Malformed message: {e}")
            return
        await self.dispatcher.dispatch(message)

    async def run(self) -> None:
        """Connect (unless streams were given), burst, then serve forever."""
        try:
            if self.writer is None:
                await self.connect()
            self._set_state(ConnectionState.BURSTING)
            await send_handshake(self, self.settings, self.clock)
            self._set_state(ConnectionState.LINKED)
            while True:
                line = await self.read_line()
                await self.process_line(line)
        finally:
            await self.close()

    async def close(self) -> None:
        writer, self.writer, self.reader = self.writer, None, None
        if writer is not None:
            writer.close()
            try:
                await writer.wait_closed()
            except (OSError, ConnectionError) as e:
                logger.log_event(
                    "link", "close_error", level=logging.DEBUG, error=str(e)
                )
            logger.log_event(
                "link",
                "closed",
                server=self.settings.server_name,
                received=self.lines_received,
                sent=self.lines_sent,
            )
        self._set_state(ConnectionState.DISCONNECTED)
