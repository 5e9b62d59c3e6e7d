from __future__ import annotations

import asyncio

import pytest

from pseudoserver.errors import FramingError, NetworkError
from pseudoserver.link.connection import LinkConnection, build_ssl_context
from pseudoserver.link.handshake import build_handshake
from pseudoserver.link.models import ConnectionState
from tests.fixtures.link_fixtures import FakeStreamWriter

NOW = 1710000000


def _reader(data: bytes, eof: bool = True) -> asyncio.StreamReader:
    reader = asyncio.StreamReader()
    reader.feed_data(data)
    if eof:
        reader.feed_eof()
    return reader


def _connection(settings, data: bytes, eof: bool = True, **kwargs) -> LinkConnection:
    return LinkConnection(
        settings,
        reader=_reader(data, eof),
        writer=FakeStreamWriter(**kwargs),
        clock=lambda: NOW,
    )


@pytest.mark.asyncio
async def test_run_bursts_before_answering(settings):
    conn = _connection(settings, b":relay.example PING 0PS\r\nPING a b\n")
    writer = conn.writer
    with pytest.raises(NetworkError, match="closed the stream"):
        await conn.run()
    handshake = build_handshake(settings, NOW)
    assert writer.lines[: len(handshake)] == handshake
    assert writer.lines[len(handshake) :] == [
        ":0PS PONG :relay.example",
        ":0PS PONG a :b",
    ]
    assert writer.closed
    assert conn.state is ConnectionState.DISCONNECTED
    assert conn.lines_received == 2


@pytest.mark.asyncio
async def test_run_replies_in_order_and_ignores_unknown(settings):
    data = (
        b":0AB FJOIN #general 1 + :,0ABAAAAAB\n"
        b":0ABAAAAAB PRIVMSG #general :bot: HELP\n"
        b":0ABAAAAAB PRIVMSG #random :bot: HELP\n"
        b":0ABAAAAAB PRIVMSG 0PSAAAAAA :` ECHO THIS\n"
    )
    conn = _connection(settings, data)
    writer = conn.writer
    with pytest.raises(NetworkError):
        await conn.run()
    replies = writer.lines[len(build_handshake(settings, NOW)) :]
    assert len(replies) == 2
    assert replies[0].startswith(":0PSAAAAAA NOTICE #general :")
    assert replies[1] == "ECHO THIS"


@pytest.mark.asyncio
async def test_malformed_line_reports_and_continues(settings):
    conn = _connection(settings, b":nospace\n\nPING a b\n")
    writer = conn.writer
    with pytest.raises(NetworkError):
        await conn.run()
    replies = writer.lines[len(build_handshake(settings, NOW)) :]
    assert replies[0].startswith("ERROR :Malformed message")
    assert replies[1] == ":0PS PONG a :b"


@pytest.mark.asyncio
async def test_missing_terminator_is_a_framing_error(settings):
    conn = _connection(settings, b"PING a b\nPING c")
    writer = conn.writer
    with pytest.raises(FramingError):
        await conn.run()
    assert writer.lines[-1] == ":0PS PONG a :b"
    assert writer.closed


@pytest.mark.asyncio
async def test_write_failure_aborts_connection(settings):
    conn = _connection(settings, b"PING a b\n", fail_after=2)
    with pytest.raises(NetworkError, match="write failed"):
        await conn.run()
    assert conn.writer is None
    assert conn.state is ConnectionState.DISCONNECTED


@pytest.mark.asyncio
async def test_read_timeout_raises_network_error(settings):
    conn = LinkConnection(
        settings,
        reader=_reader(b"", eof=False),
        writer=FakeStreamWriter(),
        read_timeout=0.01,
    )
    with pytest.raises(NetworkError, match="no data"):
        await conn.read_line()


@pytest.mark.asyncio
async def test_read_line_strips_terminators_and_decodes(settings):
    conn = _connection(settings, "PRIVMSG #c :café\r\n".encode() + b"\xff\n")
    assert await conn.read_line() == "PRIVMSG #c :café"
    assert await conn.read_line() == "\ufffd"


@pytest.mark.asyncio
async def test_send_on_closed_link(settings):
    conn = LinkConnection(settings)
    with pytest.raises(NetworkError):
        await conn.send_line("PING a")
    with pytest.raises(NetworkError):
        await conn.read_line()


@pytest.mark.asyncio
async def test_close_is_idempotent(settings):
    conn = _connection(settings, b"")
    await conn.close()
    await conn.close()
    assert conn.state is ConnectionState.DISCONNECTED


@pytest.mark.asyncio
async def test_connect_failure_raises_network_error(settings, monkeypatch):
    async def refuse(*args, **kwargs):
        raise ConnectionRefusedError("refused")

    monkeypatch.setattr(asyncio, "open_connection", refuse)
    conn = LinkConnection(settings)
    with pytest.raises(NetworkError, match="cannot connect to 127.0.0.1:7001"):
        await conn.run()
    assert conn.state is ConnectionState.DISCONNECTED


@pytest.mark.asyncio
async def test_connect_uses_settings_endpoint_and_tls(settings, monkeypatch):
    seen = {}

    async def fake_open(host, port, **kwargs):
        seen.update(host=host, port=port, **kwargs)
        return _reader(b""), FakeStreamWriter()

    monkeypatch.setattr(asyncio, "open_connection", fake_open)
    conn = LinkConnection(settings)
    await conn.connect()
    assert (seen["host"], seen["port"]) == ("127.0.0.1", 7001)
    assert seen["ssl"].verify_mode.name == "CERT_NONE"
    assert seen["server_hostname"] is None
    assert conn.state is ConnectionState.CONNECTING


def test_ssl_context_verification_is_opt_in():
    assert build_ssl_context(True).check_hostname is True
    assert build_ssl_context(False).check_hostname is False
