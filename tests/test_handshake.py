from __future__ import annotations

import pytest

from pseudoserver.constants import PROTOCOL_VERSION
from pseudoserver.link.handshake import build_handshake, send_handshake
from tests.fixtures.link_fixtures import RecordingLink, make_settings

NOW = 1710000000


def test_handshake_exact_lines_for_two_channels(settings):
    lines = build_handshake(settings, NOW)
    assert lines == [
        f"CAPAB START {PROTOCOL_VERSION}",
        "CAPAB END",
        "SERVER pseudo.example.net linkpass 0 0PS :Pseudo server",
        f":0PS BURST {NOW}",
        ":0PS UID 0PSAAAAAA 1700000000 bot bot.internal bot.example.net bot"
        " 127.0.0.1 1700000001 +iB :Link bot",
        f":0PS FJOIN #general {NOW} + :o,0PSAAAAAA",
        ":0PS MODE #general +o 0PSAAAAAA",
        f":0PS FJOIN #ops {NOW} + :o,0PSAAAAAA",
        ":0PS MODE #ops +o 0PSAAAAAA",
        ":0PS ENDBURST",
    ]


@pytest.mark.parametrize("channels", ["", "#a", "#a,#b,#c"])
def test_handshake_line_count(channels):
    settings = make_settings(channels=channels)
    lines = build_handshake(settings, NOW)
    assert len(lines) == 6 + 2 * len(settings.channels)
    commands = [line.split(" ")[1] if line.startswith(":") else line.split(" ")[0] for line in lines]
    assert commands[:5] == ["CAPAB", "CAPAB", "SERVER", "BURST", "UID"]
    assert commands[-1] == "ENDBURST"
    assert commands[5:-1] == ["FJOIN", "MODE"] * len(settings.channels)


def test_handshake_unset_timestamps_default_to_now():
    settings = make_settings(nick_ts=None, user_ts=None)
    uid_line = build_handshake(settings, NOW)[4]
    assert uid_line.split(" ")[3] == str(NOW)
    assert uid_line.split(" ")[9] == str(NOW)


def test_handshake_empty_join_mode():
    settings = make_settings(join_mode="", channels="#solo")
    assert f":0PS FJOIN #solo {NOW} + :,0PSAAAAAA" in build_handshake(settings, NOW)


@pytest.mark.asyncio
async def test_send_handshake_writes_in_order(settings):
    link = RecordingLink()
    count = await send_handshake(link, settings, clock=lambda: NOW + 0.7)
    assert count == 10
    assert link.sent == build_handshake(settings, NOW)
    assert link.wire.endswith(":0PS ENDBURST\n")


@pytest.mark.asyncio
async def test_send_handshake_write_error_propagates(settings):
    class BrokenLink(RecordingLink):
        async def send_line(self, line: str) -> None:
            if len(self.sent) == 3:
                raise ConnectionResetError("gone")
            await super().send_line(line)

    link = BrokenLink()
    with pytest.raises(ConnectionResetError):
        await send_handshake(link, settings, clock=lambda: NOW)
    assert len(link.sent) == 3


def test_server_line_fields(settings):
    server_line = build_handshake(settings, NOW)[2]
    fields = server_line.split(" ")
    assert fields[:5] == ["SERVER", "pseudo.example.net", "linkpass", "0", "0PS"]
    assert server_line.split(" :", 1)[1] == settings.description
