from __future__ import annotations

import pytest

from pseudoserver.link.dispatcher import CommandDispatcher
from pseudoserver.link.models import ParsedMessage
from pseudoserver.link.parser import parse_message


@pytest.mark.asyncio
async def test_dispatch_ping(link, settings):
    disp = CommandDispatcher(link, settings)
    handled = await disp.dispatch(parse_message(":relay.example PING 0PS"))
    assert handled is True
    assert link.wire == ":0PS PONG :relay.example\n"


@pytest.mark.asyncio
async def test_dispatch_privmsg(link, settings):
    disp = CommandDispatcher(link, settings)
    await disp.dispatch(parse_message(":0ABAAAAAB PRIVMSG 0PSAAAAAA :` ECHO THIS"))
    assert link.wire == "ECHO THIS\n"


@pytest.mark.parametrize(
    "line", [":0AB FJOIN #c 1 + :,0ABAAAAAB", "ping 0PS", ":0AB ENDBURST", "PONG 0PS"]
)
@pytest.mark.asyncio
async def test_unknown_or_miscased_commands_are_ignored(link, settings, line):
    disp = CommandDispatcher(link, settings)
    handled = await disp.dispatch(parse_message(line))
    assert handled is False
    assert link.sent == []


@pytest.mark.asyncio
async def test_register_extends_table(link, settings):
    calls = []

    async def on_version(lnk, sts, prefix, params):
        calls.append((prefix, list(params)))
        await lnk.send_line(f":{sts.sid} VERSION :pseudoserver")

    disp = CommandDispatcher(link, settings)
    disp.register("VERSION", on_version)
    await disp.dispatch(ParsedMessage("VERSION", ["0PS"], prefix="0AB"))
    assert calls == [("0AB", ["0PS"])]
    assert link.sent == [":0PS VERSION :pseudoserver"]


@pytest.mark.asyncio
async def test_unregister_and_custom_table(link, settings):
    disp = CommandDispatcher(link, settings, handlers={})
    assert await disp.dispatch(ParsedMessage("PING", ["a", "b"])) is False

    disp = CommandDispatcher(link, settings)
    disp.unregister("PING")
    disp.unregister("NOPE")
    assert await disp.dispatch(ParsedMessage("PING", ["a", "b"])) is False
    assert link.sent == []


def test_handler_tables_are_per_instance(link, settings):
    first = CommandDispatcher(link, settings)
    second = CommandDispatcher(link, settings)
    first.register("X", first.handlers["PING"])
    assert "X" not in second.handlers
