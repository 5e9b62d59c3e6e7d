"""Protocol line tokenizer."""

from __future__ import annotations

from ..errors import MalformedMessage
from .models import ParsedMessage


def _split_marker(rest: str, line: str, what: str) -> tuple[str, str]:
    """Split a leading ``@tags`` / ``:prefix`` token off ``rest``.

    Returns the token without its marker character and the remainder after
    the separating space.
    """
    space = rest.find(" ")
    if space == -1:
        raise MalformedMessage(f"no space after {what}", line=line)
    return rest[1:space], rest[space + 1 :]


def _tokenize(rest: str) -> list[str]:
    tokens: list[str] = []
    while True:
        if rest.startswith(":"):
            tokens.append(rest[1:])
            return tokens
        space = rest.find(" ")
        if space == -1:
            tokens.append(rest)
            return tokens
        tokens.append(rest[:space])
        rest = rest[space + 1 :]


def parse_message(line: str) -> ParsedMessage:
    """Tokenize one protocol line (terminator already removed).

    A leading ``@`` block and a leading ``:prefix`` are split off first.
    The remainder is split on single spaces, except that a token starting
    with ``:`` swallows the rest of the line verbatim, as does the last
    space-free segment. The first token is the command.

    Raises:
        MalformedMessage: For an empty line, a tag block or prefix with no
            following space, or an empty command.
    """
    if not line:
        raise MalformedMessage("empty line", line=line)

    tags: str | None = None
    prefix: str | None = None
    rest = line

    if rest.startswith("@"):
        tags, rest = _split_marker(rest, line, "tags")
    if rest.startswith(":"):
        prefix, rest = _split_marker(rest, line, "prefix")

    command, *params = _tokenize(rest)
    if not command:
        raise MalformedMessage("missing command", line=line)
    return ParsedMessage(command=command, params=params, prefix=prefix, tags=tags)
