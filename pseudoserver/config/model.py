"""Link settings model and its validation rules."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_SID_RE = re.compile(r"^[0-9][0-9A-Z]{2}$")
_UID_SUFFIX_RE = re.compile(r"^[0-9A-Z]{6}$")

# Fields that are written as middle parameters on the wire and so may not
# contain spaces.
_TOKEN_FIELDS = (
    "server_name",
    "password",
    "nick",
    "real_host",
    "host",
    "ident",
    "address",
)


def _split_list(value: Any) -> list[str]:
    """Accept either a comma-separated string or a list of strings."""
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, list | tuple):
        items = list(value)
    else:
        raise ValueError("must be a comma-separated string or a list")
    cleaned = []
    for item in items:
        if not isinstance(item, str):
            raise ValueError("entries must be strings")
        item = item.strip()
        if item:
            cleaned.append(item)
    return cleaned


class LinkSettings(BaseModel):
    """Immutable settings record for one link.

    Loaded once before connecting and passed explicitly to the handshake
    sequencer, the dispatcher and every handler.

    Attributes:
        sid: Our server identifier (3 characters, digit first).
        server_name: Our server name as announced in SERVER.
        password: Link password sent in SERVER.
        description: Server description.
        nick: Bot nickname.
        real_host: Bot real hostname.
        host: Bot visible hostname.
        ident: Bot ident.
        address: Bot IP address.
        nick_ts: Nick timestamp; the burst time when unset.
        user_ts: Signon timestamp; the burst time when unset.
        user_modes: Bot user modes, e.g. ``+iB``.
        gecos: Bot real name.
        channels: Channels the bot is burst into, in join order.
        join_mode: Membership prefix mode given in FJOIN (e.g. ``o``).
        after_join_mode: Channel mode applied to the bot after joining.
        uid: UID suffix; the bot UID is ``sid + uid``.
        remote_address: Uplink ``host:port``.
        tls_verify: Verify the uplink certificate.
        source_url: Link included in the HELP reply.
        operators: Source identifiers allowed to use the raw passthrough;
            empty allows anyone.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    sid: str
    server_name: str = Field(min_length=1)
    password: str = Field(min_length=1)
    description: str = ""
    nick: str = Field(min_length=1)
    real_host: str = Field(min_length=1)
    host: str = Field(min_length=1)
    ident: str = Field(min_length=1)
    address: str = Field(min_length=1)
    nick_ts: int | None = Field(default=None, ge=0)
    user_ts: int | None = Field(default=None, ge=0)
    user_modes: str = "+"
    gecos: str = Field(min_length=1)
    channels: tuple[str, ...] = ()
    join_mode: str = ""
    after_join_mode: str
    uid: str
    remote_address: str
    tls_verify: bool = False
    source_url: str | None = None
    operators: tuple[str, ...] = ()

    @field_validator("sid")
    @classmethod
    def validate_sid(cls, v: str) -> str:
        if not _SID_RE.match(v):
            raise ValueError("sid must be a digit followed by two of [0-9A-Z]")
        return v

    @field_validator("uid")
    @classmethod
    def validate_uid(cls, v: str) -> str:
        if not _UID_SUFFIX_RE.match(v):
            raise ValueError("uid must be six characters of [0-9A-Z]")
        return v

    @field_validator(*_TOKEN_FIELDS)
    @classmethod
    def validate_token(cls, v: str) -> str:
        if " " in v:
            raise ValueError("must not contain spaces")
        return v

    @field_validator("server_name")
    @classmethod
    def validate_server_name(cls, v: str) -> str:
        if "." not in v:
            raise ValueError("server_name must contain a '.'")
        return v

    @field_validator("user_modes")
    @classmethod
    def validate_user_modes(cls, v: str) -> str:
        if not v.startswith("+") or " " in v:
            raise ValueError("user_modes must start with '+' and contain no spaces")
        return v

    @field_validator("channels", mode="before")
    @classmethod
    def validate_channels(cls, v: Any) -> tuple[str, ...]:
        """Split, validate and deduplicate the channel list, keeping its order."""
        channels = _split_list(v)
        for ch in channels:
            if not ch.startswith("#") or " " in ch or "," in ch:
                raise ValueError(f"invalid channel name {ch!r}")
        return tuple(dict.fromkeys(channels))

    @field_validator("operators", mode="before")
    @classmethod
    def validate_operators(cls, v: Any) -> tuple[str, ...]:
        return tuple(dict.fromkeys(_split_list(v)))

    @field_validator("join_mode")
    @classmethod
    def validate_join_mode(cls, v: str) -> str:
        if " " in v or "," in v:
            raise ValueError("join_mode must not contain spaces or commas")
        return v

    @field_validator("after_join_mode")
    @classmethod
    def validate_after_join_mode(cls, v: str) -> str:
        if len(v) < 2 or v[0] not in "+-" or " " in v:
            raise ValueError("after_join_mode must look like '+o'")
        return v

    @field_validator("source_url", mode="before")
    @classmethod
    def empty_url_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def validate_remote_address(self) -> LinkSettings:
        _split_endpoint(self.remote_address)
        return self

    @property
    def full_uid(self) -> str:
        """The bot's user identifier: SID followed by the UID suffix."""
        return f"{self.sid}{self.uid}"

    @property
    def remote_host(self) -> str:
        return _split_endpoint(self.remote_address)[0]

    @property
    def remote_port(self) -> int:
        return _split_endpoint(self.remote_address)[1]

    def is_operator(self, source: str) -> bool:
        """Whether ``source`` may use privileged bot commands."""
        return not self.operators or source in self.operators

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LinkSettings:
        """Create LinkSettings from a key/value mapping.

        Args:
            data: Raw settings, typically parsed from the settings file.

        Returns:
            LinkSettings instance.
        """
        return cls.model_validate(dict(data))

    def to_summary(self) -> dict[str, Any]:
        """Settings safe to log (the link password is masked)."""
        data = self.model_dump()
        data["password"] = "***"
        data["full_uid"] = self.full_uid
        return data


def _split_endpoint(endpoint: str) -> tuple[str, int]:
    """Split ``host:port`` or ``[v6]:port`` into host and port."""
    host, sep, port_text = endpoint.rpartition(":")
    if not sep or not host:
        raise ValueError(f"remote_address {endpoint!r} must be host:port")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    try:
        port = int(port_text)
    except ValueError:
        raise ValueError(f"remote_address {endpoint!r} has an invalid port") from None
    if not 1 <= port <= 65535:
        raise ValueError(f"remote_address {endpoint!r} has an invalid port")
    return host, port
