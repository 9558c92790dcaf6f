from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from ..constants import IRC_DEFAULT_PORT, IRC_ENCODING, IRC_READ_CHUNK_SIZE


def _normalize_channels(channels: list[str] | Any) -> list[str]:
    """Strip whitespace, add a missing ``#`` and drop duplicates (order kept)."""
    if not isinstance(channels, list):
        raise ValueError("channels must be a list")
    normalized: list[str] = []
    for ch in channels:
        if not isinstance(ch, str):
            continue
        name = ch.strip()
        if not name:
            continue
        if name[0] not in "#&+!":
            name = f"#{name}"
        normalized.append(name)
    return list(dict.fromkeys(normalized))


class EngineConfig(BaseModel):
    """Settings for one IRC session.

    Attributes:
        host: IRC server host name.
        port: IRC server port.
        nick: Nickname requested at registration.
        user: Username sent in USER; defaults to the nick.
        real: Real name sent in USER; defaults to the nick.
        password: Optional server password, sent as PASS before NICK.
        channels: Channels to JOIN once the server welcomed us.
        encoding: Text encoding on the wire.
        read_chunk_size: Bytes read per readiness notification.
        debug: Log every received message at DEBUG level.
    """

    host: str = Field(min_length=1)
    port: int = Field(default=IRC_DEFAULT_PORT, ge=1, le=65535)
    nick: str = Field(min_length=1, max_length=30)
    user: str | None = None
    real: str | None = None
    password: str | None = None
    channels: list[str] = Field(default_factory=list)
    encoding: str = IRC_ENCODING
    read_chunk_size: int = Field(default=IRC_READ_CHUNK_SIZE, ge=1)
    debug: bool = False

    @field_validator("nick")
    @classmethod
    def validate_nick(cls, v: str) -> str:
        v = v.strip()
        if not v or any(c in v for c in " ,*?!@:") or v[0] in "#&+$":
            raise ValueError(f"invalid nickname: {v!r}")
        return v

    @field_validator("channels", mode="before")
    @classmethod
    def validate_channels(cls, v: Any) -> list[str]:
        return _normalize_channels(v)

    @field_validator("encoding")
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        import codecs

        try:
            codecs.lookup(v)
        except LookupError as e:
            raise ValueError(f"unknown encoding: {v}") from e
        return v

    @model_validator(mode="after")
    def default_identity(self) -> EngineConfig:
        if not self.user:
            self.user = self.nick
        if not self.real:
            self.real = self.nick
        return self
