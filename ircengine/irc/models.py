"""Shared IRC data models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class SessionState(Enum):
    CONNECTING = auto()
    AWAITING_WELCOME = auto()
    REGISTERED = auto()
    DISCONNECTED = auto()


class Continuation(Enum):
    """Value a callback returns to stay registered or to drop out."""

    KEEP = auto()
    REMOVE = auto()


@dataclass(frozen=True, slots=True)
class SenderIdentity:
    nick: str | None = None
    user: str | None = None
    host: str | None = None


@dataclass(frozen=True, slots=True)
class Message:
    """One parsed protocol line.

    ``params`` holds the middle parameters followed by the trailing parameter
    when one was present; ``trailing`` repeats that last value so callers can
    tell whether it was sent as a trailing parameter.
    """

    command: str
    params: tuple[str, ...] = ()
    prefix: str | None = None
    trailing: str | None = None

    @property
    def identity(self) -> SenderIdentity:
        from .parser import split_prefix

        return split_prefix(self.prefix)

    @property
    def nick(self) -> str | None:
        return self.identity.nick

    @property
    def user(self) -> str | None:
        return self.identity.user

    @property
    def host(self) -> str | None:
        return self.identity.host

    @property
    def target(self) -> str | None:
        return self.params[0] if self.params else None

    def param(self, index: int) -> str | None:
        try:
            return self.params[index]
        except IndexError:
            return None

    @property
    def middle_params(self) -> tuple[str, ...]:
        if self.trailing is None:
            return self.params
        return self.params[:-1]


@dataclass(frozen=True, slots=True)
class ParseFailure:
    """A line that did not match the message grammar."""

    line: str
    reason: str = "no command token"

    def __bool__(self) -> bool:
        return False
