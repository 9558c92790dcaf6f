"""IRC message parsing and formatting utilities.

``parse_message`` and ``serialize_message`` are deliberately not strict
inverses: ``serialize_message`` does not count parameters or check for a
leading colon, so pathological input formats to a line that parses back
differently.
"""

from __future__ import annotations

import re

from ..constants import IRC_ENCODING, IRC_LINE_TERMINATOR, IRC_MAX_MIDDLE_PARAMS
from .models import Message, ParseFailure, SenderIdentity

_HEAD_RE = re.compile(r"(?::([^ ]+) )?([A-Za-z]+|[0-9]{3})(?= |$)")
_MIDDLE_RE = re.compile(r" ([^ :\r\n\0][^ \r\n\0]*)")
_TRAILING_RE = re.compile(r" :([^\r\n\0]*)")
# After the maximum number of middle params the colon is optional.
_LAST_PARAM_RE = re.compile(r" :?([^\r\n\0]*)")
_PREFIX_RE = re.compile(r"([^!]*)(?:!([^@]*))?(?:@(.*))?", re.DOTALL)
_CHANNEL_RE = re.compile(r"(?:[#&+]|![A-Z0-9]{5})")


def parse_message(line: str) -> Message | ParseFailure:
    """Parse one protocol line (without its terminator) into a ``Message``.

    Returns a ``ParseFailure`` when no command token can be found. An empty
    trailing parameter (``:`` directly followed by the end of line) counts as
    no trailing parameter at all.
    """
    head = _HEAD_RE.match(line)
    if head is None:
        return ParseFailure(line)
    prefix, command = head.group(1), head.group(2)
    pos = head.end()

    params: list[str] = []
    while len(params) < IRC_MAX_MIDDLE_PARAMS:
        middle = _MIDDLE_RE.match(line, pos)
        if middle is None:
            break
        params.append(middle.group(1))
        pos = middle.end()

    last_re = _LAST_PARAM_RE if len(params) == IRC_MAX_MIDDLE_PARAMS else _TRAILING_RE
    trailing: str | None = None
    last = last_re.match(line, pos)
    if last is not None and last.group(1) != "":
        trailing = last.group(1)
        params.append(trailing)

    return Message(
        prefix=prefix, command=command, params=tuple(params), trailing=trailing
    )


def serialize_message(
    prefix: str | None, command: str, trailing: str | None = None, *params: str
) -> str:
    """Assemble a protocol line, terminator included.

    >>> serialize_message(None, "PRIVMSG", "you there?", "magnus")
    'PRIVMSG magnus :you there?\\r\\n'
    >>> serialize_message(None, "JOIN", None, "#test")
    'JOIN #test\\r\\n'
    """
    # Parameter count is the caller's business; more than 14 middles will
    # not survive a round trip through parse_message.
    parts = [f":{prefix} " if prefix is not None else "", command]
    parts.extend(f" {p}" for p in params)
    if trailing is not None:
        parts.append(f" :{trailing}")
    parts.append(IRC_LINE_TERMINATOR)
    return "".join(parts)


def format_message(message: Message) -> str:
    """Serialize a parsed ``Message`` back into a line."""
    return serialize_message(
        message.prefix, message.command, message.trailing, *message.middle_params
    )


def split_prefix(prefix: str | Message | None) -> SenderIdentity:
    """Split ``nick!user@host`` into its three parts.

    A server name comes back as the nick; a client cannot tell the two apart.
    """
    if isinstance(prefix, Message):
        prefix = prefix.prefix
    if not prefix:
        return SenderIdentity()
    m = _PREFIX_RE.fullmatch(prefix.strip())
    if m is None:  # pragma: no cover - the pattern matches any string
        return SenderIdentity()
    nick, user, host = (part or None for part in m.groups())
    return SenderIdentity(nick=nick, user=user, host=host)


def prefix_nick(prefix: str | Message | None) -> str | None:
    return split_prefix(prefix).nick


def prefix_user(prefix: str | Message | None) -> str | None:
    return split_prefix(prefix).user


def prefix_host(prefix: str | Message | None) -> str | None:
    return split_prefix(prefix).host


def is_channel_name(target: str | None) -> bool:
    """True for ``#``, ``&`` and ``+`` channels and ``!XXXXX`` safe channels."""
    if not target:
        return False
    return _CHANNEL_RE.match(target) is not None


def decode_line(data: bytes, encoding: str = IRC_ENCODING) -> str:
    return data.decode(encoding, errors="replace")


def encode_line(line: str, encoding: str = IRC_ENCODING) -> bytes:
    return line.encode(encoding, errors="replace")


__all__ = [
    "parse_message",
    "serialize_message",
    "format_message",
    "split_prefix",
    "prefix_nick",
    "prefix_user",
    "prefix_host",
    "is_channel_name",
    "decode_line",
    "encode_line",
]
