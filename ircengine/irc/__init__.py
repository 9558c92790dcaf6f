"""IRC subsystem package.

Contains the message codec, event dispatcher, buffered connection channel,
client session state machine and the optional keepalive helper.
"""

from .connection import ConnectionChannel  # noqa: F401
from .dispatcher import EventDispatcher  # noqa: F401
from .heartbeat import SessionHeartbeat  # noqa: F401
from .models import (  # noqa: F401
    Continuation,
    Message,
    ParseFailure,
    SenderIdentity,
    SessionState,
)
from .numerics import rfc_code_to_name  # noqa: F401
from .parser import (  # noqa: F401
    format_message,
    is_channel_name,
    parse_message,
    prefix_host,
    prefix_nick,
    prefix_user,
    serialize_message,
    split_prefix,
)
from .session import ClientSession  # noqa: F401

__all__ = [
    "ClientSession",
    "ConnectionChannel",
    "Continuation",
    "EventDispatcher",
    "Message",
    "ParseFailure",
    "SenderIdentity",
    "SessionHeartbeat",
    "SessionState",
    "format_message",
    "is_channel_name",
    "parse_message",
    "prefix_host",
    "prefix_nick",
    "prefix_user",
    "rfc_code_to_name",
    "serialize_message",
    "split_prefix",
]
