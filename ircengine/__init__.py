"""Event-driven IRC client engine.

Parses and formats protocol lines, dispatches them to registered callbacks
and tracks registration, channel membership and queued sends for a client
session running on the asyncio event loop.
"""

from .config import EngineConfig, load_config  # noqa: F401
from .errors import ChannelClosedError, ConfigError, ConnectError  # noqa: F401
from .irc import (  # noqa: F401
    ClientSession,
    ConnectionChannel,
    Continuation,
    EventDispatcher,
    Message,
    ParseFailure,
    SessionHeartbeat,
    parse_message,
    serialize_message,
    split_prefix,
)
from .logging_config import configure_logging  # noqa: F401

__version__ = "0.2.0"

__all__ = [
    "ChannelClosedError",
    "ClientSession",
    "ConfigError",
    "ConnectError",
    "ConnectionChannel",
    "Continuation",
    "EngineConfig",
    "EventDispatcher",
    "Message",
    "ParseFailure",
    "SessionHeartbeat",
    "configure_logging",
    "load_config",
    "parse_message",
    "serialize_message",
    "split_prefix",
]
