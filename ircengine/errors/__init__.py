"""Error types raised by the engine."""

from .internal import (  # noqa: F401
    ChannelClosedError,
    ConfigError,
    ConnectError,
    InternalError,
    NetworkError,
)

__all__ = [
    "InternalError",
    "NetworkError",
    "ConnectError",
    "ChannelClosedError",
    "ConfigError",
]
