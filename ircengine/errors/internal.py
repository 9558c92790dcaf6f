"""Centralized internal error hierarchy.

These exceptions provide semantic categories for the engine's failure modes.
I/O failures on an established connection are never raised; they are routed
through ``ConnectionChannel.disconnect`` instead. Parse failures are values
(``ParseFailure``), not exceptions.

Classes:
  InternalError        – Base for all internal errors.
  NetworkError         – Transport level issues.
  ConnectError         – Connection establishment failed (fatal for that attempt).
  ChannelClosedError   – I/O attempted on a channel that was already disconnected.
  ConfigError          – Configuration file missing or invalid.
"""

from __future__ import annotations

from collections.abc import Mapping


class InternalError(Exception):
    """Base class for all internal engine errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.

    Args:
        message: Descriptive error message.
        data: Optional mapping of additional context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class NetworkError(InternalError):
    """Exception raised for network or transport layer errors."""


class ConnectError(NetworkError):
    """Exception raised when a connection to the IRC server cannot be opened.

    No channel object exists after this error; the caller has to try again
    with a fresh ``connect`` call.
    """

    def __init__(self, host: str, port: int, cause: BaseException | str) -> None:
        super().__init__(
            f"couldn't connect to irc server '{host}:{port}': {cause}",
            data={"host": host, "port": port, "cause": str(cause)},
        )
        self.host = host
        self.port = port


class ChannelClosedError(InternalError):
    """Exception raised when a disconnected channel is used for I/O.

    Channels are one-shot: once ``disconnect`` ran, sending or reading through
    the same object is a programming error.
    """


class ConfigError(InternalError):
    """Exception raised for a missing or invalid configuration file."""


__all__ = [
    "InternalError",
    "NetworkError",
    "ConnectError",
    "ChannelClosedError",
    "ConfigError",
]
