"""
Configuration constants for the IRC engine

This module contains the defaults used throughout the engine.
Each constant can be overridden by setting an environment variable with the same name.
"""

import os


def _get_env_int(name: str, default: int) -> int:
    """Retrieve an integer value from an environment variable.

    Attempts to parse the environment variable as an integer. If the variable
    is not set or cannot be parsed, prints a warning and returns the default value.

    Args:
        name: The name of the environment variable to read.
        default: The default integer value to return if parsing fails.

    Returns:
        The parsed integer value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            print(
                f"Warning: Invalid integer value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_float(name: str, default: float) -> float:
    """Retrieve a float value from an environment variable.

    Args:
        name: The name of the environment variable to read.
        default: The default float value to return if parsing fails.

    Returns:
        The parsed float value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return float(value)
        except ValueError:
            print(
                f"Warning: Invalid float value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_str(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


# Connection defaults
IRC_DEFAULT_PORT = _get_env_int("IRC_DEFAULT_PORT", 6667)
IRC_READ_CHUNK_SIZE = _get_env_int(
    "IRC_READ_CHUNK_SIZE", 1024
)  # Bytes requested per read-readiness notification
IRC_ENCODING = _get_env_str("IRC_ENCODING", "utf-8")

# Protocol framing
IRC_LINE_TERMINATOR = "\r\n"
IRC_MAX_MIDDLE_PARAMS = 14  # Middle params before the colon becomes optional
IRC_WILDCARD_COMMAND = "*"
IRC_COMMAND_PREFIX = "irc_"  # Callback names starting with this target protocol commands

# Keepalive (caller-layered via SessionHeartbeat)
IRC_PING_INTERVAL = _get_env_float(
    "IRC_PING_INTERVAL", 90.0
)  # Seconds between client-initiated PINGs
IRC_PING_TIMEOUT = _get_env_float(
    "IRC_PING_TIMEOUT", 240.0
)  # Seconds without server activity before the session is dropped

# Membership rank markers stripped from names replies (op, voice, halfop, ...)
IRC_RANK_MARKERS = "@+%&~"
