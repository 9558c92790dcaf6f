"""Configuration loading utilities."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..errors import ConfigError
from ..logs.logger import logger
from .model import EngineConfig

DEFAULT_CONFIG_FILE = "ircengine.conf"


def load_raw(path: str | os.PathLike[str]) -> dict[str, Any]:
    """Read the JSON configuration file into a dictionary.

    Raises:
        ConfigError: The file is missing, unreadable or not a JSON object.
    """
    path = Path(path)
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigError(
            f"configuration file not found: {path}", data={"path": str(path)}
        ) from e
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(
            f"cannot read configuration file {path}: {e}", data={"path": str(path)}
        ) from e
    if not isinstance(data, dict):
        raise ConfigError(
            f"configuration file {path} must contain a JSON object",
            data={"path": str(path)},
        )
    return data


def load_config(path: str | os.PathLike[str] | None = None) -> EngineConfig:
    """Load and validate the session configuration.

    Args:
        path: Configuration file; defaults to ``IRC_CONF_FILE`` or
            ``ircengine.conf`` in the working directory.

    Raises:
        ConfigError: The file is missing or fails validation.
    """
    config_file = path or os.environ.get("IRC_CONF_FILE", DEFAULT_CONFIG_FILE)
    raw = load_raw(config_file)
    try:
        config = EngineConfig.model_validate(raw)
    except ValidationError as e:
        logger.log_event(
            "config",
            "invalid",
            level=logging.ERROR,
            path=str(config_file),
            errors=e.error_count(),
        )
        raise ConfigError(
            f"invalid configuration in {config_file}: {e}",
            data={"path": str(config_file), "errors": e.errors()},
        ) from e
    logger.log_event(
        "config", "loaded", path=str(config_file), host=config.host, port=config.port
    )
    return config
