"""
Logging configuration module for the IRC engine.

Provides a clean, configurable console logging setup using the colorlog library.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TextIO

import colorlog

from .logs.logger import logger as engine_logger

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "magenta",
}


def _debug_from_env() -> bool:
    return os.environ.get("DEBUG", "").lower() in ("true", "1", "yes")


class LoggerConfigurator:
    """Handles logging configuration cleanly using colorlog.

    The debug switch is passed explicitly; when it is ``None`` the ``DEBUG``
    environment variable decides.
    """

    def __init__(self, debug: bool | None = None, stream: TextIO | None = None):
        self.debug = _debug_from_env() if debug is None else debug
        self.stream = stream or sys.stderr

    def build_formatter(self) -> colorlog.ColoredFormatter:
        return colorlog.ColoredFormatter(
            "%(asctime)s %(log_color)s%(levelname)-8s%(reset)s %(message_log_color)s%(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            log_colors=LOG_COLORS,
            secondary_log_colors={
                "message": {
                    "ERROR": "red",
                    "CRITICAL": "magenta",
                }
            },
            reset=True,
        )

    def configure(self) -> logging.Handler:
        """Attach a colored stream handler to the engine logger.

        Re-running ``configure`` replaces the handler instead of stacking
        another one.
        """
        log_level = logging.DEBUG if self.debug else logging.INFO
        handler = logging.StreamHandler(self.stream)
        handler.setFormatter(self.build_formatter())

        target = engine_logger.logger
        for existing in list(target.handlers):
            if getattr(existing, "_ircengine_handler", False):
                target.removeHandler(existing)
        handler._ircengine_handler = True  # type: ignore[attr-defined]
        target.addHandler(handler)
        target.propagate = False
        engine_logger.set_debug(self.debug)
        target.setLevel(log_level)
        return handler


def configure_logging(debug: bool | None = None) -> logging.Handler:
    return LoggerConfigurator(debug).configure()
