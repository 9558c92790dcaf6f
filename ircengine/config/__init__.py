"""Configuration package exports."""

from .loader import load_config, load_raw  # noqa: F401
from .model import EngineConfig  # noqa: F401

__all__ = ["EngineConfig", "load_config", "load_raw"]
