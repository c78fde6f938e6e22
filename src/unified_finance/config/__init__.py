"""Configuration loading for unified-finance."""

from .state import ConfigLoader, ConfigState, get_config

__all__ = ["ConfigLoader", "ConfigState", "get_config"]
