"""
Configuration package for Ronin.

This package provides centralized, type-safe configuration management.
"""

from .manager import (
    AnimeIdentificationMode,
    JellyfinConfig,
    LoggingConfig,
    RoninConfig,
    setup_config,
    get_config,
    reload_config,
)

__all__ = [
    "AnimeIdentificationMode",
    "JellyfinConfig",
    "LoggingConfig",
    "RoninConfig",
    "setup_config",
    "get_config",
    "reload_config",
]
