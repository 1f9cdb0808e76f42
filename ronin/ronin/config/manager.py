"""
Centralized configuration management for Ronin.

This module provides type-safe, validated configuration using Pydantic.
Engine components receive a RoninConfig explicitly; the module-level
helpers at the bottom exist for the CLI entry points only.
"""

import json
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..constants import (
    DEFAULT_ANIME_TARGET_TAG,
    DEFAULT_DB_RATE_LIMIT_MS,
    DEFAULT_SINGLE_SEASON_NAME,
    JELLYFIN_DEFAULT_URL,
    JELLYFIN_TIMEOUT_SECONDS,
    SCRAPER_TIMEOUT_SECONDS,
)


class AnimeIdentificationMode(str, Enum):
    """How a series is recognised as anime."""
    GENRE = "Genre"
    TAG = "Tag"
    GENRE_OR_TAG = "GenreOrTag"
    GENRE_AND_TAG = "GenreAndTag"


class JellyfinConfig(BaseSettings):
    """Configuration for the Jellyfin host library"""

    model_config = SettingsConfigDict(
        env_prefix="JELLYFIN_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"  # Ignore fields that don't belong to this config
    )

    url: str = Field(default=JELLYFIN_DEFAULT_URL, description="Jellyfin server URL")
    api_key: Optional[str] = Field(default=None, description="Jellyfin API key")
    user_id: Optional[str] = Field(default=None, description="User whose view is used to read full items")
    timeout: int = Field(default=JELLYFIN_TIMEOUT_SECONDS, description="Request timeout in seconds")


class LoggingConfig(BaseSettings):
    """Configuration for logging behavior"""

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"  # Ignore fields that don't belong to this config
    )

    level: str = Field(default="INFO", description="Default logging level")
    file_level: str = Field(default="INFO", description="File logging level")
    console_level: str = Field(default="WARNING", description="Console logging level")
    log_file: str = Field(default="ronin.log", description="Log file path")

    @field_validator('level', 'file_level', 'console_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate that log level is one of the allowed values"""
        valid_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()


class RoninConfig(BaseSettings):
    """
    Main configuration class for Ronin.

    Loads from RONIN_* environment variables and .env files. Field names
    mirror the plugin settings page.
    """

    model_config = SettingsConfigDict(
        env_prefix="RONIN_",
        env_file=".env",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore"  # Ignore fields that don't belong to this config
    )

    # Anime identification
    anime_identification_mode: AnimeIdentificationMode = Field(
        default=AnimeIdentificationMode.GENRE,
        description="Genre, Tag, GenreOrTag or GenreAndTag"
    )
    anime_target_tag: str = Field(default=DEFAULT_ANIME_TARGET_TAG, description="Tag used when the mode includes Tag")

    # External lookups
    db_rate_limit_ms: int = Field(
        default=DEFAULT_DB_RATE_LIMIT_MS,
        description="Delay after every TheTVDB/AniDB/AnimeFillerList request, in milliseconds"
    )
    request_timeout: int = Field(default=SCRAPER_TIMEOUT_SECONDS, description="Scrape timeout in seconds")

    # Re-organization
    refresh_series_after_processed: bool = Field(default=True, description="Refresh series metadata after re-indexing")
    rename_when_single_season: bool = Field(default=True, description="Rename season 1 after a merge")
    single_season_name: str = Field(default=DEFAULT_SINGLE_SEASON_NAME, description="Name given to the merged season")

    # Front-end badges (consumed by the web client only)
    show_badges_on_episode_page: bool = Field(default=True, description="Show canon/filler badges on episode pages")
    show_badges_on_season_list: bool = Field(default=True, description="Show canon/filler badges in season lists")
    enable_badge_colors: bool = Field(default=True, description="Color badges by status")

    # Component configurations
    jellyfin: JellyfinConfig = Field(default_factory=JellyfinConfig, description="Jellyfin host configuration")
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging configuration")

    @field_validator('anime_identification_mode', mode='before')
    @classmethod
    def parse_identification_mode(cls, v: Any) -> Any:
        """Accept mode names case-insensitively ("genreortag", "GENRE")."""
        if isinstance(v, str):
            for mode in AnimeIdentificationMode:
                if mode.value.lower() == v.strip().lower():
                    return mode
        return v

    @field_validator('anime_target_tag')
    @classmethod
    def default_target_tag(cls, v: str) -> str:
        return v.strip() or DEFAULT_ANIME_TARGET_TAG

    @field_validator('single_season_name')
    @classmethod
    def default_single_season_name(cls, v: str) -> str:
        return v.strip() or DEFAULT_SINGLE_SEASON_NAME

    @field_validator('db_rate_limit_ms')
    @classmethod
    def floor_rate_limit(cls, v: int) -> int:
        """Non-positive delays are replaced by the safe default."""
        return v if v > 0 else DEFAULT_DB_RATE_LIMIT_MS

    @property
    def request_delay_seconds(self) -> float:
        return self.db_rate_limit_ms / 1000.0

    def save_to_file(self, path: Union[str, Path]) -> None:
        """
        Save configuration to a JSON file.

        Args:
            path: Path to save the configuration file
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        config_dict = self.model_dump(mode='json')

        with open(path, "w", encoding="utf-8") as f:
            json.dump(config_dict, f, indent=2, ensure_ascii=False)

    @classmethod
    def load_from_file(cls, path: Union[str, Path]) -> "RoninConfig":
        """
        Load configuration from a JSON file.

        Args:
            path: Path to the configuration file

        Returns:
            RoninConfig instance
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        return cls(**data)


# Global configuration instance (CLI only)
_config_instance: Optional[RoninConfig] = None


def setup_config(
    config_file: Optional[Union[str, Path]] = None,
    **kwargs
) -> RoninConfig:
    """
    Set up the global configuration.

    Args:
        config_file: Optional JSON file written by RoninConfig.save_to_file
        **kwargs: Additional configuration overrides

    Returns:
        RoninConfig instance
    """
    global _config_instance

    if config_file:
        base = RoninConfig.load_from_file(config_file)
        data = base.model_dump()
        data.update(kwargs)
        _config_instance = RoninConfig(**data)
    else:
        _config_instance = RoninConfig(**kwargs)
    return _config_instance


def get_config() -> RoninConfig:
    """
    Get the global configuration instance, loading it from the environment
    on first use.
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = RoninConfig()
    return _config_instance


def reload_config() -> RoninConfig:
    """
    Reload configuration from environment and .env files.

    Returns:
        RoninConfig instance
    """
    global _config_instance
    _config_instance = RoninConfig()
    return _config_instance


__all__ = [
    "AnimeIdentificationMode",
    "JellyfinConfig",
    "LoggingConfig",
    "RoninConfig",
    "setup_config",
    "get_config",
    "reload_config",
]
