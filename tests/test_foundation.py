"""
Test suite for the foundation components: logging, errors and configuration.
"""

import logging

import pytest
from rich.logging import RichHandler

from ronin.ronin.config import (
    AnimeIdentificationMode,
    LoggingConfig,
    RoninConfig,
    get_config,
    reload_config,
    setup_config,
)
from ronin.ronin.logging import (
    ConfigError,
    HostError,
    RoninError,
    RoninLogger,
    ScrapeError,
    TaskCancelledError,
    get_logger,
    log_api_call,
)


class TestLogging:
    """Test the centralized logging system."""

    def test_logger_installs_file_and_console_handlers(self, tmp_path):
        log_file = tmp_path / "ronin-test.log"
        instance = RoninLogger(str(log_file))

        root = logging.getLogger()
        assert instance.log_file == str(log_file)
        assert log_file.exists()
        assert any(isinstance(h, logging.FileHandler) for h in root.handlers)
        assert any(isinstance(h, RichHandler) for h in root.handlers)

    def test_handler_levels(self, tmp_path):
        instance = RoninLogger(str(tmp_path / "levels.log"))
        instance.set_console_level("DEBUG")
        instance.set_file_level("ERROR")

        root = logging.getLogger()
        console = next(h for h in root.handlers if isinstance(h, RichHandler))
        file_handler = next(h for h in root.handlers if isinstance(h, logging.FileHandler))
        assert console.level == logging.DEBUG
        assert file_handler.level == logging.ERROR
        assert root.level == logging.DEBUG

    def test_get_logger_uses_root_handlers(self):
        logger = get_logger("test.module")
        assert logger.name == "test.module"
        assert len(logger.handlers) == 0

    def test_api_call_masks_secrets(self, caplog):
        caplog.set_level(logging.DEBUG, logger="ronin.api")
        log_api_call("http://jf/Items", "GET", {"api_key": "hunter2", "ParentId": "abc"})

        assert "hunter2" not in caplog.text
        assert "********" in caplog.text
        assert "ParentId" in caplog.text

    def test_custom_exceptions(self):
        for error in (ConfigError, ScrapeError, HostError, TaskCancelledError):
            with pytest.raises(RoninError):
                raise error("boom")


class TestConfiguration:
    """Test the centralized configuration system."""

    def test_defaults(self):
        config = RoninConfig(_env_file=None)
        assert config.anime_identification_mode is AnimeIdentificationMode.GENRE
        assert config.anime_target_tag == "Anime"
        assert config.db_rate_limit_ms == 2000
        assert config.request_delay_seconds == 2.0
        assert config.refresh_series_after_processed is True
        assert config.rename_when_single_season is True
        assert config.single_season_name == "Episodes"
        assert config.jellyfin.url == "http://localhost:8096"

    @pytest.mark.parametrize("value", [0, -1, -5000])
    def test_non_positive_rate_limit_falls_back(self, value):
        assert RoninConfig(_env_file=None, db_rate_limit_ms=value).db_rate_limit_ms == 2000

    def test_custom_rate_limit(self):
        config = RoninConfig(_env_file=None, db_rate_limit_ms=500)
        assert config.request_delay_seconds == 0.5

    def test_blank_names_fall_back(self):
        config = RoninConfig(_env_file=None, anime_target_tag=" ", single_season_name="")
        assert config.anime_target_tag == "Anime"
        assert config.single_season_name == "Episodes"

    @pytest.mark.parametrize("raw, expected", [
        ("genre", AnimeIdentificationMode.GENRE),
        ("TAG", AnimeIdentificationMode.TAG),
        ("GenreOrTag", AnimeIdentificationMode.GENRE_OR_TAG),
        ("genreandtag", AnimeIdentificationMode.GENRE_AND_TAG),
    ])
    def test_mode_parsing(self, raw, expected):
        assert RoninConfig(_env_file=None, anime_identification_mode=raw).anime_identification_mode is expected

    def test_invalid_mode(self):
        with pytest.raises(ValueError):
            RoninConfig(_env_file=None, anime_identification_mode="Cartoon")

    def test_config_from_env_vars(self, monkeypatch):
        monkeypatch.setenv("RONIN_ANIME_IDENTIFICATION_MODE", "GenreOrTag")
        monkeypatch.setenv("RONIN_DB_RATE_LIMIT_MS", "3500")
        monkeypatch.setenv("JELLYFIN_API_KEY", "from-env")

        config = reload_config()

        assert config.anime_identification_mode is AnimeIdentificationMode.GENRE_OR_TAG
        assert config.db_rate_limit_ms == 3500
        assert config.jellyfin.api_key == "from-env"
        assert get_config() is config

    def test_nested_env_vars(self, monkeypatch):
        monkeypatch.setenv("RONIN_JELLYFIN__URL", "http://jellyfin:8096")
        monkeypatch.setenv("RONIN_LOGGING__CONSOLE_LEVEL", "debug")

        config = reload_config()

        assert config.jellyfin.url == "http://jellyfin:8096"
        assert config.logging.console_level == "DEBUG"

    def test_config_save_and_load(self, tmp_path):
        config_file = tmp_path / "ronin.json"
        config = setup_config(single_season_name="All Episodes", refresh_series_after_processed=False)

        config.save_to_file(config_file)
        loaded = RoninConfig.load_from_file(config_file)

        assert loaded.single_season_name == "All Episodes"
        assert loaded.refresh_series_after_processed is False
        assert loaded.anime_identification_mode == config.anime_identification_mode

    def test_setup_config_from_file_with_overrides(self, tmp_path):
        config_file = tmp_path / "ronin.json"
        RoninConfig(_env_file=None, anime_target_tag="Japanimation").save_to_file(config_file)

        config = setup_config(config_file, db_rate_limit_ms=100)

        assert config.anime_target_tag == "Japanimation"
        assert config.db_rate_limit_ms == 100

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RoninConfig.load_from_file(tmp_path / "missing.json")

    def test_logging_config_validation(self):
        with pytest.raises(ValueError):
            LoggingConfig(level="INVALID_LEVEL")

        for level in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            assert LoggingConfig(level=level.lower()).level == level
