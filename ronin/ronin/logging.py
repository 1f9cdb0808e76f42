"""
Centralized logging and error handling for Ronin.

This module provides consistent logging configuration and custom exceptions
across the engine, the tasks and the CLI.
"""

import logging
from typing import Optional, Union
from rich.logging import RichHandler
from rich.console import Console
from rich.panel import Panel

# Global console instance for the entire application
console = Console()


class RoninError(Exception):
    """Base exception for all Ronin-specific errors."""
    pass


class ConfigError(RoninError):
    """Raised when there's a configuration-related error."""
    pass


class ScrapeError(RoninError):
    """Raised when an outbound scrape (TheTVDB, AniDB, AnimeFillerList) fails."""
    pass


class HostError(RoninError):
    """Raised when the host library refuses or fails a query or mutation."""
    pass


class TaskCancelledError(RoninError):
    """Raised when a running task observes its cancellation event."""
    pass


class RoninLogger:
    """
    Centralized logging configuration for Ronin.

    Owns the root logger handlers: a UTF-8 file handler with full detail and a
    RichHandler on the shared console for warnings and errors.
    """

    def __init__(self, log_file: str = "ronin.log"):
        self.log_file = log_file
        self.console = console
        self._setup_root_logger()

    def _setup_root_logger(self) -> None:
        """Configure the root logger with file and console handlers."""
        file_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        # File handler (full detail) - UTF-8 since series names are often Japanese
        file_handler = logging.FileHandler(self.log_file, encoding='utf-8')
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(file_formatter)

        console_handler = RichHandler(
            console=self.console,
            show_path=False,
            show_time=True,
            show_level=True,
            markup=False,
            keywords=[]
        )
        console_handler.setLevel(logging.WARNING)

        root_logger = logging.getLogger()
        root_logger.setLevel(logging.INFO)

        # Clear existing handlers to avoid duplicates
        root_logger.handlers = []
        root_logger.addHandler(file_handler)
        root_logger.addHandler(console_handler)

    def set_console_level(self, level: Union[str, int]) -> None:
        """
        Set the console logging level.

        Args:
            level: Logging level (e.g., 'DEBUG', 'INFO', 'WARNING')
        """
        self._set_handler_level(RichHandler, level)

    def set_file_level(self, level: Union[str, int]) -> None:
        """
        Set the file logging level.

        Args:
            level: Logging level (e.g., 'DEBUG', 'INFO', 'WARNING')
        """
        self._set_handler_level(logging.FileHandler, level)

    def _set_handler_level(self, handler_cls: type, level: Union[str, int]) -> None:
        root_logger = logging.getLogger()

        numeric_level = level
        if isinstance(level, str):
            numeric_level = getattr(logging, level.upper(), logging.INFO)

        # Ensure root logger allows this level
        if numeric_level < root_logger.level:
            root_logger.setLevel(numeric_level)

        for handler in root_logger.handlers:
            if isinstance(handler, handler_cls):
                handler.setLevel(numeric_level)
                break


# Global logger instance
_logger_instance: Optional[RoninLogger] = None


def setup_logging(log_file: str = "ronin.log") -> RoninLogger:
    """
    Set up the global logging configuration.

    Args:
        log_file: Path to the log file

    Returns:
        The configured RoninLogger instance
    """
    global _logger_instance
    if _logger_instance is None:
        _logger_instance = RoninLogger(log_file)
    return _logger_instance


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.

    This should be called in each module as:
        from .logging import get_logger
        logger = get_logger(__name__)

    Handlers live on the root logger, so the returned logger has none of its own.
    """
    return logging.getLogger(name)


def set_log_level(level: Union[str, int], handler_type: str = "both") -> None:
    """
    Set the logging level for console, file, or both handlers.

    Args:
        level: Logging level (e.g., 'DEBUG', 'INFO', 'WARNING', 'ERROR')
        handler_type: 'console', 'file', or 'both'
    """
    instance = setup_logging()

    if handler_type in ("console", "both"):
        instance.set_console_level(level)
    if handler_type in ("file", "both"):
        instance.set_file_level(level)


def log_step(message: str) -> None:
    """
    Log a major step with a visual panel.
    Logs to file as INFO, prints to console as Panel.
    """
    logging.getLogger("ronin.step").info(f"STEP: {message}")
    console.print(Panel(message, style="bold magenta"))


def log_api_call(url: str, method: str, params: Optional[dict] = None) -> None:
    """
    Log an outbound call with sensitive data masking.
    Logs at DEBUG level.
    """
    logger = get_logger("ronin.api")

    # Quick check to avoid processing if not debug
    if not logger.isEnabledFor(logging.DEBUG):
        return

    safe_params = "None"
    if params:
        masked = dict(params)
        keys_to_mask = ['api_key', 'token', 'password', 'secret', 'key']
        for k in masked:
            if isinstance(k, str) and any(m in k.lower() for m in keys_to_mask):
                masked[k] = "********"
        safe_params = str(masked)

    logger.debug(f"API CALL: {method} {url} | Params: {safe_params}")


__all__ = [
    "console",
    "RoninError",
    "ConfigError",
    "ScrapeError",
    "HostError",
    "TaskCancelledError",
    "RoninLogger",
    "setup_logging",
    "get_logger",
    "set_log_level",
    "log_step",
    "log_api_call",
]
