"""
Logging utilities for the mappings bot.
Uses Rich for colored console output.
"""

import logging
from typing import Dict, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

# Every logger created here lives under this namespace
ROOT_LOGGER_NAME = "mappings_bot"

CUSTOM_THEME = Theme({
    "logging.level.success": "green",
    "logging.level.command": "cyan",
    "logging.level.debug": "dim cyan",
})

console = Console(theme=CUSTOM_THEME)

_default_level = logging.INFO
_loggers: Dict[str, logging.Logger] = {}


def _qualified(name: str) -> str:
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return name
    return f"{ROOT_LOGGER_NAME}.{name}"


def setup_logging(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Set up a logger with RichHandler.

    Args:
        name: Logger name, placed under the ``mappings_bot`` namespace
        level: Logging level (default: the configured default, INFO)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(_qualified(name))

    if level is None:
        level = _default_level

    logger.setLevel(level)
    logger.propagate = False

    # Remove existing handlers
    logger.handlers = []

    handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(
        fmt="[%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    ))

    logger.addHandler(handler)
    _loggers[logger.name] = logger

    return logger


def set_default_level(level: int) -> None:
    """Change the level of every logger created so far and of future ones."""
    global _default_level
    _default_level = level
    for logger in _loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)


class LoggerMixin:
    """Mixin class that provides logger functionality."""

    def __init__(self, name: str):
        self._logger = get_logger(name)

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def debug(self, message: str, **kwargs) -> None:
        self._logger.debug(message, extra=kwargs)

    def info(self, message: str, **kwargs) -> None:
        self._logger.info(message, extra=kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self._logger.warning(message, extra=kwargs)

    def error(self, message: str, **kwargs) -> None:
        self._logger.error(message, extra=kwargs)

    def success(self, message: str, **kwargs) -> None:
        """Log success message (INFO level, prefixed with [SUCCESS])."""
        self._logger.info(f"[SUCCESS] {message}", extra=kwargs)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance, reusing the one already configured for ``name``."""
    existing = _loggers.get(_qualified(name))
    if existing is not None:
        return existing
    return setup_logging(name)
