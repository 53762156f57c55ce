"""
Utility modules for the mappings bot.
"""

from .logger import LoggerMixin, get_logger, set_default_level, setup_logging
from .discord import DiscordUtils
from .validation import ValidationResult, ValidationUtils
from .error_handler import ErrorHandler, get_error_handler, setup_error_handler

__all__ = [
    "LoggerMixin",
    "get_logger",
    "set_default_level",
    "setup_logging",
    "DiscordUtils",
    "ValidationUtils",
    "ValidationResult",
    "ErrorHandler",
    "get_error_handler",
    "setup_error_handler",
]
