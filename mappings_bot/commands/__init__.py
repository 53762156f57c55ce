"""
Command system for the mappings bot.
"""

from .arguments import Argument, Flag, parse_arguments
from .context import CommandContext
from .command_registry import Command, CommandDefinition, CommandRegistry
from .command_handler import CommandHandler
from .mappings_command import CommandFamily, MappingsCommand, create_default_families

__all__ = [
    "Argument",
    "Flag",
    "parse_arguments",
    "CommandContext",
    "Command",
    "CommandDefinition",
    "CommandRegistry",
    "CommandHandler",
    "CommandFamily",
    "MappingsCommand",
    "create_default_families",
]
