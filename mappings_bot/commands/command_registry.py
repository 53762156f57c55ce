"""
Command Registry
Centralized command registration and management
"""

from typing import Any, Awaitable, Callable, Dict, List, Optional

from mappings_bot.commands.arguments import Argument, Flag
from mappings_bot.commands.context import CommandContext
from mappings_bot.utils.logger import get_logger

# Command handler type alias
CommandHandler = Callable[[CommandContext], Awaitable[None]]


class CommandDefinition:
    """Definition of a command."""

    def __init__(
        self,
        name: str,
        description: str = "",
        category: str = "General",
        args: Optional[List[Argument]] = None,
        flags: Optional[List[Flag]] = None,
        examples: Optional[List[str]] = None,
    ):
        self.name = name
        self.description = description
        self.category = category
        self.args = args or []
        self.flags = flags or []
        self.examples = examples or []


class Command:
    """Registered command with definition and handler."""

    def __init__(self, definition: CommandDefinition, handler: CommandHandler):
        self.definition = definition
        self.handler = handler

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def description(self) -> str:
        return self.definition.description

    @property
    def category(self) -> str:
        return self.definition.category

    @property
    def args(self) -> List[Argument]:
        return self.definition.args

    @property
    def flags(self) -> List[Flag]:
        return self.definition.flags

    @property
    def examples(self) -> List[str]:
        return self.definition.examples

    def usage(self, prefix: str = "") -> str:
        parts = [f"{prefix}{self.name}"]
        for flag in self.flags:
            parts.append(f"[-{flag.short}{' <value>' if flag.has_value else ''}]")
        for arg in self.args:
            parts.append(f"<{arg.name}>" if arg.required else f"[{arg.name}]")
        return " ".join(parts)


class CommandRegistry:
    """Centralized command registration and management."""

    def __init__(self):
        self.logger = get_logger("CommandRegistry")
        self.commands: Dict[str, Command] = {}
        self.categories: Dict[str, List[Command]] = {}

    def register(
        self,
        config: Dict[str, Any],
        handler: CommandHandler,
    ) -> "CommandRegistry":
        """
        Register a command.

        Args:
            config: Command configuration dict with keys:
                - name: Command name (required)
                - description: Command description
                - category: Command category
                - args: List of Argument
                - flags: List of Flag
                - examples: List of example usages
            handler: Async function receiving the CommandContext

        Returns:
            Self for chaining

        Raises:
            ValueError: The name is already taken
        """
        definition = CommandDefinition(
            name=config["name"],
            description=config.get("description", ""),
            category=config.get("category", "General"),
            args=config.get("args", []),
            flags=config.get("flags", []),
            examples=config.get("examples", []),
        )

        normalized = definition.name.lower()
        if self.has(normalized):
            raise ValueError(f"Command name already registered: {normalized}")

        command = Command(definition, handler)
        self.commands[normalized] = command

        self.categories.setdefault(definition.category, []).append(command)

        self.logger.debug(f"Registered command: {definition.name}")
        return self

    def get(self, name: str) -> Optional[Command]:
        """
        Get a command by name, ignoring case.

        Args:
            name: Command name

        Returns:
            Command or None if not found
        """
        return self.commands.get(name.lower())

    def has(self, name: str) -> bool:
        return name.lower() in self.commands

    def get_all(self) -> List[Command]:
        return list(self.commands.values())

    def generate_help(self, prefix: str = "") -> str:
        """
        Generate help text for all commands.

        Args:
            prefix: Command prefix shown before each name

        Returns:
            Formatted help string
        """
        lines = [
            "📖 **Mappings Bot Commands**",
            "",
        ]

        for category, commands in self.categories.items():
            icon = self._get_category_icon(category)
            lines.append(f"**{icon} {category}:**")

            for cmd in commands:
                lines.append(f"• `{prefix}{cmd.name}` - {cmd.description}")

            lines.append("")

        return "\n".join(lines).rstrip()

    def generate_command_help(self, name: str, prefix: str = "") -> Optional[str]:
        """
        Generate detailed help for a specific command.

        Args:
            name: Command name
            prefix: Command prefix shown in the usage line

        Returns:
            Formatted help string or None if command not found
        """
        cmd = self.get(name)
        if not cmd:
            return None

        lines = [
            f"📖 **Command:** `{prefix}{cmd.name}`",
            "",
            f"**Description:** {cmd.description}",
            f"**Usage:** `{cmd.usage(prefix)}`",
        ]

        if cmd.args:
            lines.append("**Arguments:**")
            for arg in cmd.args:
                required = "*" if arg.required else ""
                lines.append(f"  • `{arg.name}`{required} - {arg.description}")

        if cmd.flags:
            lines.append("**Flags:**")
            for flag in cmd.flags:
                lines.append(f"  • `{flag.usage()}` - {flag.description}")

        if cmd.examples:
            lines.append("**Examples:**")
            for example in cmd.examples:
                lines.append(f"  • `{prefix}{example}`")

        return "\n".join(lines)

    def _get_category_icon(self, category: str) -> str:
        icons = {
            "Mappings": "🗺️",
            "General": "📋",
        }
        return icons.get(category, "•")
