"""
Command Handler
Handles user command parsing and execution using the Command Registry
"""

from typing import Any, List, Optional, Tuple

from mappings_bot.commands.arguments import Argument, parse_arguments
from mappings_bot.commands.command_registry import Command, CommandRegistry
from mappings_bot.commands.context import CommandContext
from mappings_bot.utils.discord import DiscordUtils
from mappings_bot.utils.error_handler import ErrorHandler, get_error_handler
from mappings_bot.utils.errors import CommandError
from mappings_bot.utils.logger import get_logger

ARG_HELP_COMMAND = Argument("command", "Specific command to get help for", required=False)


class CommandHandler:
    """Handles command parsing and execution."""

    def __init__(
        self,
        client: Any,
        registry: CommandRegistry,
        prefix: str = "!",
        error_handler: Optional[ErrorHandler] = None,
    ):
        self.logger = get_logger("Command")
        self.client = client
        self.registry = registry
        self.prefix = prefix
        self.error_handler = error_handler or get_error_handler()

        self._register_builtin_commands()

    def _register_builtin_commands(self) -> None:
        self.registry.register(
            {
                "name": "help",
                "description": "Show this help message",
                "category": "General",
                "args": [ARG_HELP_COMMAND],
                "examples": ["help", "help mcp"],
            },
            self._cmd_help,
        )

    async def _cmd_help(self, ctx: CommandContext) -> None:
        """Handle the help command."""
        cmd_name = ctx.get_arg(ARG_HELP_COMMAND.name)
        if cmd_name:
            cmd_name = cmd_name.lower()
            if cmd_name.startswith(self.prefix):
                cmd_name = cmd_name[len(self.prefix):]
            help_text = self.registry.generate_command_help(cmd_name, self.prefix)
            if help_text:
                await DiscordUtils.safe_send(ctx.channel, help_text)
            else:
                await DiscordUtils.safe_send(ctx.channel, f"❌ Unknown command: `{cmd_name}`")
        else:
            await DiscordUtils.safe_send(ctx.channel, self.registry.generate_help(self.prefix))

    def parse_command(self, content: str) -> Tuple[str, List[str]]:
        """
        Parse command name and arguments from a prefixed message.

        Args:
            content: Message content with the prefix already removed

        Returns:
            Tuple of (lower-cased command name, args in original case)
        """
        parts = content.split()
        if not parts:
            return "", []
        return parts[0].lower(), parts[1:]

    async def handle(self, message: Any) -> None:
        """
        Handle incoming message.

        Args:
            message: Discord message object
        """
        if getattr(message.author, "bot", False):
            return

        content = (message.content or "").strip()
        if not content.startswith(self.prefix):
            return

        command_name, tokens = self.parse_command(content[len(self.prefix):])
        if not command_name:
            return

        command = self.registry.get(command_name)
        if not command:
            return

        if self.error_handler.is_circuit_broken(command.name):
            await DiscordUtils.safe_send(
                message.channel,
                f"❌ `{command.name}` is temporarily disabled, try again later",
            )
            return

        await self.execute(command, message, tokens)

    async def execute(self, command: Command, message: Any, tokens: List[str]) -> None:
        """
        Parse arguments and run a command, replying with any error.

        Args:
            command: Resolved command
            message: Triggering message
            tokens: Argument tokens following the command name
        """
        try:
            parsed = parse_arguments(tokens, command.args, command.flags)
            ctx = CommandContext(message, command.name, parsed.args, parsed.flags)
            self.logger.debug(f"Executing: {command.name} {tokens}")
            await command.handler(ctx)
        except CommandError as error:
            self.logger.warning(f"Command {command.name} rejected: {error.message}")
            await DiscordUtils.safe_send(message.channel, f"❌ {error.message}")
        except Exception as error:
            self.error_handler.handle_exception(error, command.name)
            await DiscordUtils.safe_send(
                message.channel,
                f"❌ Something went wrong while running `{command.name}`.",
            )
