"""
Command Context
Everything a command handler needs about one invocation
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

import discord

from mappings_bot.commands.arguments import Flag


class CommandContext:
    """One command invocation: the triggering message plus parsed input."""

    def __init__(
        self,
        message: Any,
        command_name: str,
        args: Optional[Dict[str, str]] = None,
        flags: Optional[Dict[Flag, Optional[str]]] = None,
    ):
        self.message = message
        self.command_name = command_name
        self.args = args or {}
        self.flags = flags or {}

    @property
    def channel(self) -> Any:
        return self.message.channel

    @property
    def author(self) -> Any:
        return self.message.author

    @property
    def is_private(self) -> bool:
        return self.message.guild is None

    @property
    def guild_id(self) -> Optional[int]:
        guild = self.message.guild
        return guild.id if guild is not None else None

    def has_arg(self, name: str) -> bool:
        return name in self.args

    def get_arg(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.args.get(name, default)

    def has_flag(self, flag: Flag) -> bool:
        return flag in self.flags

    def get_flag(self, flag: Flag) -> Optional[str]:
        return self.flags.get(flag)

    def author_permissions(self) -> discord.Permissions:
        """Permissions of the author in the invoking channel."""
        return self.channel.permissions_for(self.author)

    async def reply(
        self,
        content: Optional[str] = None,
        *,
        embed: Optional[discord.Embed] = None,
        view: Optional[discord.ui.View] = None,
    ) -> Any:
        """
        Send a message to the invoking channel.

        Returns:
            The sent message
        """
        kwargs: Dict[str, Any] = {}
        if content is not None:
            kwargs["content"] = content
        if embed is not None:
            kwargs["embed"] = embed
        if view is not None:
            kwargs["view"] = view
        return await self.channel.send(**kwargs)

    @asynccontextmanager
    async def typing(self, active: bool = True) -> AsyncIterator[None]:
        """
        Show the typing indicator for the duration of the block.

        The indicator is released on every exit path. With ``active`` False
        this does nothing.
        """
        if not active:
            yield
            return

        async with self.channel.typing():
            yield
