"""
Discord Utilities
Helper functions for Discord interactions
"""

from typing import Any, Optional

import discord

from mappings_bot.utils.logger import get_logger

logger = get_logger("DiscordUtils")

# Hard limits imposed by the Discord API
MESSAGE_LIMIT = 2000
EMBED_DESCRIPTION_LIMIT = 4096


class DiscordUtils:
    """Utility class for Discord-related helper functions."""

    @staticmethod
    async def safe_delete(message: Any) -> bool:
        """
        Delete a message, logging instead of raising on API errors.

        Args:
            message: Discord message

        Returns:
            True if deleted successfully, False otherwise
        """
        if not message or not hasattr(message, "delete"):
            return False
        try:
            await message.delete()
            return True
        except discord.HTTPException as e:
            logger.debug(f"Could not delete message: {e}")
            return False

    @staticmethod
    async def safe_send(
        channel: Any,
        content: Optional[str] = None,
        *,
        embed: Optional[discord.Embed] = None,
        view: Optional[discord.ui.View] = None,
    ) -> Optional[Any]:
        """
        Send a message to a channel, logging instead of raising on API errors.

        Args:
            channel: Discord channel
            content: Message content
            embed: Optional embed
            view: Optional interactive view

        Returns:
            Sent message or None if failed
        """
        if not channel or not hasattr(channel, "send"):
            return None

        kwargs = {}
        if content is not None:
            kwargs["content"] = DiscordUtils.truncate(content, MESSAGE_LIMIT)
        if embed is not None:
            kwargs["embed"] = embed
        if view is not None:
            kwargs["view"] = view

        try:
            return await channel.send(**kwargs)
        except discord.HTTPException as e:
            logger.warning(f"Could not send message: {e}")
            return None

    @staticmethod
    def truncate(text: str, limit: int) -> str:
        """Cut ``text`` to ``limit`` characters, marking the cut with an ellipsis."""
        if len(text) <= limit:
            return text
        return text[: limit - 1] + "…"
