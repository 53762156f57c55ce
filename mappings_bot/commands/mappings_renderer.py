"""
Mappings Renderer
Shapes lookup results into a compact embed or a paginated list
"""

from typing import Any, List

from mappings_bot.commands.context import CommandContext
from mappings_bot.mappings.types import Mapping
from mappings_bot.utils.pagination import ListMessageBuilder, PaginatedMessage

PAGE_SIZE = 5

# Above this many results the typing indicator stays on while rendering
TYPING_THRESHOLD = 20

NO_RESULTS = "No information found!"


class MappingsRenderer:
    """Renders one family's mappings with its name and color."""

    def __init__(self, name: str, color: int):
        self.name = name
        self.color = color

    def build(self, ctx: CommandContext, mappings: List[Mapping], version: str) -> PaginatedMessage:
        return (
            ListMessageBuilder(f"{self.name} Mappings")
            .objects_per_page(PAGE_SIZE)
            .show_index(False)
            .add_objects(mappings)
            .string_func(lambda m: m.format_message(version))
            .color(self.color)
            .build(ctx)
        )

    async def render(self, ctx: CommandContext, mappings: List[Mapping], version: str) -> Any:
        """
        Reply with ``mappings`` in the shape that fits their count.

        No results gives a plain notice. A single page is sent as a bare
        embed without title or buttons; more than that gets the interactive
        paginator.

        Returns:
            The sent message
        """
        async with ctx.typing(len(mappings) > TYPING_THRESHOLD):
            if not mappings:
                return await ctx.reply(NO_RESULTS)

            message = self.build(ctx, mappings, version)
            if not message.is_paginated:
                embed = message.get_message(0)
                embed.title = None
                return await ctx.reply(embed=embed)

            return await message.send()
