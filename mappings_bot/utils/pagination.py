"""
Paginated Messages
Builds lists of embeds from arbitrary objects and sends them with
previous/next buttons when they span more than one page
"""

from typing import Any, Callable, Generic, Iterable, List, Optional, TypeVar

import discord

from mappings_bot.utils.discord import EMBED_DESCRIPTION_LIMIT, DiscordUtils

T = TypeVar("T")

PAGE_TIMEOUT_SECONDS = 300


class PaginatorView(discord.ui.View):
    """Previous/next buttons flipping through a PaginatedMessage."""

    def __init__(self, paginated: "PaginatedMessage", author_id: Optional[int], timeout: float = PAGE_TIMEOUT_SECONDS):
        super().__init__(timeout=timeout)
        self.paginated = paginated
        self.author_id = author_id
        self.page = 0
        self.message: Optional[Any] = None

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        if self.author_id is not None and interaction.user.id != self.author_id:
            await interaction.response.send_message(
                "Only the person who ran the command can flip pages.",
                ephemeral=True,
            )
            return False
        return True

    async def show_page(self, interaction: discord.Interaction, page: int) -> None:
        self.page = page % self.paginated.page_count
        await interaction.response.edit_message(embed=self.paginated.pages[self.page], view=self)

    @discord.ui.button(emoji="◀️", style=discord.ButtonStyle.secondary)
    async def previous_page(self, interaction: discord.Interaction, button: discord.ui.Button) -> None:
        await self.show_page(interaction, self.page - 1)

    @discord.ui.button(emoji="▶️", style=discord.ButtonStyle.secondary)
    async def next_page(self, interaction: discord.Interaction, button: discord.ui.Button) -> None:
        await self.show_page(interaction, self.page + 1)

    async def on_timeout(self) -> None:
        for item in self.children:
            item.disabled = True
        if self.message is not None:
            try:
                await self.message.edit(view=self)
            except discord.HTTPException:
                pass


class PaginatedMessage:
    """A built list message, one embed per page."""

    def __init__(self, ctx: Any, pages: List[discord.Embed]):
        self.ctx = ctx
        self.pages = pages

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def is_paginated(self) -> bool:
        return self.page_count > 1

    def get_message(self, page: int) -> discord.Embed:
        """Return a copy of one page, safe to modify."""
        return self.pages[page].copy()

    async def send(self) -> Any:
        """
        Send the first page, with navigation buttons if there are more.

        Returns:
            The sent message
        """
        if not self.is_paginated:
            return await self.ctx.reply(embed=self.pages[0])

        view = PaginatorView(self, getattr(self.ctx.author, "id", None))
        view.message = await self.ctx.reply(embed=self.pages[0], view=view)
        return view.message


class ListMessageBuilder(Generic[T]):
    """
    Fluent builder turning a list of objects into a PaginatedMessage.

    Example::

        msg = (ListMessageBuilder("MCP Mappings")
               .objects_per_page(5)
               .add_objects(mappings)
               .string_func(str)
               .build(ctx))
    """

    def __init__(self, title: str):
        self._title = title
        self._per_page = 10
        self._show_index = True
        self._objects: List[T] = []
        self._string_func: Callable[[T], str] = str
        self._color: Optional[int] = None

    def objects_per_page(self, count: int) -> "ListMessageBuilder[T]":
        if count < 1:
            raise ValueError("objects_per_page must be at least 1")
        self._per_page = count
        return self

    def show_index(self, show: bool) -> "ListMessageBuilder[T]":
        self._show_index = show
        return self

    def add_objects(self, objects: Iterable[T]) -> "ListMessageBuilder[T]":
        self._objects.extend(objects)
        return self

    def string_func(self, func: Callable[[T], str]) -> "ListMessageBuilder[T]":
        self._string_func = func
        return self

    def color(self, color: int) -> "ListMessageBuilder[T]":
        self._color = color
        return self

    def build(self, ctx: Any) -> PaginatedMessage:
        chunks = [
            self._objects[i:i + self._per_page]
            for i in range(0, len(self._objects), self._per_page)
        ] or [[]]

        pages = []
        for page_number, chunk in enumerate(chunks):
            lines = []
            for offset, obj in enumerate(chunk):
                text = self._string_func(obj)
                if self._show_index:
                    text = f"{page_number * self._per_page + offset + 1}. {text}"
                lines.append(text)

            embed = discord.Embed(
                title=self._title,
                description=DiscordUtils.truncate("\n".join(lines), EMBED_DESCRIPTION_LIMIT),
                color=self._color,
            )
            if len(chunks) > 1:
                embed.set_footer(text=f"Page {page_number + 1}/{len(chunks)}")
            pages.append(embed)

        return PaginatedMessage(ctx, pages)
