"""Pytest configuration and fixtures for mappings bot tests."""

import asyncio
from types import SimpleNamespace
from typing import List, Optional, Set
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from mappings_bot.commands.context import CommandContext
from mappings_bot.commands.mappings_command import CommandFamily
from mappings_bot.mappings.downloader import MappingDownloader
from mappings_bot.mappings.types import Mapping, MappingType
from mappings_bot.repositories.guild_storage import JsonStorageBackend

GUILD_ID = 42
AUTHOR_ID = 7


class FakeTyping:
    """Async context manager recording typing indicator use."""

    def __init__(self, channel: "FakeChannel"):
        self.channel = channel

    async def __aenter__(self):
        self.channel.typing_entered += 1
        self.channel.typing_active = True
        return self

    async def __aexit__(self, *exc):
        self.channel.typing_active = False
        return False


class FakeChannel:
    """Channel that keeps every message sent to it."""

    def __init__(self, permissions: Optional[discord.Permissions] = None):
        self.sent: List[MagicMock] = []
        self.send = AsyncMock(side_effect=self._send)
        self.typing_entered = 0
        self.typing_active = False
        self.permissions = permissions or discord.Permissions.none()

    async def _send(self, **kwargs):
        message = MagicMock()
        message.kwargs = kwargs
        message.delete = AsyncMock()
        message.edit = AsyncMock()
        self.sent.append(message)
        return message

    def typing(self) -> FakeTyping:
        return FakeTyping(self)

    def permissions_for(self, member):
        return self.permissions

    def contents(self) -> List[Optional[str]]:
        return [m.kwargs.get("content") for m in self.sent]


def make_message(content: str = "", *, guild: bool = True, permissions=None, bot: bool = False):
    """Build a message in a guild channel, or a DM with ``guild=False``."""
    return SimpleNamespace(
        content=content,
        channel=FakeChannel(permissions),
        author=SimpleNamespace(id=AUTHOR_ID, bot=bot),
        guild=SimpleNamespace(id=GUILD_ID) if guild else None,
    )


def make_context(name: str = "mcp", args=None, flags=None, **message_kwargs) -> CommandContext:
    return CommandContext(make_message(**message_kwargs), name, args or {}, flags or {})


def make_mappings(count: int, mapping_type: MappingType = MappingType.METHOD) -> List[Mapping]:
    return [
        Mapping(mapping_type, f"func_{1000 + i}_a", f"name{i}", owner="Foo")
        for i in range(count)
    ]


class FakeDownloader(MappingDownloader):
    """Answers lookups after ``delay`` seconds with a fixed result."""

    def __init__(
        self,
        result=None,
        *,
        delay: float = 0.0,
        error: Optional[BaseException] = None,
        versions: Optional[List[str]] = None,
        unknown: Optional[Set[str]] = None,
    ):
        super().__init__("FakeDownloader")
        self.result = result if result is not None else []
        self.delay = delay
        self.lookup_error = error
        self.versions = versions if versions is not None else ["1.12", "1.12.2", "1.14.4"]
        self.unknown = unknown or set()
        self.calls = []

    def get_latest_version(self) -> str:
        if not self.versions:
            raise LookupError("no versions")
        return self.versions[-1]

    def get_known_versions(self) -> Set[str]:
        return set(self.versions)

    def load_database(self, version):
        return None

    async def lookup(self, name, version, mapping_type=None):
        self.calls.append((name, version, mapping_type))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.lookup_error is not None:
            raise self.lookup_error
        if version in self.unknown:
            return None
        return list(self.result)


@pytest.fixture
def downloader():
    return FakeDownloader(make_mappings(3))


@pytest.fixture
def family(downloader):
    return CommandFamily("MCP", 0x810000, downloader)


@pytest.fixture
def backend(tmp_path):
    return JsonStorageBackend(tmp_path / "data")


@pytest.fixture
def manage_server():
    return discord.Permissions(manage_guild=True)


class AsyncContext:
    """Async context manager yielding a fixed value."""

    def __init__(self, value=None):
        self.value = value

    async def __aenter__(self):
        return self.value

    async def __aexit__(self, *exc):
        return False


@pytest.fixture
def pg_pool():
    """asyncpg pool mock whose connection is exposed as ``pool.conn``."""
    conn = MagicMock()
    conn.fetch = AsyncMock(return_value=[])
    conn.executemany = AsyncMock()
    conn.execute = AsyncMock()
    conn.transaction = MagicMock(return_value=AsyncContext())

    pool = MagicMock()
    pool.acquire = MagicMock(return_value=AsyncContext(conn))
    pool.conn = conn
    return pool
