"""
Mappings Commands
One lookup command per mapping family, plus one typed variant per kind of
symbol, all sharing the family's downloader and per-guild default versions
"""

import asyncio
from pathlib import Path
from typing import Any, List, Optional

from mappings_bot.commands.arguments import Argument, Flag
from mappings_bot.commands.command_registry import CommandRegistry
from mappings_bot.commands.context import CommandContext
from mappings_bot.commands.mappings_renderer import MappingsRenderer
from mappings_bot.managers.lookup_manager import LookupManager, LookupRequest, LookupStatus
from mappings_bot.mappings.downloader import JsonMappingDownloader, MappingDownloader
from mappings_bot.mappings.types import MappingType
from mappings_bot.repositories.guild_storage import GuildStorage, StorageBackend
from mappings_bot.utils.errors import (
    CommandError,
    InvalidVersion,
    LookupFailure,
    PermissionDenied,
    UnknownVersion,
)
from mappings_bot.utils.logger import get_logger
from mappings_bot.utils.permissions import MANAGE_SERVER
from mappings_bot.utils.validation import ValidationUtils

logger = get_logger("Mappings")

FLAG_DEFAULT_VERSION = Flag(
    "v",
    "version",
    'Set the default lookup version for this guild. Use "latest" to unset. Requires manage server permissions.',
    has_value=True,
)

ARG_NAME = Argument(
    "name",
    "The name to lookup. Makes a best guess for matching, but for best results use an exact name "
    "or intermediate ID (i.e. method_1234 -> 1234).",
    required=True,
    required_unless=(FLAG_DEFAULT_VERSION,),
)

ARG_VERSION = Argument(
    "version",
    "The MC version to consider. If not given, will use the default for this guild, or else latest.",
    required=False,
)


class CommandFamily:
    """
    Configuration shared by a root mappings command and its typed variants.

    Name, color, downloader and key are fixed at construction. The storage
    handle is attached once, by whichever variant initializes first.
    """

    def __init__(self, name: str, color: int, downloader: MappingDownloader, key: Optional[str] = None):
        self.name = name
        self.color = color
        self.downloader = downloader
        self.key = key or name.lower()
        self.lookups = LookupManager(downloader)
        self.renderer = MappingsRenderer(name, color)
        self.storage: Optional[GuildStorage] = None
        self.backend: Optional[StorageBackend] = None
        self._init_lock = asyncio.Lock()

    async def attach_storage(self, backend: StorageBackend) -> GuildStorage:
        """Load and attach storage unless it is already attached."""
        async with self._init_lock:
            if self.storage is None:
                self.storage = await backend.load(self.key)
                self.backend = backend
                logger.debug(f"Attached storage for {self.key}")
            return self.storage


def resolve_version(ctx: CommandContext, storage: GuildStorage, downloader: MappingDownloader) -> str:
    """
    Pick the version a lookup runs against.

    Explicit argument first; then, outside DMs, the guild's stored default;
    then the downloader's latest version.
    """
    explicit = ctx.get_arg(ARG_VERSION.name)
    if explicit:
        return explicit

    if not ctx.is_private:
        stored = storage.get(ctx.guild_id)
        if stored:
            return stored

    try:
        return downloader.get_latest_version()
    except LookupError as e:
        raise CommandError("No mapping versions are available right now.") from e


class MappingsCommand:
    """
    A node of a family's command tree.

    The root (no mapping type) searches every kind of symbol; each typed
    child searches one kind and is named ``<family key><type key>``.
    """

    def __init__(self, family: CommandFamily, mapping_type: Optional[MappingType] = None):
        self.family = family
        self.mapping_type = mapping_type
        self._children: Optional[List["MappingsCommand"]] = None

    @property
    def name(self) -> str:
        if self.mapping_type is None:
            return self.family.key
        return self.family.key + self.mapping_type.key

    @property
    def is_root(self) -> bool:
        return self.mapping_type is None

    @property
    def storage(self) -> GuildStorage:
        if self.family.storage is None:
            raise RuntimeError(f"Command {self.name} used before initialize()")
        return self.family.storage

    def children(self) -> List["MappingsCommand"]:
        """Typed variants, one per MappingType in declaration order; none for a typed variant."""
        if not self.is_root:
            return []
        if self._children is None:
            self._children = [MappingsCommand(self.family, mapping_type) for mapping_type in MappingType]
        return list(self._children)

    def walk(self) -> List["MappingsCommand"]:
        """This command followed by all of its children."""
        return [self] + self.children()

    def describe(self) -> str:
        if self.mapping_type is None:
            return f"Looks up {self.family.name} info."
        return f"Looks up {self.family.name} info for a given {self.mapping_type.name.lower()}."

    def examples(self) -> List[str]:
        if self.is_root:
            return [f"{self.name} func_1234_a", f"{self.name} getFoo 1.12.2", f"{self.name} -v latest"]
        return [f"{self.name} 1234"]

    def register(self, registry: CommandRegistry) -> None:
        """Register this command and its children."""
        for command in self.walk():
            registry.register(
                {
                    "name": command.name,
                    "description": command.describe(),
                    "category": "Mappings",
                    "args": [ARG_NAME, ARG_VERSION],
                    "flags": [FLAG_DEFAULT_VERSION],
                    "examples": command.examples(),
                },
                command.process,
            )

    async def initialize(self, backend: StorageBackend) -> None:
        """Attach the family storage; safe to call on any variant, in any order."""
        await self.family.attach_storage(backend)

    async def persist(self, backend: Optional[StorageBackend] = None) -> None:
        """Save the family storage; safe to call on any variant, any number of times."""
        backend = backend or self.family.backend
        if backend is None or self.family.storage is None:
            return
        await backend.save(self.family.storage)

    async def set_default_version(self, ctx: CommandContext, value: Optional[str]) -> None:
        """
        Handle the default-version flag.

        Args:
            ctx: Invocation carrying the flag
            value: Flag value, a known version or ``latest``

        Raises:
            PermissionDenied: The author cannot manage the server
            InvalidVersion: ``value`` is neither known nor ``latest``
        """
        if ctx.is_private:
            raise CommandError("Default versions can only be set in a server.")

        if not MANAGE_SERVER.matches(ctx.author_permissions()):
            raise PermissionDenied()

        check = ValidationUtils.validate_version(value, self.family.downloader.get_known_versions())
        if not check:
            raise InvalidVersion(value or "")

        previous = self.storage.get(ctx.guild_id)
        self.storage.put(ctx.guild_id, check.value)
        try:
            await self.persist()
        except Exception:
            self.storage.put(ctx.guild_id, previous)
            raise

        logger.info(f"Default {self.family.key} version for guild {ctx.guild_id} set to {check.sanitized}")
        await ctx.reply(f"Set default version for this guild to {check.sanitized}")

    async def process(self, ctx: CommandContext) -> Any:
        """Run one invocation of this command."""
        if ctx.has_flag(FLAG_DEFAULT_VERSION):
            await self.set_default_version(ctx, ctx.get_flag(FLAG_DEFAULT_VERSION))
            return None

        version = resolve_version(ctx, self.storage, self.family.downloader)

        name_check = ValidationUtils.validate_lookup_name(ctx.get_arg(ARG_NAME.name))
        if not name_check:
            raise CommandError(name_check.error or "Invalid name.")

        request = LookupRequest(name_check.sanitized, version, self.mapping_type)
        result = await self.family.lookups.lookup(ctx, request)

        if result.status is LookupStatus.UNKNOWN_VERSION:
            raise UnknownVersion(version)
        if result.status is LookupStatus.FAILED:
            raise LookupFailure(request.name, version, result.error) from result.error

        return await self.family.renderer.render(ctx, result.mappings or [], version)


def create_default_families(mappings_dir: str) -> List[CommandFamily]:
    """
    Build the MCP and Yarn families.

    Args:
        mappings_dir: Directory holding ``mcp/`` and ``yarn/`` databases

    Returns:
        The families, in registration order
    """
    root = Path(mappings_dir)
    return [
        CommandFamily("MCP", 0x810000, JsonMappingDownloader(root / "mcp", "MCPDownloader")),
        CommandFamily("Yarn", 0xDBD0B4, JsonMappingDownloader(root / "yarn", "YarnDownloader")),
    ]
