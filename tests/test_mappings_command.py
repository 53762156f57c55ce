"""Tests for the mappings command family and its typed variants."""

from unittest.mock import AsyncMock

import pytest

from mappings_bot.commands.command_registry import CommandRegistry
from mappings_bot.commands.mappings_command import (
    FLAG_DEFAULT_VERSION,
    CommandFamily,
    MappingsCommand,
    create_default_families,
    resolve_version,
)
from mappings_bot.commands.mappings_renderer import NO_RESULTS
from mappings_bot.managers.lookup_manager import BUILDING_NOTICE
from mappings_bot.mappings.types import MappingType
from mappings_bot.repositories.guild_storage import GuildStorage
from mappings_bot.utils.errors import (
    CommandError,
    InvalidVersion,
    LookupFailure,
    PermissionDenied,
    UnknownVersion,
)

from .conftest import GUILD_ID, FakeDownloader, make_context, make_mappings


class TestCommandTree:
    def test_children_cover_every_type_in_order(self, family):
        root = MappingsCommand(family)
        children = root.children()

        assert [c.mapping_type for c in children] == list(MappingType)
        assert len({c.name for c in children}) == len(children)

    def test_child_names(self, family):
        names = [c.name for c in MappingsCommand(family).walk()]
        assert names == ["mcp", "mcpc", "mcpm", "mcpf", "mcpp"]

    def test_typed_variant_has_no_children(self, family):
        child = MappingsCommand(family).children()[1]
        assert child.children() == []
        assert not child.is_root

    def test_children_share_family(self, family):
        root = MappingsCommand(family)
        assert all(c.family is family for c in root.children())

    def test_children_are_cached(self, family):
        root = MappingsCommand(family)
        assert [id(c) for c in root.children()] == [id(c) for c in root.children()]

    def test_descriptions(self, family):
        root = MappingsCommand(family)
        assert root.describe() == "Looks up MCP info."
        assert root.children()[1].describe() == "Looks up MCP info for a given method."

    def test_register_adds_whole_tree(self, family):
        registry = CommandRegistry()
        MappingsCommand(family).register(registry)

        assert [c.name for c in registry.get_all() if c.category == "Mappings"] == ["mcp", "mcpc", "mcpm", "mcpf", "mcpp"]
        assert registry.get("mcpf").description == "Looks up MCP info for a given field."

    def test_default_families(self, tmp_path):
        families = create_default_families(str(tmp_path))
        assert [(f.key, f.color) for f in families] == [("mcp", 0x810000), ("yarn", 0xDBD0B4)]


class TestStorage:
    def test_storage_before_initialize_raises(self, family):
        with pytest.raises(RuntimeError):
            MappingsCommand(family).storage

    @pytest.mark.asyncio
    async def test_initialize_loads_once(self, family, backend):
        root = MappingsCommand(family)
        for command in root.walk():
            await command.initialize(backend)

        storages = {id(c.storage) for c in root.walk()}
        assert len(storages) == 1

    @pytest.mark.asyncio
    async def test_initialize_keeps_existing_storage(self, family, backend):
        root = MappingsCommand(family)
        await root.initialize(backend)
        root.storage.put(GUILD_ID, "1.12")

        await root.children()[0].initialize(backend)
        assert root.children()[0].storage.get(GUILD_ID) == "1.12"

    @pytest.mark.asyncio
    async def test_persist_writes_family_storage(self, family, backend):
        root = MappingsCommand(family)
        await root.initialize(backend)
        root.storage.put(GUILD_ID, "1.12")

        await root.children()[2].persist()
        await root.persist()

        loaded = await backend.load("mcp")
        assert loaded.get(GUILD_ID) == "1.12"

    @pytest.mark.asyncio
    async def test_persist_without_storage_is_noop(self, family, backend):
        await MappingsCommand(family).persist(backend)
        assert not backend.path_for("mcp").exists()


class TestVersionResolution:
    def test_explicit_beats_default(self, downloader):
        storage = GuildStorage("mcp", {str(GUILD_ID): "1.12"})
        ctx = make_context(args={"version": "1.12.2"})
        assert resolve_version(ctx, storage, downloader) == "1.12.2"

    def test_default_beats_latest(self, downloader):
        storage = GuildStorage("mcp", {str(GUILD_ID): "1.12"})
        assert resolve_version(make_context(), storage, downloader) == "1.12"

    def test_latest_without_default(self, downloader):
        assert resolve_version(make_context(), GuildStorage("mcp"), downloader) == "1.14.4"

    def test_unset_default_means_latest(self, downloader):
        storage = GuildStorage("mcp")
        storage.put(GUILD_ID, None)
        assert resolve_version(make_context(), storage, downloader) == "1.14.4"

    def test_empty_default_means_latest(self, downloader):
        storage = GuildStorage("mcp", {str(GUILD_ID): ""})
        assert resolve_version(make_context(), storage, downloader) == "1.14.4"

    def test_dm_ignores_guild_defaults(self, downloader):
        storage = GuildStorage("mcp", {str(GUILD_ID): "1.12"})
        assert resolve_version(make_context(guild=False), storage, downloader) == "1.14.4"

    def test_no_versions_available(self):
        with pytest.raises(CommandError):
            resolve_version(make_context(), GuildStorage("mcp"), FakeDownloader(versions=[]))


class TestDefaultVersionFlag:
    @pytest.mark.asyncio
    async def test_requires_manage_server(self, family, backend):
        root = MappingsCommand(family)
        await root.initialize(backend)
        root.storage.put(GUILD_ID, "1.12")

        ctx = make_context(flags={FLAG_DEFAULT_VERSION: "1.12.2"})
        with pytest.raises(PermissionDenied):
            await root.process(ctx)

        assert root.storage.get(GUILD_ID) == "1.12"
        assert ctx.channel.sent == []

    @pytest.mark.asyncio
    async def test_latest_unsets_default(self, family, backend, manage_server):
        root = MappingsCommand(family)
        await root.initialize(backend)
        root.storage.put(GUILD_ID, "1.12")

        ctx = make_context(flags={FLAG_DEFAULT_VERSION: "latest"}, permissions=manage_server)
        await root.process(ctx)

        assert root.storage.get(GUILD_ID) is None
        assert ctx.channel.contents() == ["Set default version for this guild to latest"]

    @pytest.mark.asyncio
    async def test_sets_known_version_and_persists(self, family, backend, manage_server):
        root = MappingsCommand(family)
        await root.initialize(backend)

        ctx = make_context(flags={FLAG_DEFAULT_VERSION: "1.12"}, permissions=manage_server)
        await root.children()[1].process(ctx)

        assert root.storage.get(GUILD_ID) == "1.12"
        assert (await backend.load("mcp")).get(GUILD_ID) == "1.12"
        assert ctx.channel.contents() == ["Set default version for this guild to 1.12"]

    @pytest.mark.asyncio
    async def test_unknown_version_rejected(self, family, backend, manage_server):
        root = MappingsCommand(family)
        await root.initialize(backend)

        ctx = make_context(flags={FLAG_DEFAULT_VERSION: "2.0"}, permissions=manage_server)
        with pytest.raises(InvalidVersion):
            await root.process(ctx)

        assert root.storage.get(GUILD_ID) is None

    @pytest.mark.asyncio
    async def test_failed_save_keeps_previous_default(self, family, backend, manage_server):
        root = MappingsCommand(family)
        await root.initialize(backend)
        root.storage.put(GUILD_ID, "1.12")
        backend.save = AsyncMock(side_effect=OSError("disk full"))

        ctx = make_context(flags={FLAG_DEFAULT_VERSION: "1.12.2"}, permissions=manage_server)
        with pytest.raises(OSError):
            await root.process(ctx)

        assert root.storage.get(GUILD_ID) == "1.12"
        assert ctx.channel.sent == []

    @pytest.mark.asyncio
    async def test_rejected_in_dm(self, family, backend, manage_server):
        root = MappingsCommand(family)
        await root.initialize(backend)

        ctx = make_context(flags={FLAG_DEFAULT_VERSION: "latest"}, guild=False, permissions=manage_server)
        with pytest.raises(CommandError):
            await root.process(ctx)

    @pytest.mark.asyncio
    async def test_flag_skips_lookup(self, family, backend, manage_server, downloader):
        root = MappingsCommand(family)
        await root.initialize(backend)

        ctx = make_context(args={"name": "foo"}, flags={FLAG_DEFAULT_VERSION: "latest"}, permissions=manage_server)
        await root.process(ctx)

        assert downloader.calls == []


class TestLookup:
    @pytest.mark.asyncio
    async def test_fast_lookup_replies_with_single_embed(self, backend):
        family = CommandFamily("MCP", 0x810000, FakeDownloader(make_mappings(3), delay=0.1))
        root = MappingsCommand(family)
        await root.initialize(backend)

        ctx = make_context(args={"name": "name1"})
        await root.process(ctx)

        assert len(ctx.channel.sent) == 1
        sent = ctx.channel.sent[0].kwargs
        assert "view" not in sent
        assert sent["embed"].title is None
        assert BUILDING_NOTICE not in ctx.channel.contents()

    @pytest.mark.asyncio
    async def test_slow_lookup_shows_notice_and_paginates(self, backend):
        family = CommandFamily("MCP", 0x810000, FakeDownloader(make_mappings(7), delay=0.3))
        family.lookups.fast_path_timeout = 0.05
        root = MappingsCommand(family)
        await root.initialize(backend)

        ctx = make_context(args={"name": "name1"})
        await root.process(ctx)

        notice, reply = ctx.channel.sent
        assert notice.kwargs["content"] == BUILDING_NOTICE
        notice.delete.assert_awaited_once()

        view = reply.kwargs["view"]
        pages = view.paginated.pages
        assert [p.description.count("**MC ") for p in pages] == [5, 2]

    @pytest.mark.asyncio
    async def test_uses_resolved_version_and_type(self, family, backend, downloader):
        root = MappingsCommand(family)
        await root.initialize(backend)
        root.storage.put(GUILD_ID, "1.12")

        await root.children()[2].process(make_context(args={"name": "`inventory`"}))

        assert downloader.calls == [("inventory", "1.12", MappingType.FIELD)]

    @pytest.mark.asyncio
    async def test_unknown_version(self, backend):
        family = CommandFamily("MCP", 0x810000, FakeDownloader(unknown={"99w99a"}))
        root = MappingsCommand(family)
        await root.initialize(backend)

        ctx = make_context(args={"name": "foo", "version": "99w99a"})
        with pytest.raises(UnknownVersion) as info:
            await root.process(ctx)

        assert info.value.version == "99w99a"
        assert "99w99a" in info.value.message
        assert ctx.channel.sent == []

    @pytest.mark.asyncio
    async def test_empty_result(self, backend):
        family = CommandFamily("MCP", 0x810000, FakeDownloader([]))
        root = MappingsCommand(family)
        await root.initialize(backend)

        ctx = make_context(args={"name": "missing"})
        await root.process(ctx)

        assert ctx.channel.contents() == [NO_RESULTS]

    @pytest.mark.asyncio
    async def test_failed_lookup(self, backend):
        cause = RuntimeError("broken jar")
        family = CommandFamily("MCP", 0x810000, FakeDownloader(error=cause))
        root = MappingsCommand(family)
        await root.initialize(backend)

        with pytest.raises(LookupFailure) as info:
            await root.process(make_context(args={"name": "foo"}))

        assert info.value.cause is cause

    @pytest.mark.asyncio
    async def test_blank_name_rejected(self, family, backend):
        root = MappingsCommand(family)
        await root.initialize(backend)

        with pytest.raises(CommandError):
            await root.process(make_context(args={"name": "``"}))
