"""Tests for the command registry and help text."""

import pytest

from mappings_bot.commands.arguments import Argument, Flag
from mappings_bot.commands.command_registry import CommandRegistry


async def noop(ctx):
    return None


@pytest.fixture
def registry():
    registry = CommandRegistry()
    registry.register(
        {
            "name": "mcp",
            "description": "Looks up MCP info.",
            "category": "Mappings",
            "args": [Argument("name", "Name"), Argument("version", "Version", required=False)],
            "flags": [Flag("v", "version", "Set default", has_value=True)],
            "examples": ["mcp getFoo"],
        },
        noop,
    )
    return registry


def test_get_ignores_case(registry):
    assert registry.get("MCP").name == "mcp"
    assert registry.has("Mcp")
    assert registry.get("yarn") is None


def test_duplicate_name_rejected(registry):
    with pytest.raises(ValueError):
        registry.register({"name": "mcp"}, noop)


def test_duplicate_name_ignores_case(registry):
    with pytest.raises(ValueError):
        registry.register({"name": "MCP"}, noop)


def test_help_groups_by_category(registry):
    registry.register({"name": "ping", "description": "Pong."}, noop)
    text = registry.generate_help("!")
    assert len(registry.get_all()) == 2
    assert text.index("Mappings:") < text.index("`!mcp`") < text.index("General:") < text.index("`!ping`")


def test_usage(registry):
    assert registry.get("mcp").usage("!") == "!mcp [-v <value>] <name> [version]"


def test_generate_help(registry):
    text = registry.generate_help("!")
    assert text.startswith("📖 **Mappings Bot Commands**")
    assert "🗺️ Mappings" in text
    assert "`!mcp` - Looks up MCP info." in text


def test_generate_command_help(registry):
    text = registry.generate_command_help("mcp", "!")
    assert "**Usage:** `!mcp [-v <value>] <name> [version]`" in text
    assert "`name`* - Name" in text
    assert "`-v, --version <value>` - Set default" in text
    assert "`!mcp getFoo`" in text


def test_generate_command_help_unknown(registry):
    assert registry.generate_command_help("nope") is None
