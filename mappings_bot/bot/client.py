"""
Discord bot client setup.
"""

import logging
from typing import List, Optional

import discord
from discord.ext import commands

from mappings_bot.bot.config import Config, config as default_config
from mappings_bot.bot.database import close_database, init_database
from mappings_bot.commands.command_handler import CommandHandler
from mappings_bot.commands.command_registry import CommandRegistry
from mappings_bot.commands.mappings_command import CommandFamily, MappingsCommand, create_default_families
from mappings_bot.repositories.guild_storage import JsonStorageBackend, StorageBackend
from mappings_bot.repositories.guild_version_repository import GuildVersionRepository
from mappings_bot.utils.error_handler import get_error_handler, setup_error_handler
from mappings_bot.utils.logger import get_logger, set_default_level

logger = get_logger("Client")


class MappingsBot(commands.Bot):
    """Discord bot answering mappings lookups."""

    def __init__(self, config: Config, families: Optional[List[CommandFamily]] = None):
        intents = discord.Intents.default()
        intents.message_content = True

        super().__init__(
            command_prefix=config.COMMAND_PREFIX,
            help_command=None,  # CommandHandler provides help
            intents=intents,
        )

        self.config = config
        self.families = families if families is not None else create_default_families(config.MAPPINGS_DIR)
        self.registry = CommandRegistry()
        self.command_handler = CommandHandler(self, self.registry, config.COMMAND_PREFIX)
        self.mapping_commands: List[MappingsCommand] = []
        self.storage_backend: Optional[StorageBackend] = None

        for family in self.families:
            root = MappingsCommand(family)
            root.register(self.registry)
            self.mapping_commands.extend(root.walk())

    async def setup_hook(self) -> None:
        """Called when bot is starting up."""
        logger.info("Setting up bot...")

        setup_error_handler()

        pool = await init_database(self.config.DATABASE_URL)
        if pool is not None:
            self.storage_backend = GuildVersionRepository(pool)
        else:
            self.storage_backend = JsonStorageBackend(self.config.DATA_DIR)

        for command in self.mapping_commands:
            await command.initialize(self.storage_backend)

        logger.info(f"Bot setup complete ({len(self.registry.get_all())} commands)")

    async def on_ready(self) -> None:
        logger.info(f"Logged in as: {self.user}")
        logger.info(f"Use {self.config.COMMAND_PREFIX}help to see available commands")

    async def on_message(self, message: discord.Message) -> None:
        await self.command_handler.handle(message)

    async def close(self) -> None:
        """Persist guild defaults and shut down."""
        logger.info("Shutting down bot...")

        if self.storage_backend is not None:
            # One save per family is enough; roots share storage with children
            for command in self.mapping_commands:
                if command.is_root:
                    await command.persist(self.storage_backend)

        await close_database()
        await get_error_handler().shutdown()
        await super().close()


def create_bot(config: Optional[Config] = None) -> MappingsBot:
    """Create and return bot instance."""
    config = config or default_config
    if config.DEBUG:
        set_default_level(logging.DEBUG)
    return MappingsBot(config)


async def run_bot(config: Optional[Config] = None) -> None:
    """Validate configuration and run the bot until it closes."""
    config = config or default_config
    config.validate()

    bot = create_bot(config)
    async with bot:
        await bot.start(config.DISCORD_TOKEN)
