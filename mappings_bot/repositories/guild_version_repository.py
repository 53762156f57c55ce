"""
Guild Version Repository
Stores per-guild default versions in PostgreSQL
"""

from typing import Optional

import asyncpg

from mappings_bot.repositories.base_repository import BaseRepository
from mappings_bot.repositories.guild_storage import GuildStorage


class GuildVersionRepository(BaseRepository):
    """Repository for the guild_versions table; a drop-in for JsonStorageBackend."""

    COLUMNS = ("command", "guild_id", "version")

    def __init__(self, pool: Optional[asyncpg.Pool]):
        super().__init__(pool, "guild_versions", ("command", "guild_id"))

    async def load(self, name: str) -> GuildStorage:
        """
        Load every guild default stored for a command family.

        Args:
            name: Command family key

        Returns:
            Storage holding one entry per row
        """
        rows = await self.find_where({"command": name})
        storage = GuildStorage(name, {row["guild_id"]: row["version"] for row in rows})
        self.logger.info(f"Loaded {len(storage)} guild defaults for {name}")
        return storage

    async def save(self, storage: GuildStorage) -> None:
        """
        Upsert every entry of ``storage`` in one transaction.

        Args:
            storage: Storage to persist
        """
        records = [(storage.name, guild_id, version) for guild_id, version in storage.items()]
        if not records:
            return

        sql = self.upsert_sql(self.COLUMNS)

        async def write(conn: asyncpg.Connection) -> None:
            await conn.executemany(sql, records)

        await self.transaction(write)
        self.logger.debug(f"Saved {len(records)} guild defaults for {storage.name}")
