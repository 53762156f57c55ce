"""
Persistence for per-guild default versions.
"""

from .base_repository import BaseRepository
from .guild_storage import GuildStorage, JsonStorageBackend, StorageBackend
from .guild_version_repository import GuildVersionRepository

__all__ = [
    "BaseRepository",
    "GuildStorage",
    "JsonStorageBackend",
    "StorageBackend",
    "GuildVersionRepository",
]
