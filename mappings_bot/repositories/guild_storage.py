"""
Guild Storage
Per-guild default versions for one command family, and the file backend
that persists them
"""

import asyncio
import json
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Protocol, Tuple, Union

from mappings_bot.utils.logger import get_logger

logger = get_logger("GuildStorage")

GuildId = Union[int, str]


class StorageBackend(Protocol):
    """Where GuildStorage handles are loaded from and saved to."""

    async def load(self, name: str) -> "GuildStorage":
        ...

    async def save(self, storage: "GuildStorage") -> None:
        ...


class GuildStorage:
    """
    Default lookup version per guild.

    ``None`` means "use latest", whether it was stored explicitly or the
    guild never set anything.
    """

    def __init__(self, name: str, data: Optional[Dict[str, Optional[str]]] = None):
        self.name = name
        self._data: Dict[str, Optional[str]] = dict(data or {})

    @staticmethod
    def _key(guild_id: GuildId) -> str:
        return str(guild_id)

    def get(self, guild_id: GuildId) -> Optional[str]:
        return self._data.get(self._key(guild_id))

    def put(self, guild_id: GuildId, version: Optional[str]) -> None:
        """Store ``version`` for the guild; ``None`` resets it to latest."""
        self._data[self._key(guild_id)] = version

    def items(self) -> Iterator[Tuple[str, Optional[str]]]:
        return iter(list(self._data.items()))

    def to_dict(self) -> Dict[str, Optional[str]]:
        return dict(self._data)

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, Any]) -> "GuildStorage":
        cleaned: Dict[str, Optional[str]] = {}
        for guild_id, version in data.items():
            cleaned[str(guild_id)] = str(version) if version is not None else None
        return cls(name, cleaned)

    def __len__(self) -> int:
        return len(self._data)


class JsonStorageBackend:
    """Keeps each family's storage in ``<root>/<name>.json``."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def path_for(self, name: str) -> Path:
        return self.root / f"{name}.json"

    async def load(self, name: str) -> GuildStorage:
        """
        Load storage for ``name``.

        A missing file yields empty storage. So does a corrupt one, which is
        logged and left in place for inspection.
        """
        path = self.path_for(name)
        if not path.exists():
            logger.debug(f"No stored data for {name} at {path}")
            return GuildStorage(name)

        try:
            text = await asyncio.to_thread(path.read_text, encoding="utf-8")
            data = json.loads(text)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Could not read {path}: {e}")
            return GuildStorage(name)

        if not isinstance(data, dict):
            logger.error(f"Ignoring {path}: expected an object, got {type(data).__name__}")
            return GuildStorage(name)

        storage = GuildStorage.from_dict(name, data)
        logger.info(f"Loaded {len(storage)} guild defaults for {name}")
        return storage

    @staticmethod
    def _write(path: Path, text: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)

        # Write then rename so a crash never leaves half a file behind
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(text, encoding="utf-8")
        tmp.replace(path)

    async def save(self, storage: GuildStorage) -> None:
        text = json.dumps(storage.to_dict(), indent=2, sort_keys=True)
        await asyncio.to_thread(self._write, self.path_for(storage.name), text)
        logger.debug(f"Saved {len(storage)} guild defaults for {storage.name}")
