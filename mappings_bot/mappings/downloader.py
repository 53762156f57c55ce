"""
Mapping downloaders
Build per-version mapping databases lazily and answer lookups against them
"""

import asyncio
import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Set, Union

from mappings_bot.mappings.database import MappingDatabase
from mappings_bot.mappings.types import LookupAnswer, Mapping, MappingType
from mappings_bot.utils.logger import LoggerMixin


class MappingDownloader(LoggerMixin, ABC):
    """
    Source of mapping databases for one family of mappings.

    Databases are built on first use, once per known version, in a worker
    thread. Versions outside get_known_versions() never start a build.
    Concurrent lookups for a version that is still building all wait on the
    same build task.
    """

    def __init__(self, name: str):
        super().__init__(name)
        self._builds: Dict[str, "asyncio.Task[Optional[MappingDatabase]]"] = {}

    @abstractmethod
    def get_latest_version(self) -> str:
        """Return the newest version this downloader can serve."""

    @abstractmethod
    def get_known_versions(self) -> Set[str]:
        """Return every version this downloader can serve."""

    @abstractmethod
    def load_database(self, version: str) -> Optional[MappingDatabase]:
        """
        Build the database for ``version``. Runs in a worker thread.

        Returns:
            The database, or None when there is no data for the version
        """

    def is_built(self, version: str) -> bool:
        task = self._builds.get(version)
        return task is not None and task.done() and not task.cancelled() and task.exception() is None

    def _get_build(self, version: str) -> "asyncio.Task[Optional[MappingDatabase]]":
        task = self._builds.get(version)
        if task is None:
            self.info(f"Building mappings database for {version}")
            task = asyncio.ensure_future(asyncio.to_thread(self.load_database, version))
            task.add_done_callback(lambda t, v=version: self._on_build_done(v, t))
            self._builds[version] = task
        return task

    def _on_build_done(self, version: str, task: "asyncio.Task[Optional[MappingDatabase]]") -> None:
        if task.cancelled() or task.exception() is not None:
            # Let the next invocation try again
            if self._builds.get(version) is task:
                del self._builds[version]
            reason = "cancelled" if task.cancelled() else repr(task.exception())
            self.error(f"Building mappings for {version} failed: {reason}")
            return

        database = task.result()
        if database is None:
            # Only loaded databases stay cached
            if self._builds.get(version) is task:
                del self._builds[version]
            self.warning(f"No mappings available for {version}")
        else:
            self.success(f"Loaded {len(database)} mappings for {version}")

    async def lookup(
        self,
        name: str,
        version: str,
        mapping_type: Optional[MappingType] = None,
    ) -> LookupAnswer:
        """
        Resolve ``name`` against ``version``.

        Returns:
            None when the version has no data, otherwise the (possibly empty)
            list of matches
        """
        if version not in self.get_known_versions():
            return None

        database = await asyncio.shield(self._get_build(version))
        if database is None:
            return None
        return database.lookup(name, mapping_type)


class JsonMappingDownloader(MappingDownloader):
    """
    Reads mapping databases from a directory of JSON files.

    Layout::

        <root>/versions.json    {"versions": ["1.12", "1.12.2", ...]}  oldest first
        <root>/<version>.json   [{"type": "method", "intermediate": ..., "name": ...}, ...]
    """

    CATALOG_FILE = "versions.json"

    def __init__(self, root: Union[str, Path], name: str = "JsonMappingDownloader"):
        super().__init__(name)
        self.root = Path(root)
        self._versions: Optional[List[str]] = None

    def _catalog(self) -> List[str]:
        if self._versions is None:
            catalog = self.root / self.CATALOG_FILE
            if not catalog.exists():
                self.warning(f"No version catalog at {catalog}")
                self._versions = []
            else:
                data = json.loads(catalog.read_text(encoding="utf-8"))
                self._versions = [str(v) for v in data.get("versions", [])]
        return self._versions

    def refresh(self) -> None:
        """Forget the cached version catalog."""
        self._versions = None

    def get_latest_version(self) -> str:
        versions = self._catalog()
        if not versions:
            raise LookupError(f"No mapping versions available in {self.root}")
        return versions[-1]

    def get_known_versions(self) -> Set[str]:
        return set(self._catalog())

    def load_database(self, version: str) -> Optional[MappingDatabase]:
        # Versions come from user input; only catalogued ones map to files
        if version not in self.get_known_versions():
            return None

        path = self.root / f"{version}.json"
        if path.name != f"{version}.json" or not path.is_file():
            return None

        entries = json.loads(path.read_text(encoding="utf-8"))
        return MappingDatabase(version, (Mapping.from_dict(entry) for entry in entries))
