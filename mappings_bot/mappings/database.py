"""
Mapping database
In-memory index of every mapping known for one version
"""

import re
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from mappings_bot.mappings.types import Mapping, MappingType

# func_1234_a, field_1234_b, p_1234_1_, p_i1234_1_, method_1234, class_1234
INTERMEDIATE_ID_REGEX = re.compile(r"^(?:func_|field_|method_|class_|p_i?)(\d+)(?:_|$)")


def intermediate_id(intermediate: str) -> Optional[str]:
    """Extract the numeric id from an intermediate name, if it has one."""
    match = INTERMEDIATE_ID_REGEX.match(intermediate.rsplit("/", 1)[-1])
    return match.group(1) if match else None


class MappingDatabase:
    """
    All mappings of a single version.

    Lookups never reorder results: entries come back in the order the
    database was loaded.
    """

    def __init__(self, version: str, mappings: Iterable[Mapping]):
        self.version = version
        self.mappings: List[Mapping] = list(mappings)

        self._by_name: Dict[str, List[Mapping]] = defaultdict(list)
        self._by_id: Dict[str, List[Mapping]] = defaultdict(list)
        self._by_lower_name: Dict[str, List[Mapping]] = defaultdict(list)

        for mapping in self.mappings:
            self._by_name[mapping.name].append(mapping)
            if mapping.intermediate != mapping.name:
                self._by_name[mapping.intermediate].append(mapping)
            self._by_lower_name[mapping.name.lower()].append(mapping)
            mapping_id = intermediate_id(mapping.intermediate)
            if mapping_id is not None:
                self._by_id[mapping_id].append(mapping)

    def __len__(self) -> int:
        return len(self.mappings)

    def lookup(self, name: str, mapping_type: Optional[MappingType] = None) -> List[Mapping]:
        """
        Best-guess match of ``name`` against this version.

        Tried in order, first non-empty tier wins: exact readable or
        intermediate name, numeric intermediate id, case-insensitive readable
        name, then a suffix of the owner-qualified name (``Foo.bar``).

        Args:
            name: Name, intermediate name or numeric id to resolve
            mapping_type: Restrict matches to one kind of symbol

        Returns:
            Matching mappings, possibly empty
        """
        def of_type(found: Iterable[Mapping]) -> List[Mapping]:
            return [m for m in found if mapping_type is None or m.type is mapping_type]

        exact = of_type(self._by_name.get(name, ()))
        if exact:
            return exact

        if name.isdigit():
            by_id = of_type(self._by_id.get(name, ()))
            if by_id:
                return by_id

        by_lower = of_type(self._by_lower_name.get(name.lower(), ()))
        if by_lower:
            return by_lower

        suffix = name.replace("/", ".").replace("#", ".").lower()
        if "." not in suffix:
            return []

        return of_type(
            m for m in self.mappings
            if ("." + m.qualified_name.replace("/", ".").lower()).endswith("." + suffix.lstrip("."))
        )
