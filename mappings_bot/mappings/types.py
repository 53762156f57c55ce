"""
Mapping types
The kinds of symbols a mapping database holds and a single resolved entry
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional


class MappingType(Enum):
    """Kinds of mapped symbols, in the order their commands are generated."""

    CLASS = "c"
    METHOD = "m"
    FIELD = "f"
    PARAM = "p"

    @property
    def key(self) -> str:
        return self.value

    @classmethod
    def from_name(cls, name: str) -> "MappingType":
        """Parse ``class``/``method``/``field``/``param`` (any case)."""
        try:
            return cls[name.upper()]
        except KeyError:
            raise ValueError(f"Unknown mapping type: {name!r}") from None


@dataclass(frozen=True)
class Mapping:
    """One obfuscated-to-readable symbol mapping."""

    type: MappingType
    intermediate: str
    name: str
    owner: Optional[str] = None
    desc: Optional[str] = None
    comment: Optional[str] = None

    @property
    def qualified_name(self) -> str:
        if self.owner and self.type is not MappingType.CLASS:
            return f"{self.owner}.{self.name}"
        return self.name

    def format_message(self, version: str) -> str:
        """
        Render this mapping for display.

        Args:
            version: The version the lookup was made against

        Returns:
            Markdown block headed by the version and qualified name
        """
        lines = [f"**MC {version}: {self.qualified_name}**"]
        lines.append(f"__Name__: `{self.intermediate}` => `{self.name}`")
        if self.desc:
            lines.append(f"__Descriptor__: `{self.desc}`")
        if self.comment:
            lines.append(f"__Comment__: {self.comment}")
        return "\n".join(lines)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Mapping":
        return cls(
            type=MappingType.from_name(data["type"]),
            intermediate=data["intermediate"],
            name=data["name"],
            owner=data.get("owner"),
            desc=data.get("desc"),
            comment=data.get("comment"),
        )


# Type alias for a lookup answer; None means the version has no data
LookupAnswer = Optional[List[Mapping]]
