"""Decoder and mapper protocols for SSH config ingestion."""

from dataclasses import dataclass, field
from typing import Protocol

from hostpick.types import HostEntry

# Characters that make a Host pattern a match expression rather than a name
WILDCARD_CHARS = "!*?[]"


@dataclass
class HostBlock:
    """A single decoded Host block."""

    patterns: list[str]
    directives: dict[str, str | list[str]] = field(default_factory=dict)

    def concrete_aliases(self) -> list[str]:
        """Patterns usable as aliases, in declaration order."""
        return [p for p in self.patterns if p and not any(c in p for c in WILDCARD_CHARS)]


class ConfigDecoder(Protocol):
    """Protocol for turning one config file into host blocks."""

    def decode(self, path: str) -> list[HostBlock]:
        """Decode the file at path. Raises on unreadable or unparsable input."""
        ...


class DirectiveMapper(Protocol):
    """Protocol for populating entry attributes from block directives."""

    def apply(self, entry: HostEntry, directives: dict[str, str | list[str]]) -> None:
        """Update entry in place from the block's directives."""
        ...
