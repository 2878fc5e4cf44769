"""Event models shared across watcher components."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

WILDCARD = "*"


class EventKind(str, Enum):
    """Event classes the watcher can be asked to report."""

    CREATE = "create"
    DELETE = "delete"
    MODIFY = "modify"
    MOVE = "move"
    ATTRIB = "attrib"


@dataclass(frozen=True)
class WatchEvent:
    """A single change reported by the watcher subprocess."""

    directory: str
    event_kind: str
    file_name: str

    @property
    def tags(self) -> Tuple[str, ...]:
        return tuple(tag for tag in self.event_kind.split(",") if tag)

    @property
    def is_directory(self) -> bool:
        return "ISDIR" in self.tags


@dataclass(frozen=True)
class WatchTarget:
    """What to watch and which processes to report on a match."""

    directory: str
    file_filter: str
    process_pattern: str

    @property
    def matches_any_file(self) -> bool:
        return self.file_filter == WILDCARD
