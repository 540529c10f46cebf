"""Shortcut and history models for goto-cli."""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterator, Optional

from .paths import last_component


class ShortcutFlag(IntEnum):
    """Whether a shortcut was written by the user or saved automatically."""

    STATIC = 0
    AUTO = 1  # replaceable without confirmation

    @classmethod
    def from_int(cls, value: int) -> "ShortcutFlag":
        return cls.STATIC if value == 0 else cls.AUTO


@dataclass
class ShortcutRecord:
    """A named location."""

    alias: str
    path: str
    opener: str
    flag: ShortcutFlag = ShortcutFlag.STATIC


@dataclass
class HistoryEntry:
    """A previously visited or pushed location."""

    path: str
    priority: int
    pushed_at: int = 0  # seconds since the epoch

    @property
    def evictable(self) -> bool:
        return self.priority <= 0


class ShortcutTable:
    """Shortcuts keyed by alias. Last write wins."""

    def __init__(self, records: Optional[list[ShortcutRecord]] = None) -> None:
        self._records: dict[str, ShortcutRecord] = {}
        for record in records or []:
            self.put(record)

    def get(self, alias: str) -> Optional[ShortcutRecord]:
        return self._records.get(alias)

    def put(self, record: ShortcutRecord) -> Optional[ShortcutRecord]:
        """Insert *record*, returning the one it replaced (if any)."""
        previous = self._records.get(record.alias)
        self._records[record.alias] = record
        return previous

    def pop(self, alias: str) -> Optional[ShortcutRecord]:
        return self._records.pop(alias, None)

    def aliases_for(self, path: str) -> list[str]:
        return [r.alias for r in self._records.values() if r.path == path]

    def __contains__(self, alias: object) -> bool:
        return alias in self._records

    def __iter__(self) -> Iterator[ShortcutRecord]:
        return iter(list(self._records.values()))

    def __len__(self) -> int:
        return len(self._records)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ShortcutTable):
            return NotImplemented
        return list(self) == list(other)

    def __repr__(self) -> str:
        return f"ShortcutTable({list(self)!r})"


@dataclass
class HistoryStack:
    """LIFO of visited locations. ``entries[-1]`` is the top."""

    entries: list[HistoryEntry] = field(default_factory=list)

    def push(self, entry: HistoryEntry) -> None:
        self.entries.append(entry)

    def pop(self) -> Optional[HistoryEntry]:
        if not self.entries:
            return None
        return self.entries.pop()

    def top(self) -> Optional[HistoryEntry]:
        return self.entries[-1] if self.entries else None

    def find(self, target: str, match_name: bool = True) -> Optional[int]:
        """Index of the topmost entry whose path (or final component) is *target*."""
        for index in range(len(self.entries) - 1, -1, -1):
            path = self.entries[index].path
            if path == target or (match_name and last_component(path) == target):
                return index
        return None

    def remove_at(self, index: int) -> HistoryEntry:
        return self.entries.pop(index)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(list(self.entries))

    def __len__(self) -> int:
        return len(self.entries)
