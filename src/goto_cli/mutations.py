"""Commands whose purpose is to change the shortcut table or the history stack.

These functions only touch the in-memory collections; the CLI decides when to
save them.
"""

import time
from typing import Optional, Union

from .errors import InvalidArgument, NotFound
from .models import HistoryEntry, HistoryStack, ShortcutFlag, ShortcutRecord, ShortcutTable

# Characters that would break the store line or the result line.
RESERVED_CHARS = (";", "#", "\n", "\r")


def validate_alias(alias: str) -> str:
    if not alias or not alias.strip():
        raise InvalidArgument("Alias must not be empty")
    if alias != alias.strip():
        raise InvalidArgument(f"Alias {alias!r} has leading or trailing whitespace")
    if alias.startswith("-"):
        raise InvalidArgument(f"Alias {alias!r} must not start with '-'")
    for char in RESERVED_CHARS:
        if char in alias:
            raise InvalidArgument(f"Alias {alias!r} contains reserved character {char!r}")
    return alias


def validate_field(name: str, value: str) -> str:
    for char in RESERVED_CHARS:
        if char in value:
            raise InvalidArgument(f"{name} {value!r} contains reserved character {char!r}")
    return value


def add_shortcut(
    table: ShortcutTable,
    alias: str,
    path: str,
    opener: Optional[str] = None,
    flag: ShortcutFlag = ShortcutFlag.STATIC,
    *,
    default_opener: str,
) -> tuple[ShortcutRecord, Optional[ShortcutRecord]]:
    """Insert or overwrite the shortcut for *alias*.

    Returns the new record and the one it replaced, if any. Overwriting never
    asks for confirmation; *path* is stored as given (callers normalize it).
    """
    validate_alias(alias)
    validate_field("Path", path)
    record = ShortcutRecord(
        alias=alias,
        path=path,
        opener=validate_field("Opener", opener or default_opener),
        flag=flag,
    )
    return record, table.put(record)


def remove_shortcut(table: ShortcutTable, alias: str) -> ShortcutRecord:
    record = table.pop(alias)
    if record is None:
        raise NotFound(f"No shortcut named {alias!r}")
    return record


def rename_shortcut(table: ShortcutTable, old: str, new: str) -> ShortcutRecord:
    validate_alias(new)
    record = table.pop(old)
    if record is None:
        raise NotFound(f"No shortcut named {old!r}")
    record.alias = new
    table.put(record)
    return record


def edit_shortcut(table: ShortcutTable, alias: str, path: str) -> ShortcutRecord:
    """Point an existing shortcut at *path*, keeping its opener and flag."""
    record = table.get(alias)
    if record is None:
        raise NotFound(f"No shortcut named {alias!r}")
    record.path = validate_field("Path", path)
    return record


def remove_path(table: ShortcutTable, path: str) -> list[str]:
    """Drop every alias that points at *path*."""
    aliases = table.aliases_for(path)
    if not aliases:
        raise NotFound(f"No shortcut points at {path}")
    for alias in aliases:
        table.pop(alias)
    return aliases


def push_history(stack: HistoryStack, path: str, priority: int, now: Optional[int] = None) -> HistoryEntry:
    entry = HistoryEntry(
        path=validate_field("Path", path),
        priority=priority,
        pushed_at=int(time.time()) if now is None else now,
    )
    stack.push(entry)
    return entry


def pop_history(stack: HistoryStack, default: str) -> str:
    """Pop the top location, or return *default* when the stack is empty."""
    entry = stack.pop()
    return default if entry is None else entry.path


def _locate(stack: HistoryStack, target: Union[int, str]) -> int:
    if isinstance(target, int):
        # 0 is the top of the stack
        if 0 <= target < len(stack):
            return len(stack) - 1 - target
        raise NotFound(f"No history entry at index {target} ({len(stack)} entries)")
    index = stack.find(target)
    if index is None:
        raise NotFound(f"No history entry matches {target!r}")
    return index


def adjust_priority(stack: HistoryStack, target: Union[int, str], delta: int) -> HistoryEntry:
    """Add *delta* to one entry's priority. The entry is kept even at zero."""
    entry = stack.entries[_locate(stack, target)]
    entry.priority += delta
    return entry


def decay_history(stack: HistoryStack, amount: int) -> int:
    """Subtract *amount* from every entry, flooring at zero.

    Returns how many entries became evictable by this call.
    """
    if amount < 0:
        raise InvalidArgument("Decay amount must not be negative")
    newly_evictable = 0
    for entry in stack:
        was_evictable = entry.evictable
        entry.priority = max(0, entry.priority - amount)
        if entry.evictable and not was_evictable:
            newly_evictable += 1
    return newly_evictable


def reset_history(stack: HistoryStack, priority: int) -> None:
    for entry in stack:
        entry.priority = priority


def prune_history(stack: HistoryStack, max_entries: Optional[int] = None) -> list[HistoryEntry]:
    """Evict entries with priority <= 0, then the oldest beyond *max_entries*."""
    if max_entries is not None and max_entries < 0:
        raise InvalidArgument("max_entries must not be negative")
    evicted = [e for e in stack.entries if e.evictable]
    kept = [e for e in stack.entries if not e.evictable]
    if max_entries is not None and len(kept) > max_entries:
        overflow = len(kept) - max_entries
        evicted.extend(kept[:overflow])
        kept = kept[overflow:]
    stack.entries = kept
    return evicted
