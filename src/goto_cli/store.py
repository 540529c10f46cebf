"""Flat-file persistence for shortcuts and history.

Both files hold one record per line with ``;`` separated fields:

    shortcuts.csv   alias;path;opener;flag
    history.csv     path;priority;pushed_at

The first line is a ``#goto-cli <version>`` header. Files written before the
header existed are read as version 1. Saves go to a temporary file in the same
directory which then replaces the target, so another invocation never reads a
half-written store.
"""

import logging
import os
import tempfile
from pathlib import Path

from .errors import IOFailure, MalformedRecord
from .models import HistoryEntry, HistoryStack, ShortcutFlag, ShortcutRecord, ShortcutTable

logger = logging.getLogger(__name__)

DELIMITER = ";"
FORMAT_VERSION = 1
HEADER_PREFIX = "#goto-cli"

SHORTCUTS_FILE = "shortcuts.csv"
HISTORY_FILE = "history.csv"


def parse_shortcut(line: str) -> ShortcutRecord:
    fields = line.split(DELIMITER)
    if len(fields) != 4:
        raise MalformedRecord(line, f"expected 4 fields, got {len(fields)}")
    alias, path, opener, flag = fields
    if not alias.strip():
        raise MalformedRecord(line, "empty alias")
    if not path.strip():
        raise MalformedRecord(line, "empty path")
    try:
        flag_value = int(flag)
    except ValueError:
        raise MalformedRecord(line, "flag is not an integer") from None
    return ShortcutRecord(alias=alias, path=path, opener=opener, flag=ShortcutFlag.from_int(flag_value))


def format_shortcut(record: ShortcutRecord) -> str:
    return DELIMITER.join([record.alias, record.path, record.opener, str(int(record.flag))])


def parse_history(line: str) -> HistoryEntry:
    fields = line.split(DELIMITER)
    if len(fields) != 3:
        raise MalformedRecord(line, f"expected 3 fields, got {len(fields)}")
    path, priority, pushed_at = fields
    if not path.strip():
        raise MalformedRecord(line, "empty path")
    try:
        return HistoryEntry(path=path, priority=int(priority), pushed_at=int(pushed_at))
    except ValueError:
        raise MalformedRecord(line, "priority and timestamp must be integers") from None


def format_history(entry: HistoryEntry) -> str:
    return DELIMITER.join([entry.path, str(entry.priority), str(entry.pushed_at)])


class Store:
    """The two store files of one store directory."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    @property
    def shortcuts_path(self) -> Path:
        return self.directory / SHORTCUTS_FILE

    @property
    def history_path(self) -> Path:
        return self.directory / HISTORY_FILE

    def load(self) -> tuple[ShortcutTable, HistoryStack]:
        """Load both stores. Missing files give empty collections."""
        return self.load_shortcuts(), self.load_history()

    def load_shortcuts(self) -> ShortcutTable:
        return ShortcutTable(self._read_records(self.shortcuts_path, parse_shortcut))

    def load_history(self) -> HistoryStack:
        return HistoryStack(self._read_records(self.history_path, parse_history))

    def save_shortcuts(self, table: ShortcutTable) -> None:
        self._write_lines(self.shortcuts_path, [format_shortcut(r) for r in table])

    def save_history(self, stack: HistoryStack) -> None:
        self._write_lines(self.history_path, [format_history(e) for e in stack])

    def _read_records(self, path: Path, parse) -> list:
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            logger.debug("%s does not exist yet, starting empty", path)
            return []
        except OSError as e:
            raise IOFailure(f"Unable to read {path}: {e}") from e

        records = []
        for lineno, raw in enumerate(data.splitlines(), start=1):
            try:
                line = raw.decode("utf-8").strip()
            except UnicodeDecodeError as e:
                logger.warning("Skipping %s line %d: not valid UTF-8 (%s)", path.name, lineno, e.reason)
                continue
            if not line:
                continue
            if line.startswith("#"):
                self._check_header(path, line)
                continue
            try:
                records.append(parse(line))
            except MalformedRecord as e:
                logger.warning("Skipping %s line %d: %s", path.name, lineno, e)
        return records

    def _check_header(self, path: Path, line: str) -> None:
        parts = line.split()
        if parts[0] != HEADER_PREFIX or len(parts) != 2 or parts[1] != str(FORMAT_VERSION):
            logger.warning("%s has unrecognized header %r, reading records anyway", path.name, line)

    def _write_lines(self, path: Path, lines: list[str]) -> None:
        body = "\n".join([f"{HEADER_PREFIX} {FORMAT_VERSION}", *lines]) + "\n"
        tmp_name = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=path.name + ".", dir=str(path.parent))
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(body)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as e:
            raise IOFailure(f"Unable to write {path}: {e}") from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
        logger.debug("Wrote %d record(s) to %s", len(lines), path)
