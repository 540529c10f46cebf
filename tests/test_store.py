"""Tests for the flat-file store."""

import logging
from pathlib import Path

import pytest

from goto_cli.errors import IOFailure
from goto_cli.models import HistoryEntry, HistoryStack, ShortcutFlag, ShortcutRecord, ShortcutTable
from goto_cli.store import Store


class TestLoad:
    def test_missing_files_give_empty_stores(self, tmp_path: Path) -> None:
        table, history = Store(tmp_path / "nowhere").load()

        assert len(table) == 0
        assert len(history) == 0

    def test_reads_headerless_records(self, tmp_path: Path) -> None:
        (tmp_path / "shortcuts.csv").write_text("edit;/home/u/project;code;0\n")

        table = Store(tmp_path).load_shortcuts()

        record = table.get("edit")
        assert record == ShortcutRecord("edit", "/home/u/project", "code", ShortcutFlag.STATIC)

    def test_malformed_line_is_skipped_and_logged(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        (tmp_path / "shortcuts.csv").write_text(
            "a;/one;shell;0\n"
            "broken line without delimiters\n"
            ";/no/alias;shell;0\n"
            "b;/two;shell;notanumber\n"
            "c;/three;code;1\n"
        )

        with caplog.at_level(logging.WARNING, logger="goto_cli.store"):
            table = Store(tmp_path).load_shortcuts()

        assert [r.alias for r in table] == ["a", "c"]
        assert "line 2" in caplog.text
        assert "line 3" in caplog.text
        assert "line 4" in caplog.text

    def test_nonzero_flag_reads_as_auto(self, tmp_path: Path) -> None:
        (tmp_path / "shortcuts.csv").write_text("t;/tmp;shell;7\n")

        assert Store(tmp_path).load_shortcuts().get("t").flag is ShortcutFlag.AUTO

    def test_duplicate_alias_last_line_wins(self, tmp_path: Path) -> None:
        (tmp_path / "shortcuts.csv").write_text("a;/first;shell;0\na;/second;shell;0\n")

        table = Store(tmp_path).load_shortcuts()

        assert len(table) == 1
        assert table.get("a").path == "/second"

    def test_history_keeps_file_order_with_top_last(self, tmp_path: Path) -> None:
        (tmp_path / "history.csv").write_text("/old;1000;1\n\n/new;20;2\n/bad;x;3\n")

        history = Store(tmp_path).load_history()

        assert [e.path for e in history] == ["/old", "/new"]
        assert history.top() == HistoryEntry("/new", 20, 2)

    def test_unknown_header_still_reads_records(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        (tmp_path / "shortcuts.csv").write_text("#goto-cli 9\na;/one;shell;0\n")

        with caplog.at_level(logging.WARNING, logger="goto_cli.store"):
            table = Store(tmp_path).load_shortcuts()

        assert "a" in table
        assert "unrecognized header" in caplog.text

    def test_undecodable_line_is_skipped_and_logged(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        (tmp_path / "shortcuts.csv").write_bytes(b"edit;/home/u/project;code;0\nbad\xff\xfeline;/x;shell;0\n")

        with caplog.at_level(logging.WARNING, logger="goto_cli.store"):
            table = Store(tmp_path).load_shortcuts()

        assert [r.alias for r in table] == ["edit"]
        assert "line 2" in caplog.text

    def test_unreadable_file_raises_io_failure(self, tmp_path: Path) -> None:
        (tmp_path / "shortcuts.csv").mkdir()

        with pytest.raises(IOFailure):
            Store(tmp_path).load_shortcuts()


class TestSave:
    def test_round_trip_is_lossless(self, tmp_path: Path) -> None:
        table = ShortcutTable([
            ShortcutRecord("edit", "/home/u/project", "code", ShortcutFlag.STATIC),
            ShortcutRecord("tmp", "/tmp", "shell", ShortcutFlag.AUTO),
        ])
        history = HistoryStack([HistoryEntry("/a", 1000, 100), HistoryEntry("/b", 0, 200)])
        store = Store(tmp_path / "store")

        store.save_shortcuts(table)
        store.save_history(history)
        first = store.shortcuts_path.read_text(), store.history_path.read_text()

        loaded_table, loaded_history = store.load()
        assert loaded_table == table
        assert loaded_history == history

        store.save_shortcuts(loaded_table)
        store.save_history(loaded_history)
        assert (store.shortcuts_path.read_text(), store.history_path.read_text()) == first

    def test_writes_version_header_and_one_record_per_line(self, tmp_path: Path) -> None:
        store = Store(tmp_path)
        store.save_shortcuts(ShortcutTable([ShortcutRecord("e", "/p", "code", ShortcutFlag.STATIC)]))

        assert store.shortcuts_path.read_text() == "#goto-cli 1\ne;/p;code;0\n"

    def test_save_replaces_previous_contents(self, tmp_path: Path) -> None:
        store = Store(tmp_path)
        store.save_shortcuts(ShortcutTable([ShortcutRecord("a", "/a", "shell")]))
        store.save_shortcuts(ShortcutTable([ShortcutRecord("b", "/b", "shell")]))

        assert [r.alias for r in store.load_shortcuts()] == ["b"]

    def test_leaves_no_temporary_files(self, tmp_path: Path) -> None:
        store = Store(tmp_path)
        store.save_history(HistoryStack([HistoryEntry("/a", 5, 1)]))

        assert sorted(p.name for p in tmp_path.iterdir()) == ["history.csv"]

    def test_unwritable_directory_raises_io_failure(self, tmp_path: Path) -> None:
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")

        with pytest.raises(IOFailure):
            Store(blocker / "store").save_shortcuts(ShortcutTable())
