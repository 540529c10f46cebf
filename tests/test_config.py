"""Tests for store directory and settings resolution."""

from pathlib import Path

import pytest

from goto_cli import config
from goto_cli.errors import InvalidArgument


class TestStoreDir:
    def test_override_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GOTO_CLI_STORE", str(tmp_path / "env"))

        assert config.get_store_dir(str(tmp_path / "flag")) == (tmp_path / "flag").resolve()

    def test_env_var_beats_local(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".goto-cli").mkdir()
        monkeypatch.setenv("GOTO_CLI_STORE", str(tmp_path / "env"))

        assert config.get_store_dir() == (tmp_path / "env").resolve()

    def test_local_store_when_present(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".goto-cli").mkdir()

        assert config.get_store_dir() == Path.cwd() / ".goto-cli"

    def test_global_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path / "user"))

        assert config.get_store_dir() == tmp_path / "user" / ".goto-cli"


class TestSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))

        settings = config.load_settings()

        assert settings.home == str(tmp_path)
        assert settings.default_opener == "shell"
        assert settings.ceiling == 1000
        assert settings.history_max == 100

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GOTO_CLI_HOME", "/srv")
        monkeypatch.setenv("GOTO_CLI_OPENER", "code")
        monkeypatch.setenv("GOTO_CLI_CEILING", "50")
        monkeypatch.setenv("GOTO_CLI_HISTORY_MAX", "7")

        settings = config.load_settings()

        assert (settings.home, settings.default_opener, settings.ceiling, settings.history_max) == (
            "/srv", "code", 50, 7,
        )

    @pytest.mark.parametrize(
        "name, raw",
        [("GOTO_CLI_CEILING", "many"), ("GOTO_CLI_CEILING", "0"), ("GOTO_CLI_HISTORY_MAX", "-1")],
    )
    def test_invalid_numbers(self, name: str, raw: str, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(name, raw)

        with pytest.raises(InvalidArgument):
            config.load_settings()
