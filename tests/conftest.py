"""Test fixtures for goto-cli."""

from pathlib import Path

import pytest

from goto_cli.config import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's own GOTO_CLI_* settings out of every test."""
    for name in (
        "GOTO_CLI_STORE",
        "GOTO_CLI_HOME",
        "GOTO_CLI_OPENER",
        "GOTO_CLI_CEILING",
        "GOTO_CLI_HISTORY_MAX",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def store_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A store directory picked up through GOTO_CLI_STORE (not created yet)."""
    path = tmp_path / "store"
    monkeypatch.setenv("GOTO_CLI_STORE", str(path))
    return path


@pytest.fixture
def home_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """The location 'goto' with no argument resolves to."""
    path = tmp_path / "home"
    path.mkdir()
    monkeypatch.setenv("GOTO_CLI_HOME", str(path))
    return path


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test from a fresh current directory."""
    path = tmp_path / "work"
    path.mkdir()
    monkeypatch.chdir(path)
    return path


@pytest.fixture
def settings(home_dir: Path) -> Settings:
    return Settings(home=str(home_dir), default_opener="shell", ceiling=1000, history_max=100)
