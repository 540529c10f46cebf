"""Configuration and store path resolution for goto-cli."""

import os
from dataclasses import dataclass
from pathlib import Path

from .errors import InvalidArgument

STORE_DIR_NAME = ".goto-cli"
STORE_ENV = "GOTO_CLI_STORE"

DEFAULT_OPENER = "shell"
DEFAULT_CEILING = 1000
DEFAULT_HISTORY_MAX = 100


def get_global_store_dir() -> Path:
    """Per-user store directory, used when no local store exists (~/.goto-cli)."""
    return Path.home() / STORE_DIR_NAME


def get_local_store_dir() -> Path:
    """Project-local store directory. When present it is used instead of the per-user one."""
    return Path.cwd() / STORE_DIR_NAME


def has_local_store() -> bool:
    """True when the caller's cwd carries its own shortcut store."""
    return get_local_store_dir().is_dir()


def get_store_dir(override: str | None = None) -> Path:
    """Resolve the directory holding shortcuts.csv and history.csv.

    Priority:
    1. --store PATH explicit override (highest)
    2. GOTO_CLI_STORE env var
    3. a .goto-cli/ directory in CWD (per-project shortcuts)
    4. the per-user ~/.goto-cli/

    Args:
        override: Store directory passed via --store

    Returns:
        The directory; it is created on the first save, not here
    """
    if override:
        return Path(override).expanduser().resolve()

    env_path = os.environ.get(STORE_ENV)
    if env_path:
        return Path(env_path).expanduser().resolve()

    if has_local_store():
        return get_local_store_dir()

    return get_global_store_dir()


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise InvalidArgument(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    """Process-wide defaults shared by the resolver and the mutations."""

    home: str
    default_opener: str = DEFAULT_OPENER
    ceiling: int = DEFAULT_CEILING
    history_max: int = DEFAULT_HISTORY_MAX


def load_settings() -> Settings:
    """Read settings from GOTO_CLI_* environment variables.

    GOTO_CLI_HOME      home location (default: the user's home directory)
    GOTO_CLI_OPENER    default opener (default: "shell")
    GOTO_CLI_CEILING   starting priority of history entries (default: 1000)
    GOTO_CLI_HISTORY_MAX  cap applied by `goto prune` (default: 100)
    """
    home = os.environ.get("GOTO_CLI_HOME") or str(Path.home())
    opener = os.environ.get("GOTO_CLI_OPENER") or DEFAULT_OPENER
    ceiling = _env_int("GOTO_CLI_CEILING", DEFAULT_CEILING)
    history_max = _env_int("GOTO_CLI_HISTORY_MAX", DEFAULT_HISTORY_MAX)
    if ceiling <= 0:
        raise InvalidArgument("GOTO_CLI_CEILING must be positive")
    if history_max < 0:
        raise InvalidArgument("GOTO_CLI_HISTORY_MAX must not be negative")
    return Settings(
        home=str(Path(home).expanduser()),
        default_opener=opener,
        ceiling=ceiling,
        history_max=history_max,
    )
