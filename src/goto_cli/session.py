"""One invocation's view of the stores: load, navigate/mutate, commit."""

import logging
import os
from pathlib import Path
from typing import Optional

from .config import Settings, get_store_dir, load_settings
from .errors import InvalidArgument, IOFailure
from .models import HistoryStack
from .mutations import push_history
from .resolver import Request, Resolution, resolve
from .store import Store

logger = logging.getLogger(__name__)


class Session:
    """Both stores loaded fresh, plus what changed since loading."""

    def __init__(self, store: Store, settings: Settings, cwd: str) -> None:
        self.store = store
        self.settings = settings
        self.cwd = cwd
        self.shortcuts, self.history = store.load()
        self.shortcuts_dirty = False
        self.history_dirty = False

    def resolve(self, request: Request) -> Resolution:
        """Resolve without changing anything on disk."""
        scratch = HistoryStack(list(self.history.entries))
        return resolve(request, self.shortcuts, scratch, self.settings, self.cwd)

    def navigate(self, request: Request) -> Resolution:
        """Resolve *request* as a move away from the caller's cwd.

        The cwd is pushed onto history so ``goto pop`` can come back, except
        when the move itself came out of history (that would undo the pop).
        """
        resolution = resolve(request, self.shortcuts, self.history, self.settings, self.cwd)
        if resolution.history_changed:
            self.history_dirty = True
        elif resolution.path != self.cwd:
            top = self.history.top()
            if top is None or top.path != self.cwd:
                try:
                    push_history(self.history, self.cwd, self.settings.ceiling)
                except InvalidArgument as e:
                    # the move still happens, the cwd just cannot be stored
                    logger.debug("Not recording %s in history: %s", self.cwd, e)
                else:
                    self.history_dirty = True
        return resolution

    def pop(self) -> str:
        """Pop back to the most recent location that still exists, else home."""
        while True:
            entry = self.history.pop()
            if entry is None:
                return self.settings.home
            self.history_dirty = True
            if os.path.isdir(entry.path):
                return entry.path
            logger.info("Dropping vanished history entry %s", entry.path)

    def commit(self) -> None:
        if self.shortcuts_dirty:
            self.store.save_shortcuts(self.shortcuts)
        if self.history_dirty:
            self.store.save_history(self.history)


def open_session(store_dir: Optional[str] = None) -> Session:
    """Load the stores for this invocation.

    Args:
        store_dir: Optional override for the store directory (--store)
    """
    try:
        cwd = os.getcwd()
    except OSError as e:
        raise IOFailure(f"Unable to access current directory: {e}") from e
    path = get_store_dir(store_dir)
    logger.debug("Using store %s", path)
    return Session(Store(Path(path)), load_settings(), cwd)
