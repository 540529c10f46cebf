"""Turn a navigation request into a concrete path and opener.

Lookup order, first match wins:

1. an exact (case-sensitive) alias in the shortcut table
2. no argument, or a home keyword (``~``, ``pwsh``): the configured home
3. a back keyword (``-``, ``back``) or a path already in history
4. an existing directory, absolute or relative to the caller's cwd
5. otherwise ``UnknownLocation``

Aliases shadow paths: with a shortcut ``edit`` defined, ``goto edit`` never
lands in a ``./edit`` directory.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from .config import Settings
from .errors import UnknownLocation
from .models import HistoryStack, ShortcutTable
from .mutations import pop_history
from .paths import join_subpath, normalize_path

logger = logging.getLogger(__name__)

HOME_KEYWORDS = frozenset({"~", "pwsh"})
BACK_KEYWORDS = frozenset({"-", "back"})


@dataclass(frozen=True)
class Request:
    primary: Optional[str] = None
    subpath: Optional[str] = None
    opener: Optional[str] = None


@dataclass(frozen=True)
class Resolution:
    path: str
    opener: str
    source: str  # shortcut | home | history | literal
    history_changed: bool = False


def resolve(
    request: Request,
    table: ShortcutTable,
    history: HistoryStack,
    settings: Settings,
    cwd: str,
) -> Resolution:
    """Resolve *request*. May pop *history*; check ``history_changed``."""
    primary = request.primary or None
    stored_opener = None
    history_changed = False

    record = table.get(primary) if primary is not None else None
    # full paths only, so a local ./src is not hijacked by some /other/src
    index = history.find(normalize_path(primary, cwd), match_name=False) if primary else None
    if record is not None:
        base, source, stored_opener = record.path, "shortcut", record.opener
    elif primary is None or primary in HOME_KEYWORDS:
        base, source = settings.home, "home"
    elif primary in BACK_KEYWORDS:
        base, source = pop_history(history, settings.home), "history"
        history_changed = True
    elif index is not None:
        base, source = history.remove_at(index).path, "history"
        history_changed = True
    else:
        candidate = normalize_path(primary, cwd)
        if not os.path.isdir(candidate):
            raise UnknownLocation(primary)
        base, source = candidate, "literal"

    path = join_subpath(base, request.subpath)
    opener = request.opener or stored_opener or settings.default_opener
    logger.debug("Resolved %r via %s to %s (opener %s)", primary, source, path, opener)
    return Resolution(path=path, opener=opener, source=source, history_changed=history_changed)
