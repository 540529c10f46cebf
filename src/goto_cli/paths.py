"""Path helpers shared by the resolver, the mutations and the CLI."""

import os


def normalize_path(raw: str, cwd: str) -> str:
    """Expand ``~`` and make *raw* absolute against *cwd*, without touching the disk."""
    target = os.path.expanduser(raw.strip())
    if not os.path.isabs(target):
        target = os.path.join(cwd, target)
    return os.path.normpath(target)


def join_subpath(base: str, subpath: str | None) -> str:
    """Descend from *base* into *subpath*.

    The subpath is always treated as a child: leading separators are dropped
    so ``/sub`` does not escape to the filesystem root.
    """
    if not subpath:
        return base
    child = subpath.strip().lstrip("/" + os.sep)
    if not child:
        return base
    return os.path.normpath(os.path.join(base, child))


def last_component(path: str) -> str:
    """Final component of *path* (``/a/b/`` → ``b``)."""
    return os.path.basename(os.path.normpath(path))
