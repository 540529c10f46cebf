"""Directory shortcuts for the shell: resolve aliases, keep history, emit one result line."""

__version__ = "0.1.0"
