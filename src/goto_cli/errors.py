"""Error kinds for goto-cli.

Every engine failure carries the exit status the process ends with, so the
CLI can turn any of them into a result line without a lookup table.
"""


class GotoError(Exception):
    """Base class for all engine failures."""

    kind = "error"
    exit_code = 1


class InvalidArgument(GotoError):
    """A command or one of its arguments could not be parsed or accepted."""

    kind = "invalid argument"
    exit_code = 2


class UnknownLocation(GotoError):
    """Nothing (alias, keyword, history entry or directory) matched the request."""

    kind = "unknown location"
    exit_code = 3

    def __init__(self, primary: str) -> None:
        super().__init__(primary)
        self.primary = primary


class NotFound(GotoError):
    """A delete/rename/adjust targeted a record that does not exist."""

    kind = "not found"
    exit_code = 4


class IOFailure(GotoError):
    """A store file could not be read or written."""

    kind = "io failure"
    exit_code = 5


class MalformedRecord(GotoError):
    """A store line could not be parsed. Recovered by the loader."""

    kind = "malformed record"

    def __init__(self, line: str, reason: str) -> None:
        super().__init__(f"{reason}: {line!r}")
        self.line = line
        self.reason = reason
