"""The one-line result the shell wrapper reads from stdout.

    <clearScreen:0|1>#<mode:0|1>#<payload>[#<extra>...]

Mode 0: payload is a directory to change into; a single extra field, when
present, names an opener to launch there. Mode 1: payload (and every extra
field, one per line) is text to print.
"""

from dataclasses import dataclass
from enum import IntEnum

from .errors import GotoError, InvalidArgument

SEPARATOR = "#"


class OutputMode(IntEnum):
    CHDIR = 0
    VALUE = 1


@dataclass(frozen=True)
class Result:
    clear_screen: bool
    mode: OutputMode
    payload: str
    extra: tuple[str, ...] = ()
    exit_code: int = 0


def chdir(path: str, *, clear: bool = False, opener: str | None = None) -> Result:
    return Result(clear, OutputMode.CHDIR, path, (opener,) if opener else ())


def value(payload: str, *lines: str, exit_code: int = 0) -> Result:
    return Result(False, OutputMode.VALUE, payload, tuple(lines), exit_code)


def error_result(exc: GotoError) -> Result:
    message = str(exc) or exc.kind
    return value(f"error: {exc.kind}: {message}", exit_code=exc.exit_code)


def _text_field(text: str) -> str:
    return text.replace("\r", " ").replace("\n", " ").replace(SEPARATOR, "%23")


def encode(result: Result) -> str:
    """Encode *result*. Raises InvalidArgument if a field cannot be handed to the shell."""
    if result.mode is OutputMode.CHDIR:
        for field in (result.payload, *result.extra):
            if SEPARATOR in field or "\n" in field:
                raise InvalidArgument(f"Cannot hand {field!r} to the shell: it contains '#' or a newline")
        fields = [result.payload, *result.extra]
    else:
        fields = [_text_field(f) for f in (result.payload, *result.extra)]
    head = [str(int(result.clear_screen)), str(int(result.mode))]
    return SEPARATOR.join(head + fields)


def render(result: Result) -> tuple[str, int]:
    """Result line and exit status. Never raises for a well-typed *result*."""
    try:
        return encode(result), result.exit_code
    except InvalidArgument as e:
        failure = error_result(e)
        return encode(failure), failure.exit_code
