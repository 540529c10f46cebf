"""CLI for goto-cli directory shortcuts.

Resolves aliases to directories and prints one result line that a shell
wrapper acts on (a process cannot change its parent shell's directory).
"""

import logging
import os
import sys
from typing import Annotated, Callable, Optional

import click
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import protocol
from .errors import GotoError, InvalidArgument, UnknownLocation
from .models import ShortcutFlag
from .mutations import (
    add_shortcut,
    adjust_priority,
    decay_history,
    edit_shortcut,
    prune_history,
    push_history,
    remove_path,
    remove_shortcut,
    rename_shortcut,
    reset_history,
)
from .paths import last_component, normalize_path
from .protocol import Result
from .resolver import Request
from .session import Session, open_session

logger = logging.getLogger(__name__)

MAIN_HELP = """
Jump to directories by alias. Every command prints one result line:

  CLEAR#MODE#PAYLOAD[#EXTRA...]

MODE 0 means "cd to PAYLOAD" (an EXTRA names an opener to launch there),
MODE 1 means "print PAYLOAD and each EXTRA on its own line".

QUICK START:
  goto set proj ~/code/project          Save a shortcut
  goto proj                             Go there (same as: goto get proj)
  goto proj src/lib                     Go into a subdirectory of it
  goto                                  Go home
  goto pop                              Go back where you came from
  goto open proj code                   Go there and open it in 'code'

COMMANDS:
  get       Resolve and change directory (default command)
  where     Print the resolved path without moving
  open      Change directory and launch an opener
  set       Create or overwrite a shortcut
  edit      Point a shortcut at another path
  rename    Rename a shortcut
  del       Remove a shortcut (or every shortcut of a path)
  push/pop  History stack
  list      List shortcuts or history
  priority  Adjust one history entry's priority
  decay     Decrement every history priority
  reset     Restore every history priority to the ceiling
  prune     Evict exhausted and surplus history entries
  state     Show both stores as tables (on stderr)

STORE:
  Default location: .goto-cli/ in the cwd if present, else ~/.goto-cli/
  Override with: --store PATH or GOTO_CLI_STORE env var
"""

app = typer.Typer(
    name="goto",
    help=MAIN_HELP,
    rich_markup_mode="markdown",
    add_completion=False,
)

err_console = Console(stderr=True)

GLOBAL_FLAGS = ("--verbose", "-v")

StoreOption = Annotated[
    Optional[str],
    typer.Option(
        "--store",
        help="Store directory. Overrides all other resolution.",
        envvar="GOTO_CLI_STORE",
    ),
]
ClearOption = Annotated[
    bool,
    typer.Option(
        "--clear", "-C",
        help="Ask the shell to clear the terminal after moving.",
    ),
]


@app.callback()
def configure(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log debug output to stderr."),
    ] = False,
) -> None:
    """Set up logging on stderr; stdout carries only the result line."""
    package_logger = logging.getLogger("goto_cli")
    for handler in list(package_logger.handlers):
        if isinstance(handler, RichHandler):
            package_logger.removeHandler(handler)
    package_logger.addHandler(RichHandler(console=err_console, show_time=False, show_path=False))
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _emit(result: Result) -> None:
    line, code = protocol.render(result)
    typer.echo(line)
    if code:
        raise typer.Exit(code)


def _transaction(store: Optional[str], action: Callable[[Session], Result]) -> None:
    """Load, run *action*, save what changed, then print the result line."""
    try:
        session = open_session(store)
        result = action(session)
        session.commit()
    except GotoError as e:
        logger.debug("Command failed: %s", e)
        result = protocol.error_result(e)
    _emit(result)


def _path_or_cwd(session: Session, path: Optional[str]) -> str:
    return normalize_path(path, session.cwd) if path else session.cwd


GET_HELP = """
Resolve an alias and change directory to it.

Lookup order: shortcut alias, home (no argument, '~' or 'pwsh'),
history ('-' or 'back' pops the last location; a path already in
history is taken out of it), then an existing directory.

EXAMPLES:
  goto get proj               cd to the 'proj' shortcut
  goto get proj src/lib       cd to proj/src/lib
  goto get                    cd home
  goto get -                  cd back

OUTPUT:
  0#0#/path/to/dir
"""


@app.command(help=GET_HELP)
def get(
    alias: Annotated[
        Optional[str],
        typer.Argument(help="Shortcut, keyword or directory. Omit to go home."),
    ] = None,
    subpath: Annotated[
        Optional[str],
        typer.Argument(help="Path below the resolved directory."),
    ] = None,
    clear: ClearOption = False,
    store: StoreOption = None,
) -> None:
    """Resolve and change directory."""

    def action(session: Session) -> Result:
        resolution = session.navigate(Request(alias, subpath))
        return protocol.chdir(resolution.path, clear=clear)

    _transaction(store, action)


WHERE_HELP = """
Print the path an alias resolves to, without moving and without
touching history.

EXAMPLES:
  goto where proj
  goto where proj src
"""


@app.command(help=WHERE_HELP)
def where(
    alias: Annotated[Optional[str], typer.Argument(help="Shortcut, keyword or directory.")] = None,
    subpath: Annotated[Optional[str], typer.Argument(help="Path below the resolved directory.")] = None,
    store: StoreOption = None,
) -> None:
    """Print the resolved path."""

    def action(session: Session) -> Result:
        return protocol.value(session.resolve(Request(alias, subpath)).path)

    _transaction(store, action)


OPEN_HELP = """
Change directory and ask the shell to launch an opener there.

The opener given on the command line wins over the shortcut's stored
opener, which wins over the default (GOTO_CLI_OPENER, else 'shell').

EXAMPLES:
  goto open proj              Use the shortcut's opener
  goto open proj code         Open in 'code'
  goto open proj code --subpath docs

OUTPUT:
  0#0#/path/to/dir#code
"""


@app.command("open", help=OPEN_HELP)
def open_location(
    alias: Annotated[Optional[str], typer.Argument(help="Shortcut, keyword or directory.")] = None,
    opener: Annotated[Optional[str], typer.Argument(help="Tool to launch at the location.")] = None,
    subpath: Annotated[
        Optional[str],
        typer.Option("--subpath", "-s", help="Path below the resolved directory."),
    ] = None,
    clear: ClearOption = False,
    store: StoreOption = None,
) -> None:
    """Change directory and launch an opener."""

    def action(session: Session) -> Result:
        resolution = session.navigate(Request(alias, subpath, opener))
        return protocol.chdir(resolution.path, clear=clear, opener=resolution.opener)

    _transaction(store, action)


SET_HELP = """
Create a shortcut, or overwrite an existing one (no confirmation).

If PATH is omitted the current directory is used. If ALIAS is omitted
too, the name of the current directory becomes the alias.

EXAMPLES:
  goto set proj ~/code/project
  goto set proj ~/code/project code     Default opener 'code'
  goto set                              Alias = name of cwd
  goto set tmp /tmp --auto              Mark as auto-saved
"""


@app.command("set", help=SET_HELP)
def set_shortcut(
    alias: Annotated[Optional[str], typer.Argument(help="Shortcut name.")] = None,
    path: Annotated[Optional[str], typer.Argument(help="Target directory. Defaults to cwd.")] = None,
    opener: Annotated[Optional[str], typer.Argument(help="Default opener for this shortcut.")] = None,
    auto: Annotated[
        bool,
        typer.Option("--auto", help="Mark as auto-saved (replaceable)."),
    ] = False,
    store: StoreOption = None,
) -> None:
    """Create or overwrite a shortcut."""

    def action(session: Session) -> Result:
        target = _path_or_cwd(session, path)
        flag = ShortcutFlag.AUTO if auto else ShortcutFlag.STATIC
        record, previous = add_shortcut(
            session.shortcuts,
            alias or last_component(target),
            target,
            opener,
            flag,
            default_opener=session.settings.default_opener,
        )
        session.shortcuts_dirty = True
        if previous is None:
            return protocol.value(f"Saved {record.alias} -> {record.path}")
        return protocol.value(f"Replaced {record.alias}: {previous.path} -> {record.path}")

    _transaction(store, action)


EDIT_HELP = """
Point an existing shortcut at another directory (default: cwd),
keeping its opener.

EXAMPLE:
  goto edit proj ~/code/project-v2
"""


@app.command(help=EDIT_HELP)
def edit(
    alias: Annotated[str, typer.Argument(help="Existing shortcut.")],
    path: Annotated[Optional[str], typer.Argument(help="New target. Defaults to cwd.")] = None,
    store: StoreOption = None,
) -> None:
    """Change a shortcut's path."""

    def action(session: Session) -> Result:
        record = edit_shortcut(session.shortcuts, alias, _path_or_cwd(session, path))
        session.shortcuts_dirty = True
        return protocol.value(f"Updated {record.alias} -> {record.path}")

    _transaction(store, action)


@app.command(help="Rename a shortcut. Overwrites NEW if it exists.")
def rename(
    old: Annotated[str, typer.Argument(help="Current alias.")],
    new: Annotated[str, typer.Argument(help="New alias.")],
    store: StoreOption = None,
) -> None:
    """Rename a shortcut."""

    def action(session: Session) -> Result:
        record = rename_shortcut(session.shortcuts, old, new)
        session.shortcuts_dirty = True
        return protocol.value(f"Renamed {old} -> {record.alias}")

    _transaction(store, action)


DEL_HELP = """
Remove a shortcut. Removing an alias that does not exist reports
'not found' and changes nothing.

EXAMPLES:
  goto del proj
  goto del --path ~/code/project     Remove every alias of a directory
"""


@app.command("del", help=DEL_HELP)
def delete(
    alias: Annotated[Optional[str], typer.Argument(help="Shortcut to remove.")] = None,
    path: Annotated[
        Optional[str],
        typer.Option("--path", "-p", help="Remove every shortcut pointing here instead."),
    ] = None,
    store: StoreOption = None,
) -> None:
    """Remove shortcuts."""

    def action(session: Session) -> Result:
        if (alias is None) == (path is None):
            raise InvalidArgument("Give either an alias or --path")
        if alias is not None:
            removed = [remove_shortcut(session.shortcuts, alias).alias]
        else:
            removed = remove_path(session.shortcuts, normalize_path(path, session.cwd))
        session.shortcuts_dirty = True
        return protocol.value(f"Removed {', '.join(removed)}")

    _transaction(store, action)


@app.command(help="Push a directory (default: cwd) onto the history stack.")
def push(
    path: Annotated[Optional[str], typer.Argument(help="Directory to push.")] = None,
    store: StoreOption = None,
) -> None:
    """Push onto history."""

    def action(session: Session) -> Result:
        target = _path_or_cwd(session, path)
        if not os.path.isdir(target):
            raise UnknownLocation(path or target)
        push_history(session.history, target, session.settings.ceiling)
        session.history_dirty = True
        return protocol.value(f"Pushed {target} ({len(session.history)} in history)")

    _transaction(store, action)


@app.command(help="Go back to the last location in history (home if empty).")
def pop(
    clear: ClearOption = False,
    store: StoreOption = None,
) -> None:
    """Pop from history."""

    def action(session: Session) -> Result:
        return protocol.chdir(session.pop(), clear=clear)

    _transaction(store, action)


def _columns(rows: list[list[str]]) -> list[str]:
    # plain padding, not a rich Table: these rows become fields of the result line
    widths = [max(len(row[i]) for row in rows) for i in range(len(rows[0]))]
    return ["  ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip() for row in rows]


LIST_HELP = """
List shortcuts (or history with --history), one line per record.

OUTPUT:
  0#1#2 shortcut(s)#docs  /home/u/docs  shell  static#...
"""


@app.command("list", help=LIST_HELP)
def list_records(
    history: Annotated[
        bool,
        typer.Option("--history", "-H", help="List the history stack, top first."),
    ] = False,
    store: StoreOption = None,
) -> None:
    """List shortcuts or history."""

    def action(session: Session) -> Result:
        if history:
            entries = list(session.history)[::-1]
            if not entries:
                return protocol.value("History is empty.")
            rows = [[str(i), e.path, str(e.priority)] for i, e in enumerate(entries)]
            return protocol.value(f"{len(entries)} history entries", *_columns(rows))
        records = list(session.shortcuts)
        if not records:
            return protocol.value("No shortcuts.")
        rows = [[r.alias, r.path, r.opener, r.flag.name.lower()] for r in records]
        return protocol.value(f"{len(records)} shortcut(s)", *_columns(rows))

    _transaction(store, action)


PRIORITY_HELP = """
Add DELTA (may be negative) to one history entry's priority. TARGET is
an index (0 = top) or a path / directory name. An entry reaching 0 is
only evicted by 'goto prune'.

EXAMPLES:
  goto priority 0 -200
  goto priority project 50
"""


@app.command(help=PRIORITY_HELP, context_settings={"ignore_unknown_options": True})
def priority(
    target: Annotated[str, typer.Argument(help="Index (0 = top), path or directory name.")],
    delta: Annotated[int, typer.Argument(help="Amount to add.")],
    store: StoreOption = None,
) -> None:
    """Adjust one history priority."""

    def action(session: Session) -> Result:
        key = int(target) if target.isdigit() else target
        entry = adjust_priority(session.history, key, delta)
        session.history_dirty = True
        return protocol.value(f"{entry.path} priority {entry.priority}")

    _transaction(store, action)


@app.command(help="Decrement every history priority by AMOUNT (floor 0).")
def decay(
    amount: Annotated[int, typer.Argument(help="Amount to subtract.", min=0)] = 1,
    store: StoreOption = None,
) -> None:
    """Decay history priorities."""

    def action(session: Session) -> Result:
        exhausted = decay_history(session.history, amount)
        session.history_dirty = bool(len(session.history))
        return protocol.value(f"Decayed {len(session.history)} entries, {exhausted} newly at 0")

    _transaction(store, action)


@app.command(help="Restore every history priority to the ceiling.")
def reset(store: StoreOption = None) -> None:
    """Reset history priorities."""

    def action(session: Session) -> Result:
        reset_history(session.history, session.settings.ceiling)
        session.history_dirty = bool(len(session.history))
        return protocol.value(f"Reset {len(session.history)} entries to {session.settings.ceiling}")

    _transaction(store, action)


PRUNE_HELP = """
Evict history entries whose priority reached 0, then the oldest entries
beyond --max (default GOTO_CLI_HISTORY_MAX, else 100).
"""


@app.command(help=PRUNE_HELP)
def prune(
    max_entries: Annotated[
        Optional[int],
        typer.Option("--max", "-m", help="Keep at most this many entries.", min=0),
    ] = None,
    store: StoreOption = None,
) -> None:
    """Prune history."""

    def action(session: Session) -> Result:
        cap = session.settings.history_max if max_entries is None else max_entries
        evicted = prune_history(session.history, cap)
        session.history_dirty = bool(evicted)
        return protocol.value(f"Pruned {len(evicted)} entries, {len(session.history)} left")

    _transaction(store, action)


@app.command(help="Show shortcuts and history as tables on stderr.")
def state(store: StoreOption = None) -> None:
    """Print both stores for a human."""

    def action(session: Session) -> Result:
        table = Table(title="Shortcuts", show_header=True, header_style="bold")
        table.add_column("Alias", style="cyan")
        table.add_column("Path")
        table.add_column("Opener", style="green")
        table.add_column("Flag", style="dim")
        for r in session.shortcuts:
            table.add_row(r.alias, r.path, r.opener, r.flag.name.lower())
        err_console.print(table)

        hist = Table(title="History (top first)", show_header=True, header_style="bold")
        hist.add_column("#", style="dim", width=4)
        hist.add_column("Path")
        hist.add_column("Priority", style="yellow")
        for i, e in enumerate(list(session.history)[::-1]):
            hist.add_row(str(i), e.path, str(e.priority))
        err_console.print(hist)
        return protocol.value(f"{len(session.shortcuts)} shortcut(s), {len(session.history)} history entries")

    _transaction(store, action)


def _command_names() -> set[str]:
    return set(typer.main.get_command(app).commands)  # type: ignore[attr-defined]


def route(argv: list[str]) -> list[str]:
    """Make ``get`` the default command: ``goto proj`` is ``goto get proj``."""
    args = list(argv)
    i = 0
    while i < len(args) and args[i] in GLOBAL_FLAGS:
        i += 1
    rest = args[i:]
    if rest and (rest[0] in _command_names() or rest[0] == "--help"):
        return args
    return args[:i] + ["get"] + rest


def run(argv: Optional[list[str]] = None) -> int:
    """Run one invocation and return its exit status.

    Command-line errors caught by click are still reported as a result line.
    """
    args = route(sys.argv[1:] if argv is None else argv)
    command = typer.main.get_command(app)
    try:
        code = command.main(args=args, prog_name="goto", standalone_mode=False)
    except click.ClickException as e:
        line, code = protocol.render(protocol.error_result(InvalidArgument(e.format_message())))
        typer.echo(line)
    except click.Abort:
        line, code = protocol.render(protocol.error_result(InvalidArgument("Aborted")))
        typer.echo(line)
    return code if isinstance(code, int) else 0


def main() -> None:
    """Entry point for the CLI."""
    sys.exit(run())


if __name__ == "__main__":
    main()
