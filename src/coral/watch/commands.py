# topmark:header:start
#
#   project      : Coral
#   file         : commands.py
#   file_relpath : src/coral/watch/commands.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Interactive commands of the watch loop.

Commands read the current `DiagnosticList` and never modify it; the only
mutation they perform is delegated to `FixApplier`. Each failure is a
`CommandError` whose message is a one-line diagnosis for the user.

Grammar (case-insensitive, surrounding whitespace ignored)::

    <n> | show <n> | s <n>     show the checker's rendering of entry <n>
    fix <n> | f <n>            apply the first suggested replacement of entry <n>
    list | l                   print the listing again
    run | r                    re-run the checker now
    help | h | ?               print the command summary
    quit | q | exit            stop watching
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from coral.config.logging import get_logger
from coral.constants import EXIT_KEYWORDS
from coral.errors import NoReplacementAvailableError, UnknownCommandError

if TYPE_CHECKING:
    from pathlib import Path

    from coral.config.logging import CoralLogger
    from coral.diagnostic.model import Message, Span
    from coral.diagnostic.snapshot import DiagnosticList
    from coral.watch.fixer import FixApplier, FixResult

logger: CoralLogger = get_logger(__name__)

HELP_TEXT: str = """\
Commands:
  <n>, show <n>   show the full diagnostic <n>
  fix <n>         apply the suggested fix of diagnostic <n>
  list            list the current diagnostics
  run             re-run the checker now
  help            show this help
  quit            stop watching"""

NO_RENDER_TEXT: str = "No render available"


class CommandKind(Enum):
    """Kinds of interactive commands."""

    HELP = "help"
    SHOW = "show"
    FIX = "fix"
    LIST = "list"
    RUN = "run"
    QUIT = "quit"


_KEYWORDS: dict[str, CommandKind] = {
    "help": CommandKind.HELP,
    "h": CommandKind.HELP,
    "?": CommandKind.HELP,
    "show": CommandKind.SHOW,
    "s": CommandKind.SHOW,
    "fix": CommandKind.FIX,
    "f": CommandKind.FIX,
    "list": CommandKind.LIST,
    "l": CommandKind.LIST,
    "run": CommandKind.RUN,
    "r": CommandKind.RUN,
    **{keyword: CommandKind.QUIT for keyword in EXIT_KEYWORDS},
}

_INDEXED: frozenset[CommandKind] = frozenset({CommandKind.SHOW, CommandKind.FIX})


@dataclass(frozen=True)
class Command:
    """A parsed command; ``index`` is set for ``show`` and ``fix``."""

    kind: CommandKind
    index: int | None = None


def parse_command(text: str) -> Command:
    """Parse one line of user input.

    Args:
        text (str): The raw line.

    Returns:
        Command: The parsed command.

    Raises:
        UnknownCommandError: If the text matches no command.
    """
    words: list[str] = text.strip().lower().split()
    if len(words) == 1 and words[0].isdigit():
        return Command(CommandKind.SHOW, int(words[0]))
    kind: CommandKind | None = _KEYWORDS.get(words[0]) if words else None
    if kind is None:
        raise UnknownCommandError(text.strip())
    if kind in _INDEXED:
        if len(words) != 2 or not words[1].isdigit():
            raise UnknownCommandError(text.strip())
        return Command(kind, int(words[1]))
    if len(words) != 1:
        raise UnknownCommandError(text.strip())
    return Command(kind)


@dataclass(frozen=True)
class CommandOutcome:
    """What the watch loop should do after a command.

    Attributes:
        output (str | None): Text to print, if any.
        rerun (bool): Start a new analysis run.
        relist (bool): Print the listing of the current snapshot.
        quit (bool): Leave the watch loop.
        written (Path | None): File rewritten by a ``fix``.
    """

    output: str | None = None
    rerun: bool = False
    relist: bool = False
    quit: bool = False
    written: Path | None = None


class CommandInterpreter:
    """Maps user commands onto the current snapshot.

    Args:
        fixer (FixApplier): Applies suggested replacements.
    """

    def __init__(self, fixer: FixApplier) -> None:
        self.fixer: FixApplier = fixer

    def help(self) -> str:
        """Return the command summary."""
        return HELP_TEXT

    def show(self, snapshot: DiagnosticList, index: int) -> str:
        """Return the checker's rendering of entry ``index``.

        Raises:
            InvalidIndexError: If ``index`` is out of range.
        """
        message: Message = snapshot.get(index)
        if message.rendered is None:
            return NO_RENDER_TEXT
        return message.rendered.rstrip("\n")

    def fix(self, snapshot: DiagnosticList, index: int) -> FixResult:
        """Apply the first suggested replacement found in entry ``index``.

        The entry and its children are searched depth-first.

        Raises:
            InvalidIndexError: If ``index`` is out of range.
            NoReplacementAvailableError: If no span carries a replacement.
            RangeOutOfBoundsError: If the replacement range does not fit the file.
            FixIOError: If the file cannot be read or written.
        """
        message: Message = snapshot.get(index)
        span: Span | None = message.find_replacement()
        if span is None or span.suggested_replacement is None:
            raise NoReplacementAvailableError(index)
        return self.fixer.apply(span, span.suggested_replacement)

    def execute(self, snapshot: DiagnosticList, text: str) -> CommandOutcome:
        """Parse and run one line of user input.

        Raises:
            CommandError: For any recoverable failure; the snapshot is unchanged.
        """
        command: Command = parse_command(text)
        logger.debug("Executing %s command (index=%s)", command.kind.value, command.index)
        if command.kind is CommandKind.HELP:
            return CommandOutcome(output=self.help())
        if command.kind is CommandKind.SHOW:
            assert command.index is not None
            return CommandOutcome(output=self.show(snapshot, command.index))
        if command.kind is CommandKind.FIX:
            assert command.index is not None
            result: FixResult = self.fix(snapshot, command.index)
            return CommandOutcome(
                output=f"Applied fix to {result.path}", rerun=True, written=result.path
            )
        if command.kind is CommandKind.LIST:
            return CommandOutcome(relist=True)
        if command.kind is CommandKind.RUN:
            return CommandOutcome(rerun=True)
        return CommandOutcome(quit=True)
