# topmark:header:start
#
#   project      : Coral
#   file         : report.py
#   file_relpath : src/coral/rendering/report.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Compact one-line reports for checker messages.

A report line has four columns::

      Level               File    Line     Message
    warning          src/main.rs at 2:9      unused variable: `x`

The level is right-aligned, long file names are shortened from the left,
and the message is truncated with an ellipsis to fit the terminal width.
Every function takes the `Styler` to use explicitly.
"""

from __future__ import annotations

import shutil
from typing import TYPE_CHECKING

from coral.constants import (
    DEFAULT_TERMINAL_WIDTH,
    ELLIPSIS,
    FILE_COLUMN_WIDTH,
    LEVEL_COLUMN_WIDTH,
    LINE_COLUMN_WIDTH,
)
from coral.diagnostic.model import Level, Message

if TYPE_CHECKING:
    from coral.diagnostic.model import DiagnosticEvent, Span
    from coral.diagnostic.snapshot import DiagnosticList, LevelStats
    from coral.rendering.style import Styler

# Width of the index column ("NNN ") in a listing
INDEX_COLUMN_WIDTH: int = 4


def terminal_width() -> int:
    """Return the width of the terminal, or a sensible default."""
    return shutil.get_terminal_size((DEFAULT_TERMINAL_WIDTH, 24)).columns


def message_column_width(width: int) -> int:
    """Return the width left for the message column on a line of ``width``."""
    fixed: int = LEVEL_COLUMN_WIDTH + FILE_COLUMN_WIDTH + LINE_COLUMN_WIDTH + 6
    return max(width - fixed, len(ELLIPSIS) + 1)


def format_level(level: Level, styler: Styler) -> str:
    """Return the padded, styled level column."""
    if level is Level.NONE:
        return ""
    return styler.apply(level.style, level.value.rjust(LEVEL_COLUMN_WIDTH))


def _file_column(span: Span) -> str:
    name: str = span.file_name
    if len(name) > FILE_COLUMN_WIDTH:
        name = ELLIPSIS + name[len(name) - FILE_COLUMN_WIDTH + len(ELLIPSIS) :]
    return name.rjust(FILE_COLUMN_WIDTH)


def _message_column(text: str, width: int) -> str:
    text = " ".join(text.split("\n"))
    if len(text) > width:
        text = text[: width - len(ELLIPSIS)] + ELLIPSIS
    return text.ljust(width)


def report_headers(styler: Styler) -> str:
    """Return the column headers matching `report_message` lines."""
    level: str = styler.heading("Level".rjust(LEVEL_COLUMN_WIDTH))
    file: str = styler.heading("File".rjust(FILE_COLUMN_WIDTH))
    line: str = styler.heading("Line".ljust(LINE_COLUMN_WIDTH))
    message: str = styler.heading("Message")
    return f"{level} {file}    {line} {message}"


def report_message(message: Message, styler: Styler, width: int | None = None) -> str | None:
    """Return the compact report line for a message.

    Args:
        message (Message): The message to report.
        styler (Styler): Styling to apply.
        width (int | None): Available line width; defaults to the terminal width.

    Returns:
        str | None: The report line, or None when the message is not
        report-worthy or has no span to report at.
    """
    span: Span | None = message.primary_span()
    if span is None or not message.is_reportable:
        return None
    if width is None:
        width = terminal_width()
    line_no, column = span.location
    file: str = styler.location(_file_column(span))
    line: str = styler.location(f"{line_no}:{column}".ljust(LINE_COLUMN_WIDTH))
    text: str = styler.message(_message_column(message.text, message_column_width(width)))
    return f"{format_level(message.level, styler)} {file} at {line} {text}"


def report(event: DiagnosticEvent, styler: Styler, width: int | None = None) -> str | None:
    """Project a decoded event onto its report line.

    Only report-worthy messages produce output; artifacts and other
    passthrough records always return None.
    """
    if isinstance(event, Message):
        return report_message(event, styler, width)
    return None


def render_listing(snapshot: DiagnosticList, styler: Styler, width: int | None = None) -> list[str]:
    """Return the indexed listing of a snapshot, headers first.

    Every entry is unrolled; each message of the tree that yields a report is
    printed under its entry's index.
    """
    if width is None:
        width = terminal_width()
    report_width: int = width - INDEX_COLUMN_WIDTH
    lines: list[str] = [" " * INDEX_COLUMN_WIDTH + report_headers(styler)]
    for index, entry in enumerate(snapshot):
        for _depth, message in entry.unroll():
            line: str | None = report_message(message, styler, report_width)
            if line is not None:
                lines.append(f"{index:>3} {line}")
    return lines


def render_summary(stats: LevelStats, styler: Styler, *, skipped: int = 0) -> str:
    """Return a one-line summary of a run, e.g. ``"1 error, 2 warnings"``."""
    if not stats.total:
        summary: str = styler.apply("green_bright", "No diagnostics")
    else:
        parts: list[str] = []
        for level, count in (
            (Level.ERROR, stats.n_error),
            (Level.WARNING, stats.n_warning),
            (Level.HELP, stats.n_help),
            (Level.NOTE, stats.n_note),
        ):
            if count:
                noun: str = level.value if count == 1 else f"{level.value}s"
                parts.append(styler.apply(level.style, f"{count} {noun}"))
        summary = ", ".join(parts)
    if skipped:
        summary += f" ({skipped} malformed record{'s' if skipped != 1 else ''} skipped)"
    return summary
