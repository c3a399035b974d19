# topmark:header:start
#
#   project      : Coral
#   file         : console.py
#   file_relpath : src/coral/cli/console.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Click-backed console for Coral's program output.

Listings and command output go to stdout. Command failures go to stderr,
bright red when color is enabled. The watch prompt stays on the current line
so the user types right after it.
"""

from __future__ import annotations

import sys
from typing import TextIO

import click

from coral.rendering.console_api import ConsoleLike

ERROR_COLOR: str = "bright_red"


class ClickConsole(ConsoleLike):
    """`ConsoleLike` writing through `click.echo`.

    Args:
        enable_color (bool): Keep ANSI styling; when False Click strips it,
            including styling already applied by the `Styler`.
        out (TextIO | None): Program output stream, `sys.stdout` by default.
        err (TextIO | None): Error stream, `sys.stderr` by default.
    """

    def __init__(
        self,
        *,
        enable_color: bool = True,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ) -> None:
        self.enable_color: bool = enable_color
        self.out: TextIO = out or sys.stdout
        self.err: TextIO = err or sys.stderr

    def print(self, text: str = "") -> None:
        """Write one line to stdout."""
        self._echo(text, self.out)

    def prompt(self, text: str) -> None:
        """Write ``text`` to stdout without a newline (`click.echo` flushes)."""
        self._echo(text, self.out, nl=False)

    def error(self, text: str) -> None:
        """Write one line to stderr in the error color."""
        self._echo(click.style(text, fg=ERROR_COLOR), self.err)

    def _echo(self, text: str, stream: TextIO, *, nl: bool = True) -> None:
        click.echo(text, file=stream, nl=nl, color=self.enable_color)
