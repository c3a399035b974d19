# topmark:header:start
#
#   project      : Coral
#   file         : console_api.py
#   file_relpath : src/coral/rendering/console_api.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Console interface for user-facing output of the watch loop and commands.

Listings, command output and the prompt are program output; failures of
user commands are errors. Neither goes through `logging`.
"""

from __future__ import annotations

from typing import Protocol


class ConsoleLike(Protocol):
    """Where the orchestrator and the CLI commands write for the user."""

    def print(self, text: str = "") -> None:
        """Write one line of program output."""
        ...

    def prompt(self, text: str) -> None:
        """Write ``text`` without a line break and make it visible immediately."""
        ...

    def error(self, text: str) -> None:
        """Write a one-line error diagnosis."""
        ...
