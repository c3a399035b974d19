# topmark:header:start
#
#   project      : Coral
#   file         : errors.py
#   file_relpath : src/coral/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Domain exceptions for Coral.

These exceptions are framework-agnostic. The CLI maps the fatal ones onto
Click exceptions with exit codes (see `coral.cli.errors`); the recoverable
ones (`CommandError` and subclasses) are reported as a one-line diagnosis by
the watch loop, which then returns to the prompt.

Fatal:
    * `ProcessSpawnError`: the checker executable could not be launched.
    * `DecodeError`: a complete output line is not a well-formed record.
    * `WatchRegistrationError`: a watch path is missing or unreadable.
    * `ConfigError`: configuration could not be loaded or validated.

Recoverable:
    * `InvalidIndexError`, `NoReplacementAvailableError`,
      `RangeOutOfBoundsError`, `FixIOError`, `UnknownCommandError`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path


class CoralError(Exception):
    """Base class for all Coral errors."""


class ProcessSpawnError(CoralError):
    """The checker subprocess could not be started."""

    def __init__(self, argv: Sequence[str], reason: str) -> None:
        self.argv: tuple[str, ...] = tuple(argv)
        self.reason: str = reason
        super().__init__(f"Unable to run {' '.join(self.argv)!r}: {reason}")


class DecodeError(CoralError):
    """A complete line of checker output could not be decoded."""

    def __init__(self, line: bytes, reason: str) -> None:
        self.line: bytes = line
        self.reason: str = reason
        preview: str = line[:80].decode("utf-8", errors="replace")
        super().__init__(f"Malformed checker record ({reason}): {preview!r}")


class WatchRegistrationError(CoralError):
    """A path could not be registered with the filesystem watcher."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path: Path = path
        self.reason: str = reason
        super().__init__(f"Cannot watch {path}: {reason}")


class ConfigError(CoralError):
    """Configuration is missing, malformed, or has invalid values."""


class CommandError(CoralError):
    """Base class for recoverable, user-driven command failures."""


class InvalidIndexError(CommandError):
    """An index does not address an entry of the current snapshot."""

    def __init__(self, index: int, length: int) -> None:
        self.index: int = index
        self.length: int = length
        if length == 0:
            msg = f"Invalid index {index}: there are no diagnostics"
        else:
            msg = f"Invalid index {index}: expected 0..{length - 1}"
        super().__init__(msg)


class NoReplacementAvailableError(CommandError):
    """A diagnostic carries no suggested replacement."""

    def __init__(self, index: int) -> None:
        self.index: int = index
        super().__init__(f"No suggested replacement available for {index}")


class RangeOutOfBoundsError(CommandError):
    """A replacement byte range does not fit the file contents."""

    def __init__(self, path: Path, byte_start: int, byte_end: int, length: int) -> None:
        self.path: Path = path
        self.byte_start: int = byte_start
        self.byte_end: int = byte_end
        self.length: int = length
        super().__init__(
            f"Byte range {byte_start}..{byte_end} is out of bounds for {path} ({length} bytes)"
        )


class FixIOError(CommandError):
    """Reading or writing a file during fix application failed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path: Path = path
        self.reason: str = reason
        super().__init__(f"Cannot apply fix to {path}: {reason}")


class UnknownCommandError(CommandError):
    """The user entered text that is not a known command."""

    def __init__(self, text: str) -> None:
        self.text: str = text
        super().__init__(f"Unknown command: {text!r}")
