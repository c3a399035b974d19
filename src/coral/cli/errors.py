# topmark:header:start
#
#   project      : Coral
#   file         : errors.py
#   file_relpath : src/coral/cli/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions for Coral CLI.

Usage:
    Commands convert fatal domain errors (`coral.errors`) with `cli_error_from`
    and raise the result; Click prints the message and exits with the
    associated exit code.

Styling:
    Exceptions prefer the project console if available (see `show()`); if no console
    is present in the Click context, they fall back to Click's default styling.
"""

from __future__ import annotations

from typing import IO, Any

import click

from coral.cli.exit_codes import ExitCode
from coral.errors import (
    ConfigError,
    CoralError,
    DecodeError,
    ProcessSpawnError,
    WatchRegistrationError,
)


class CoralCliError(click.ClickException):
    """Base class for all Coral CLI errors."""

    exit_code = ExitCode.FAILURE

    def format_message(self) -> str:  # pragma: no cover - trivial
        """Return the plain error message text (colorization happens in `show()`)."""
        return str(getattr(self, "message", ""))

    def show(self, file: IO[Any] | None = None) -> None:  # pragma: no cover - Click prints errors
        """Display the error using the project console if available.

        Falls back to Click's default error display when no console is present.
        """
        ctx = click.get_current_context(silent=True)
        console = ctx.obj.get("console") if ctx is not None and isinstance(ctx.obj, dict) else None
        if console is not None:
            console.error(f"Error: {self.format_message()}")
            return
        super().show(file)


class CoralUsageError(CoralCliError):
    """Error for command-line invocation errors (invalid flags/args)."""

    exit_code = ExitCode.USAGE_ERROR


class CoralConfigError(CoralCliError):
    """Error for configuration errors (missing/invalid/malformed config)."""

    exit_code = ExitCode.CONFIG_ERROR


class CoralCheckerUnavailableError(CoralCliError):
    """Error when the checker executable cannot be launched."""

    exit_code = ExitCode.CHECKER_UNAVAILABLE


class CoralDecodeError(CoralCliError):
    """Error when the checker emits a malformed record."""

    exit_code = ExitCode.DECODE_ERROR


class CoralWatchError(CoralCliError):
    """Error when a watch path cannot be registered."""

    exit_code = ExitCode.WATCH_ERROR


def cli_error_from(exc: CoralError) -> CoralCliError:
    """Return the CLI error (with exit code) matching a fatal domain error."""
    if isinstance(exc, ProcessSpawnError):
        return CoralCheckerUnavailableError(str(exc))
    if isinstance(exc, DecodeError):
        return CoralDecodeError(str(exc))
    if isinstance(exc, WatchRegistrationError):
        return CoralWatchError(str(exc))
    if isinstance(exc, ConfigError):
        return CoralConfigError(str(exc))
    return CoralCliError(str(exc))
