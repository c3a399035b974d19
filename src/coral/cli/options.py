# topmark:header:start
#
#   project      : Coral
#   file         : options.py
#   file_relpath : src/coral/cli/options.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Common CLI option utilities for the Click-based Coral CLI.

This module centralizes reusable options (verbosity, color, checker
selection) and their resolution logic, so commands and groups can stay thin.
The helpers here are Click-aware.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, ParamSpec, TypeVar

import click

from coral.cli.errors import CoralUsageError
from coral.config.types import Checker, MalformedRecordPolicy
from coral.rendering.color import ColorMode

P = ParamSpec("P")
R = TypeVar("R")

CONTEXT_SETTINGS = {
    "help_option_names": ["-h", "--help"],
}


def resolve_verbosity(verbose_count: int, quiet_count: int) -> int:
    """Resolve program-output verbosity from ``-v``/``-q`` counts.

    Args:
        verbose_count: Number of times the verbose flag (-v) is passed.
        quiet_count: Number of times the quiet flag (-q) is passed.

    Returns:
        ``-1`` when quiet, ``0`` by default, otherwise the number of ``-v`` flags.

    Raises:
        CoralUsageError: If both verbose and quiet flags are used simultaneously.
    """
    if verbose_count > 0 and quiet_count > 0:
        raise CoralUsageError("The '--verbose' and '--quiet' options are mutually exclusive.")
    if quiet_count > 0:
        return -1
    return verbose_count


def common_verbose_options(f: Callable[P, R]) -> Callable[P, R]:
    """Adds --verbose and --quiet options to a command.

    Args:
        f: The Click command function to decorate.

    Returns:
        The decorated function with verbosity options added.
    """
    f = click.option(
        "-v",
        "--verbose",
        count=True,
        help="Increase verbosity (show config source and watched paths).",
    )(f)
    f = click.option(
        "-q",
        "--quiet",
        count=True,
        help="Suppress informational output.",
    )(f)
    return f


def common_color_options(f: Callable[P, R]) -> Callable[P, R]:
    """Adds --color and --no-color options to a command.

    Args:
        f: The Click command function to decorate.

    Returns:
        The decorated function with color options added.
    """
    f = click.option(
        "--color",
        "color_mode",
        type=click.Choice([m.value for m in ColorMode]),
        default=None,
        help="Color output: auto (default), always, or never.",
    )(f)
    f = click.option(
        "--no-color",
        "no_color",
        is_flag=True,
        help="Disable color output (equivalent to --color=never).",
    )(f)
    return f


def checker_options(f: Callable[P, R]) -> Callable[P, R]:
    """Adds the options that select and parameterize the checker.

    Options:
        ``--checker``, ``--clippy``, ``-p/--package``, ``--workspace``,
        ``--all-targets``, ``--debug``, ``--on-malformed``, ``--root``, and trailing
        ``EXTRA_ARGS`` passed verbatim to cargo (after ``--``).

    Args:
        f: The Click command function to decorate.

    Returns:
        The decorated function.
    """
    f = click.argument("extra_args", nargs=-1, type=click.UNPROCESSED)(f)
    f = click.option(
        "--root",
        type=click.Path(exists=True, file_okay=False, path_type=Path),
        default=Path("."),
        show_default=True,
        help="Project root holding Cargo.toml.",
    )(f)
    f = click.option(
        "--on-malformed",
        type=click.Choice([m.value for m in MalformedRecordPolicy]),
        default=None,
        help="What to do with malformed checker records: fail (default) or skip.",
    )(f)
    f = click.option(
        "--debug",
        is_flag=True,
        help="Append every raw checker record to the debug file (coral.json).",
    )(f)
    f = click.option(
        "--all-targets",
        is_flag=True,
        help="Check all targets (passed through to cargo).",
    )(f)
    f = click.option(
        "--workspace",
        is_flag=True,
        help="Check all workspace members (passed through to cargo).",
    )(f)
    f = click.option(
        "-p",
        "--package",
        "packages",
        multiple=True,
        help="Package(s) to check (passed through to cargo).",
    )(f)
    f = click.option(
        "--clippy",
        is_flag=True,
        help="Shorthand for --checker clippy.",
    )(f)
    f = click.option(
        "--checker",
        type=click.Choice([m.value for m in Checker]),
        default=None,
        help="Cargo subcommand used to check the project (default: check).",
    )(f)
    return f


def build_extra_args(
    *,
    packages: tuple[str, ...],
    workspace: bool,
    all_targets: bool,
    extra_args: tuple[str, ...],
) -> tuple[str, ...] | None:
    """Return the cargo arguments selected on the command line, or None if none were."""
    args: list[str] = []
    for package in packages:
        args.extend(("--package", package))
    if workspace:
        args.append("--workspace")
    if all_targets:
        args.append("--all-targets")
    args.extend(extra_args)
    return tuple(args) if args else None


def resolve_checker(checker: str | None, clippy: bool) -> Checker | None:
    """Combine ``--checker`` and ``--clippy``.

    Raises:
        CoralUsageError: If ``--clippy`` contradicts ``--checker``.
    """
    if clippy:
        if checker is not None and checker != Checker.CLIPPY.value:
            raise CoralUsageError("'--clippy' conflicts with '--checker " + checker + "'.")
        return Checker.CLIPPY
    return Checker(checker) if checker is not None else None
