# topmark:header:start
#
#   project      : Coral
#   file         : main.py
#   file_relpath : src/coral/cli/main.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Click entry point for Coral.

Group-level options are initialized once and placed into ``ctx.obj``:

- ``verbosity_level``: program-output verbosity (``-1`` quiet, ``0`` default, ``1+`` verbose)
- ``log_level``: internal logging level resolved from ``CORAL_LOG_LEVEL``
- ``color_mode``: the explicit ``--color``/``--no-color`` choice, or None
- ``color_enabled``, ``console`` and ``styler``: the resulting output objects

Subcommands may refine the color choice once the project config is known
(see `coral.cli.cmd_common.apply_config_color`).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from coral.cli.cmd_common import set_color_state
from coral.cli.commands.check import check_command
from coral.cli.commands.version import version_command
from coral.cli.commands.watch import watch_command
from coral.cli.options import (
    CONTEXT_SETTINGS,
    common_color_options,
    common_verbose_options,
    resolve_verbosity,
)
from coral.config.logging import get_logger, resolve_env_log_level, setup_logging
from coral.rendering.color import ColorMode, resolve_color_mode

if TYPE_CHECKING:
    from coral.config.logging import CoralLogger
    from coral.rendering.console_api import ConsoleLike

logger: CoralLogger = get_logger(__name__)


def init_common_state(
    ctx: click.Context,
    *,
    verbose: int,
    quiet: int,
    color_mode: str | None,
    no_color: bool,
) -> None:
    """Initialize shared state (verbosity & color) on the Click context.

    Args:
        ctx (click.Context): Current Click context; will have ``obj`` and ``color`` set.
        verbose (int): Count of ``-v`` flags.
        quiet (int): Count of ``-q`` flags.
        color_mode (str | None): Explicit color mode from ``--color`` (or ``None``).
        no_color (bool): Whether ``--no-color`` was passed; forces color off.
    """
    ctx.obj = ctx.obj or {}

    ctx.obj["verbosity_level"] = resolve_verbosity(verbose, quiet)

    level_env: int | None = resolve_env_log_level()
    ctx.obj["log_level"] = level_env
    setup_logging(level=level_env)

    explicit: ColorMode | None = (
        ColorMode.NEVER if no_color else (ColorMode(color_mode) if color_mode else None)
    )
    ctx.obj["color_mode"] = explicit
    set_color_state(ctx, resolve_color_mode(color_mode_override=explicit))


@click.group(
    cls=click.Group,
    context_settings=CONTEXT_SETTINGS,
    invoke_without_command=True,
    help="Coral: watch a Cargo project and browse its diagnostics.",
)
@common_verbose_options
@common_color_options
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: int,
    quiet: int,
    color_mode: str | None,
    no_color: bool,
) -> None:
    """Entry point for the Coral CLI."""
    init_common_state(
        ctx,
        verbose=verbose,
        quiet=quiet,
        color_mode=color_mode,
        no_color=no_color,
    )
    console: ConsoleLike = ctx.obj["console"]

    if ctx.invoked_subcommand is None:
        console.print("Hint: use 'coral watch' to check the project on every change.")
        console.print()
        console.print(ctx.get_help())


cli.add_command(version_command)

cli.add_command(check_command)

cli.add_command(watch_command)

if __name__ == "__main__":
    cli()
