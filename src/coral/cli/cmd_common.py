# topmark:header:start
#
#   project      : Coral
#   file         : cmd_common.py
#   file_relpath : src/coral/cli/cmd_common.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Helpers shared by the Coral subcommands.

These resolve the effective `Config` from the project's config file and the
command-line options, and refine the color state once the config is known.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from coral.cli.console import ClickConsole
from coral.cli.errors import cli_error_from
from coral.cli.options import build_extra_args, resolve_checker
from coral.config.logging import get_logger
from coral.config.model import Config
from coral.config.types import MalformedRecordPolicy
from coral.errors import ConfigError
from coral.rendering.color import resolve_color_mode
from coral.rendering.style import Styler

if TYPE_CHECKING:
    from pathlib import Path

    from coral.config.logging import CoralLogger
    from coral.rendering.color import ColorMode

logger: CoralLogger = get_logger(__name__)


def get_effective_verbosity(ctx: click.Context) -> int:
    """Return the program-output verbosity stored by the group (0 if absent)."""
    obj: object = ctx.obj
    if isinstance(obj, dict):
        return int(obj.get("verbosity_level", 0) or 0)
    return 0


def build_config(
    *,
    root: Path,
    checker: str | None,
    clippy: bool,
    packages: tuple[str, ...],
    workspace: bool,
    all_targets: bool,
    debug: bool,
    on_malformed: str | None,
    extra_args: tuple[str, ...],
    debounce_ms: int | None = None,
) -> Config:
    """Load the project config under ``root`` and apply command-line overrides.

    Extra cargo arguments given on the command line replace the configured
    ``extra_args`` rather than extending them.

    Raises:
        CoralConfigError: If the config file is malformed.
        CoralUsageError: If ``--clippy`` contradicts ``--checker``.
    """
    try:
        config: Config = Config.load(root)
        config = config.with_overrides(
            checker=resolve_checker(checker, clippy),
            extra_args=build_extra_args(
                packages=packages,
                workspace=workspace,
                all_targets=all_targets,
                extra_args=extra_args,
            ),
            debug=True if debug else None,
            on_malformed=MalformedRecordPolicy(on_malformed) if on_malformed else None,
            debounce_ms=debounce_ms,
        )
    except ConfigError as exc:
        raise cli_error_from(exc) from exc
    logger.debug("Effective config: %s", config)
    return config


def set_color_state(ctx: click.Context, enable_color: bool) -> None:
    """Store the console and styler matching ``enable_color`` on the context."""
    ctx.obj["color_enabled"] = enable_color
    ctx.color = enable_color
    ctx.obj["console"] = ClickConsole(enable_color=enable_color)
    ctx.obj["styler"] = Styler(enabled=enable_color)


def apply_config_color(ctx: click.Context, config: Config) -> None:
    """Let the config's ``color`` setting decide when no CLI color option was given."""
    explicit: ColorMode | None = ctx.obj.get("color_mode")
    if explicit is not None:
        return
    set_color_state(ctx, resolve_color_mode(color_mode_override=config.color_mode))


def report_config(
    ctx: click.Context, config: Config, watch_paths: list[Path] | None = None
) -> None:
    """Print config sources (and watched paths) when running verbosely."""
    if get_effective_verbosity(ctx) < 1:
        return
    console = ctx.obj["console"]
    if config.config_files:
        for path in config.config_files:
            console.print(f"Config: {path}")
    else:
        console.print("Config: defaults")
    console.print(f"Checker: {config.checker_binary} {' '.join(config.checker_args())}")
    for path in watch_paths or []:
        console.print(f"Watching: {path}")
