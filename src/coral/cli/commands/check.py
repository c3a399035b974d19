# topmark:header:start
#
#   project      : Coral
#   file         : check.py
#   file_relpath : src/coral/cli/commands/check.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Coral `check` command.

Runs the checker once, prints the indexed listing and a summary, and exits.
The exit code is 0 when no errors were reported and 1 otherwise, so the
command can gate CI jobs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from coral.analyzer.stream import Analyzer
from coral.cli.cmd_common import apply_config_color, build_config, report_config
from coral.cli.errors import cli_error_from
from coral.cli.exit_codes import ExitCode
from coral.cli.options import CONTEXT_SETTINGS, checker_options
from coral.config.logging import get_logger
from coral.diagnostic.snapshot import DiagnosticList
from coral.errors import CoralError
from coral.rendering.report import render_listing, render_summary

if TYPE_CHECKING:
    from pathlib import Path

    from coral.config.logging import CoralLogger
    from coral.config.model import Config
    from coral.diagnostic.model import DiagnosticEvent
    from coral.rendering.console_api import ConsoleLike
    from coral.rendering.style import Styler

logger: CoralLogger = get_logger(__name__)


@click.command(
    name="check",
    context_settings=CONTEXT_SETTINGS,
    help="Run the checker once and list its diagnostics.",
)
@checker_options
@click.pass_context
def check_command(
    ctx: click.Context,
    *,
    checker: str | None,
    clippy: bool,
    packages: tuple[str, ...],
    workspace: bool,
    all_targets: bool,
    debug: bool,
    on_malformed: str | None,
    root: Path,
    extra_args: tuple[str, ...],
) -> None:
    """Run the checker once.

    Exits with ``ExitCode.FAILURE`` when at least one error was reported.
    """
    config: Config = build_config(
        root=root,
        checker=checker,
        clippy=clippy,
        packages=packages,
        workspace=workspace,
        all_targets=all_targets,
        debug=debug,
        on_malformed=on_malformed,
        extra_args=extra_args,
    )
    apply_config_color(ctx, config)
    report_config(ctx, config)
    console: ConsoleLike = ctx.obj["console"]
    styler: Styler = ctx.obj["styler"]

    try:
        with Analyzer.from_config(config) as analyzer:
            events: list[DiagnosticEvent] = list(analyzer)
            skipped: int = analyzer.skipped
    except CoralError as exc:
        raise cli_error_from(exc) from exc

    snapshot: DiagnosticList = DiagnosticList.from_events(events, skipped=skipped)
    for line in render_listing(snapshot, styler):
        console.print(line)
    console.print(render_summary(snapshot.stats(), styler, skipped=skipped))

    if snapshot.stats().n_error > 0:
        ctx.exit(ExitCode.FAILURE)
