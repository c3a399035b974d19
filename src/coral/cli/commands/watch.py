# topmark:header:start
#
#   project      : Coral
#   file         : watch.py
#   file_relpath : src/coral/cli/commands/watch.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Coral `watch` command.

Runs the checker, prints the indexed listing, then keeps watching the
project: every debounced batch of file changes triggers a new run, and
commands typed at the prompt (``help``, ``show N``, ``fix N``, ``list``,
``run``, ``quit``) act on the latest listing. Fixes resolve file names
against the workspace root, which is where cargo reports them from.
"""

from __future__ import annotations

import queue
from typing import TYPE_CHECKING

import click

from coral.analyzer.stream import Analyzer
from coral.cli.cmd_common import apply_config_color, build_config, report_config
from coral.cli.errors import cli_error_from
from coral.cli.options import CONTEXT_SETTINGS, checker_options
from coral.config.logging import get_logger
from coral.errors import CoralError
from coral.watch.commands import CommandInterpreter
from coral.watch.fixer import FixApplier
from coral.watch.input import InputReader
from coral.watch.orchestrator import Orchestrator
from coral.watch.watcher import FileWatcher
from coral.workspace import discover_watch_paths, find_workspace_root

if TYPE_CHECKING:
    from pathlib import Path

    from coral.config.logging import CoralLogger
    from coral.config.model import Config
    from coral.watch.watcher import ChangeSignal

logger: CoralLogger = get_logger(__name__)


@click.command(
    name="watch",
    context_settings=CONTEXT_SETTINGS,
    help="Check the project on every change and browse the diagnostics interactively.",
)
@click.option(
    "--debounce",
    "debounce_ms",
    type=click.IntRange(min=1),
    default=None,
    help="Milliseconds to wait for a burst of changes to settle (default: 2000).",
)
@checker_options
@click.pass_context
def watch_command(
    ctx: click.Context,
    *,
    debounce_ms: int | None,
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
    """Watch the project until ``quit`` or end of input."""
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
        debounce_ms=debounce_ms,
    )
    apply_config_color(ctx, config)

    changes: queue.Queue[ChangeSignal] = queue.Queue()
    commands: queue.Queue[str] = queue.Queue()

    try:
        paths: list[Path] = discover_watch_paths(config.root, config.watch_paths)
        report_config(ctx, config, paths)
        watcher = FileWatcher(
            paths,
            changes,
            root=config.root,
            debounce_ms=config.debounce_ms,
            ignore_patterns=config.ignore_patterns,
        )
        watcher.start()
        InputReader(click.get_text_stream("stdin"), commands).start()

        orchestrator = Orchestrator(
            analyzer_factory=lambda: Analyzer.from_config(config),
            interpreter=CommandInterpreter(
                FixApplier(
                    root=find_workspace_root(config.root), strategy=config.write_strategy
                )
            ),
            console=ctx.obj["console"],
            styler=ctx.obj["styler"],
            changes=changes,
            commands=commands,
            poll_interval=config.poll_interval,
        )
        try:
            orchestrator.run()
        finally:
            watcher.stop()
    except CoralError as exc:
        raise cli_error_from(exc) from exc
    logger.info("Watch finished after %d run(s)", orchestrator.runs)
