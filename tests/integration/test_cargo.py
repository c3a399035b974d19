# topmark:header:start
#
#   project      : Coral
#   file         : test_cargo.py
#   file_relpath : tests/integration/test_cargo.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""End-to-end tests against a real ``cargo check``.

Skipped when ``cargo`` is not on ``PATH``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from coral.analyzer.stream import Analyzer
from coral.config.model import Config
from coral.diagnostic.model import Artifact, BuildFinished, Level
from coral.diagnostic.snapshot import DiagnosticList
from coral.watch.commands import CommandInterpreter
from coral.watch.fixer import FixApplier
from tests.cli.conftest import assert_SUCCESS, run_cli_in
from tests.conftest import MAIN_RS, mark_integration, requires_cargo

if TYPE_CHECKING:
    from pathlib import Path

    from coral.diagnostic.model import DiagnosticEvent


def _run(config: Config) -> tuple[list[DiagnosticEvent], DiagnosticList]:
    with Analyzer.from_config(config) as analyzer:
        events: list[DiagnosticEvent] = list(analyzer)
    return events, DiagnosticList.from_events(events)


@mark_integration
@requires_cargo
def test_unused_variable_is_reported_and_fixed(cargo_project: Path) -> None:
    config = Config.from_defaults(cargo_project)

    events, snapshot = _run(config)

    assert any(isinstance(e, Artifact) for e in events)
    assert isinstance(events[-1], BuildFinished) and events[-1].success
    # rustc also reports a spanless "1 warning emitted" summary
    warnings = [m for m in snapshot if m.level is Level.WARNING and m.spans]
    assert len(warnings) == 1
    span = warnings[0].primary_span()
    assert span is not None
    assert span.file_name == "src/main.rs"
    assert span.line_start == 2

    index = snapshot.messages.index(warnings[0])
    CommandInterpreter(FixApplier(root=config.root)).fix(snapshot, index)

    assert (cargo_project / "src" / "main.rs").read_text(encoding="utf-8") == MAIN_RS.replace(
        "unused", "_unused"
    )
    _events, rerun = _run(config)
    assert rerun.stats().n_warning == 0


@mark_integration
@requires_cargo
def test_check_command_against_cargo(cargo_project: Path) -> None:
    result = run_cli_in(cargo_project, ["--no-color", "check"])

    assert_SUCCESS(result)
    assert "unused variable: `unused`" in result.output
