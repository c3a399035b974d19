# topmark:header:start
#
#   project      : Coral
#   file         : test_version.py
#   file_relpath : tests/cli/test_version.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""CLI test: `version` command and group behavior."""

from __future__ import annotations

import json

from coral.cli.exit_codes import ExitCode
from coral.constants import CORAL_VERSION
from tests.cli.conftest import assert_exit_code, assert_SUCCESS, run_cli
from tests.conftest import mark_cli


@mark_cli
def test_version_outputs_version() -> None:
    result = run_cli(["--no-color", "version"])

    assert_SUCCESS(result)
    assert result.output.strip() == CORAL_VERSION


@mark_cli
def test_version_as_json() -> None:
    result = run_cli(["version", "--json"])

    assert_SUCCESS(result)
    assert json.loads(result.output) == {"version": CORAL_VERSION}


@mark_cli
def test_verbose_version_has_heading() -> None:
    result = run_cli(["-v", "version"])

    assert_SUCCESS(result)
    assert "Coral version:" in result.output


@mark_cli
def test_no_subcommand_prints_hint_and_help() -> None:
    result = run_cli([])

    assert_SUCCESS(result)
    assert "coral watch" in result.output
    assert "Usage:" in result.output


@mark_cli
def test_verbose_and_quiet_are_exclusive() -> None:
    result = run_cli(["-v", "-q", "version"])

    assert_exit_code(result, ExitCode.USAGE_ERROR)
    assert "mutually exclusive" in result.output
