# topmark:header:start
#
#   project      : Coral
#   file         : conftest.py
#   file_relpath : tests/cli/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""CLI test helpers for running Coral in a controlled working directory.

`run_cli_in()` changes the process working directory to the given project
before invoking the Click CLI, so the default ``--root .`` resolves to it.
`fake_checker()` installs a small Python script that stands in for
``cargo check`` by printing canned records.
"""

from __future__ import annotations

import json
import os
import sys
import textwrap
from typing import IO, TYPE_CHECKING, Any, Sequence

from click.testing import CliRunner, Result

from coral.cli.exit_codes import ExitCode
from coral.cli.main import cli

if TYPE_CHECKING:
    from pathlib import Path


def run_cli_in(
    project: Path,
    argv: str | Sequence[str] | None,
    *,
    input_text: str | bytes | IO[Any] | None = None,
) -> Result:
    """Invoke the CLI with ``project`` as the working directory.

    Args:
        project (Path): Directory used as the CWD for the command invocation.
        argv (str | Sequence[str] | None): CLI argument vector, e.g. ``["check"]``.
        input_text (str | bytes | IO[Any] | None): Optional standard input.

    Returns:
        Result: The `click.testing.Result` produced by `CliRunner.invoke`.
    """
    runner = CliRunner()
    cwd: str = os.getcwd()
    try:
        os.chdir(project)
        return runner.invoke(cli, argv, input=input_text)
    finally:
        os.chdir(cwd)


def run_cli(
    argv: str | Sequence[str] | None,
    *,
    input_text: str | bytes | IO[Any] | None = None,
) -> Result:
    """Invoke the CLI without changing the working directory.

    Use this helper when the test does **not** depend on a project
    (e.g., ``--help`` / ``version``).
    """
    runner = CliRunner()
    return runner.invoke(cli, argv, input=input_text)


def fake_checker(
    project: Path,
    output: bytes,
    *,
    exit_code: int = 0,
    clean_after_fix: bytes | None = None,
) -> None:
    """Make ``project`` run a Python script instead of ``cargo``.

    The script is saved as ``<project>/check``; ``coral.toml`` points
    ``checker_binary`` at the running interpreter, so the argv
    ``[python, "check", "--message-format", "json"]`` executes it.

    Args:
        project (Path): Project root (must exist).
        output (bytes): Bytes the script writes to stdout.
        exit_code (int): The script's exit status.
        clean_after_fix (bytes | None): When given, this is printed instead of
            ``output`` once ``src/main.rs`` no longer contains ``let unused``.
    """
    script: str = textwrap.dedent(
        f"""\
        import pathlib
        import sys

        data = {output!r}
        clean = {clean_after_fix!r}
        main_rs = pathlib.Path("src/main.rs")
        if clean is not None and main_rs.exists() and "let unused" not in main_rs.read_text():
            data = clean
        sys.stdout.buffer.write(data)
        sys.exit({exit_code})
        """
    )
    (project / "check").write_text(script, encoding="utf-8")
    (project / "coral.toml").write_text(
        f"checker_binary = {json.dumps(sys.executable)}\n", encoding="utf-8"
    )


def assert_SUCCESS(result: Result) -> None:
    """Assert that the command exited successfully (code 0)."""
    assert result.exit_code == ExitCode.SUCCESS, result.output


def assert_exit_code(result: Result, code: ExitCode) -> None:
    """Assert that the command exited with ``code``."""
    assert result.exit_code == code, result.output
