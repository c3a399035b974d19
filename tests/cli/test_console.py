# topmark:header:start
#
#   project      : Coral
#   file         : test_console.py
#   file_relpath : tests/cli/test_console.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for the Click-backed console."""

from __future__ import annotations

import io

from coral.cli.console import ClickConsole


def _console(*, enable_color: bool) -> tuple[ClickConsole, io.StringIO, io.StringIO]:
    out, err = io.StringIO(), io.StringIO()
    return ClickConsole(enable_color=enable_color, out=out, err=err), out, err


def test_print_writes_lines_to_stdout() -> None:
    console, out, err = _console(enable_color=False)

    console.print("  0 warning")
    console.print()

    assert out.getvalue() == "  0 warning\n\n"
    assert err.getvalue() == ""


def test_prompt_stays_on_the_current_line() -> None:
    console, out, _err = _console(enable_color=False)

    console.prompt("> ")

    assert out.getvalue() == "> "


def test_error_goes_to_stderr_in_color() -> None:
    console, out, err = _console(enable_color=True)

    console.error("Invalid index 3: expected 0..1")

    assert out.getvalue() == ""
    assert "\x1b[" in err.getvalue()
    assert "Invalid index 3: expected 0..1" in err.getvalue()


def test_error_is_plain_without_color() -> None:
    console, _out, err = _console(enable_color=False)

    console.error("Unknown command: 'x'")

    assert err.getvalue() == "Unknown command: 'x'\n"
