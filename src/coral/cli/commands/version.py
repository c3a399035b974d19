# topmark:header:start
#
#   project      : Coral
#   file         : version.py
#   file_relpath : src/coral/cli/commands/version.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Coral `version` command.

Prints the current Coral version as installed in the active Python environment.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import click

from coral.cli.cmd_common import get_effective_verbosity
from coral.constants import CORAL_VERSION

if TYPE_CHECKING:
    from coral.rendering.console_api import ConsoleLike
    from coral.rendering.style import Styler


@click.command(
    name="version",
    help="Show the current version of Coral.",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    help="Print the version as a JSON object.",
)
def version_command(*, as_json: bool = False) -> None:
    """Show the current version of Coral.

    Args:
        as_json (bool): Print ``{"version": ...}`` instead of plain text.
    """
    ctx = click.get_current_context()
    ctx.ensure_object(dict)
    console: ConsoleLike = ctx.obj["console"]
    styler: Styler = ctx.obj["styler"]

    if as_json:
        console.print(json.dumps({"version": CORAL_VERSION}))
    elif get_effective_verbosity(ctx) > 0:
        console.print(styler.heading("Coral version:"))
        console.print(f"    {styler.bold(CORAL_VERSION)}")
    else:
        console.print(styler.bold(CORAL_VERSION))
