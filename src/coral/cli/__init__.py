# topmark:header:start
#
#   project      : Coral
#   file         : __init__.py
#   file_relpath : src/coral/cli/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Coral CLI package.

This package groups all Click command definitions and supporting utilities
for the Coral command-line interface.

Typical usage:
    The console script entry point is defined in ``pyproject.toml`` as::

        [project.scripts]
        coral = "coral.cli.main:cli"

All subcommands live in [`coral.cli.commands`][].
"""

from __future__ import annotations

__all__: list[str] = []
