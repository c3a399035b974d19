# topmark:header:start
#
#   project      : Coral
#   file         : __init__.py
#   file_relpath : src/coral/cli/commands/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Click subcommands of the Coral CLI."""

from __future__ import annotations
