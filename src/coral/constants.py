# topmark:header:start
#
#   project      : Coral
#   file         : constants.py
#   file_relpath : src/coral/constants.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Coral Constants."""

from __future__ import annotations

from importlib.metadata import version as get_version

CORAL_VERSION: str = get_version("coral-watch")

DEFAULT_CHECKER_BINARY: str = "cargo"
MESSAGE_FORMAT_ARGS: tuple[str, ...] = ("--message-format", "json")

DEFAULT_DEBUG_FILE: str = "coral.json"
DEFAULT_DEBOUNCE_MS: int = 2000
DEFAULT_POLL_INTERVAL: float = 0.05
DEFAULT_TERMINAL_WIDTH: int = 100

# Suffix of the temporary file an atomic fix write renames over its target
FIX_TEMP_SUFFIX: str = ".coral-tmp"

CARGO_MANIFEST: str = "Cargo.toml"
PYPROJECT_TOML: str = "pyproject.toml"
CORAL_TOML: str = "coral.toml"
TOOL_TABLE: str = "coral"

# Column widths of the compact report line
LEVEL_COLUMN_WIDTH: int = 7
FILE_COLUMN_WIDTH: int = 18
LINE_COLUMN_WIDTH: int = 8
ELLIPSIS: str = "..."

EXIT_KEYWORDS: frozenset[str] = frozenset({"q", "quit", "exit"})

LOG_LEVEL_ENV: str = "CORAL_LOG_LEVEL"
