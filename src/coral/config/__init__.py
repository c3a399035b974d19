# topmark:header:start
#
#   project      : Coral
#   file         : __init__.py
#   file_relpath : src/coral/config/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Configuration handling for Coral.

Supports code defaults, a project config file (``coral.toml`` or the
``[tool.coral]`` table of ``pyproject.toml``) and CLI overrides.
"""

from __future__ import annotations

from coral.config.model import Config
from coral.config.types import Checker, FileWriteStrategy, MalformedRecordPolicy, StderrMode

__all__ = [
    "Checker",
    "Config",
    "FileWriteStrategy",
    "MalformedRecordPolicy",
    "StderrMode",
]
