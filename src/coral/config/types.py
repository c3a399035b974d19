# topmark:header:start
#
#   project      : Coral
#   file         : types.py
#   file_relpath : src/coral/config/types.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Lightweight config enums.

This module hosts stable, import-friendly definitions that other config modules
can depend on without risk of circular imports. Each enum's ``value`` is the
spelling used in TOML and on the command line.
"""

from __future__ import annotations

from enum import Enum


class ConfigEnum(str, Enum):
    """Base for enums whose values are spelled the same in TOML and on the CLI."""


class Checker(ConfigEnum):
    """Cargo subcommand used to check a project."""

    CHECK = "check"
    CLIPPY = "clippy"


class StderrMode(ConfigEnum):
    """What to do with the checker's stderr stream."""

    CAPTURE = "capture"
    DISCARD = "discard"


class MalformedRecordPolicy(ConfigEnum):
    """How the decoder treats a complete line that is not a valid record."""

    FAIL = "fail"
    SKIP = "skip"


class FileWriteStrategy(ConfigEnum):
    """Available strategies for writing fixed file content."""

    ATOMIC = "atomic"
    IN_PLACE = "in_place"
