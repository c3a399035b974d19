# topmark:header:start
#
#   project      : Coral
#   file         : __init__.py
#   file_relpath : src/coral/diagnostic/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Diagnostic model, record decoding, and run snapshots.

Design:
    - Each line of checker output decodes into one immutable `DiagnosticEvent`
      variant (see `coral.diagnostic.model`).
    - A completed run collects its report-worthy messages into an immutable
      `DiagnosticList` snapshot that is replaced wholesale on the next run.
"""

from __future__ import annotations

from coral.diagnostic.decode import decode_record
from coral.diagnostic.model import (
    Artifact,
    BuildFinished,
    BuildScriptExecuted,
    Code,
    DiagnosticEvent,
    Expansion,
    Level,
    Message,
    Profile,
    Span,
    SpanText,
    Target,
)
from coral.diagnostic.snapshot import DiagnosticList, LevelStats, compute_level_stats

__all__ = [
    "Artifact",
    "BuildFinished",
    "BuildScriptExecuted",
    "Code",
    "DiagnosticEvent",
    "DiagnosticList",
    "Expansion",
    "Level",
    "LevelStats",
    "Message",
    "Profile",
    "Span",
    "SpanText",
    "Target",
    "compute_level_stats",
    "decode_record",
]
