# topmark:header:start
#
#   project      : Coral
#   file         : __init__.py
#   file_relpath : src/coral/watch/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""The interactive watch loop.

Three execution contexts cooperate:

- `FileWatcher` (daemon thread): debounced filesystem changes → change channel.
- `InputReader` (daemon thread): user command lines → command channel.
- `Orchestrator` (main thread): polls both channels, runs the checker, owns
  the diagnostics snapshot, and executes commands through
  `CommandInterpreter` / `FixApplier`.
"""

from __future__ import annotations

from coral.watch.commands import CommandInterpreter, CommandOutcome, parse_command
from coral.watch.fixer import FixApplier, FixResult
from coral.watch.input import InputReader
from coral.watch.orchestrator import Orchestrator, OrchestratorState
from coral.watch.watcher import ChangeSignal, FileWatcher

__all__ = [
    "ChangeSignal",
    "CommandInterpreter",
    "CommandOutcome",
    "FileWatcher",
    "FixApplier",
    "FixResult",
    "InputReader",
    "Orchestrator",
    "OrchestratorState",
    "parse_command",
]
