# topmark:header:start
#
#   project      : Coral
#   file         : orchestrator.py
#   file_relpath : src/coral/watch/orchestrator.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""The watch-loop state machine.

States::

    IDLE --(start | change signal | successful fix | run command)--> RUNNING
    RUNNING --(stream fully consumed, snapshot replaced)--> IDLE
    IDLE --(quit command)--> STOPPED

The orchestrator runs on the main thread and is the only writer of the
diagnostics snapshot. Two channels feed it: change signals from the watch
thread and command lines from the input thread. While a run is in progress
neither channel is serviced; whatever arrives is queued and observed at the
next IDLE boundary, so two runs never overlap and a queued ``quit`` takes
effect once the current run has completed.

Channels are polled without blocking, commands first, with a short sleep
whenever both are empty. A successful ``fix`` re-runs immediately, so the
next change signal is dropped when it names only the files that fix wrote.
"""

from __future__ import annotations

import queue
import time
from enum import Enum
from typing import TYPE_CHECKING

from coral.config.logging import get_logger
from coral.diagnostic.snapshot import DiagnosticList
from coral.errors import CommandError, UnknownCommandError
from coral.rendering.report import render_listing, render_summary

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from coral.analyzer.stream import Analyzer
    from coral.config.logging import CoralLogger
    from coral.diagnostic.model import DiagnosticEvent
    from coral.rendering.console_api import ConsoleLike
    from coral.rendering.style import Styler
    from coral.watch.commands import CommandInterpreter, CommandOutcome
    from coral.watch.watcher import ChangeSignal

logger: CoralLogger = get_logger(__name__)

PROMPT: str = "> "


class OrchestratorState(Enum):
    """States of the watch loop."""

    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class Orchestrator:
    """Merges change signals, user commands, and analysis runs.

    Args:
        analyzer_factory (Callable[[], Analyzer]): Starts one checker run.
        interpreter (CommandInterpreter): Executes user commands.
        console (ConsoleLike): User-facing output.
        styler (Styler): Styling for listings and summaries.
        changes (queue.Queue[ChangeSignal]): Channel fed by the watch thread.
        commands (queue.Queue[str]): Channel fed by the input thread.
        poll_interval (float): Seconds to sleep when both channels are empty.
        width (int | None): Line width for listings; defaults to the terminal width.
        sleep (Callable[[float], None]): Sleep function, replaceable in tests.
    """

    def __init__(
        self,
        *,
        analyzer_factory: Callable[[], Analyzer],
        interpreter: CommandInterpreter,
        console: ConsoleLike,
        styler: Styler,
        changes: queue.Queue[ChangeSignal],
        commands: queue.Queue[str],
        poll_interval: float,
        width: int | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.analyzer_factory: Callable[[], Analyzer] = analyzer_factory
        self.interpreter: CommandInterpreter = interpreter
        self.console: ConsoleLike = console
        self.styler: Styler = styler
        self.changes: queue.Queue[ChangeSignal] = changes
        self.commands: queue.Queue[str] = commands
        self.poll_interval: float = poll_interval
        self.width: int | None = width
        self._sleep: Callable[[float], None] = sleep
        self._state: OrchestratorState = OrchestratorState.IDLE
        self._snapshot: DiagnosticList = DiagnosticList()
        self._runs: int = 0
        self._own_writes: set[Path] = set()

    @property
    def state(self) -> OrchestratorState:
        """Current state of the loop."""
        return self._state

    @property
    def snapshot(self) -> DiagnosticList:
        """Diagnostics of the last completed run."""
        return self._snapshot

    @property
    def runs(self) -> int:
        """Number of completed analysis runs."""
        return self._runs

    def run(self) -> None:
        """Analyze once, then serve both channels until a ``quit`` command.

        Raises:
            ProcessSpawnError: If the checker cannot be started.
            DecodeError: If the checker emits a malformed record (strict mode).
        """
        self.analyze()
        while self._state is not OrchestratorState.STOPPED:
            if not self.poll_once():
                self._sleep(self.poll_interval)
        logger.debug("Watch loop stopped after %d run(s)", self._runs)

    def poll_once(self) -> bool:
        """Service at most one command and one change signal.

        Returns:
            bool: True if anything was handled.
        """
        handled: bool = False
        try:
            text: str = self.commands.get_nowait()
        except queue.Empty:
            pass
        else:
            handled = True
            self.handle_command(text)
            if self._state is OrchestratorState.STOPPED:
                return handled

        try:
            signal: ChangeSignal = self.changes.get_nowait()
        except queue.Empty:
            pass
        else:
            handled = True
            if self._only_own_writes(signal):
                logger.debug("Ignoring change signal caused by a fix: %s", sorted(signal.paths))
            else:
                logger.info("Change detected in %d path(s); re-running", len(signal.paths))
                self.analyze()
        return handled

    def analyze(self) -> DiagnosticList:
        """Run the checker to completion and replace the snapshot.

        Returns:
            DiagnosticList: The new snapshot.

        Raises:
            ProcessSpawnError: If the checker cannot be started.
            DecodeError: If the checker emits a malformed record (strict mode).
        """
        self._transition(OrchestratorState.RUNNING)
        try:
            with self.analyzer_factory() as analyzer:
                events: list[DiagnosticEvent] = list(analyzer)
                skipped: int = analyzer.skipped
        except BaseException:
            self._transition(OrchestratorState.STOPPED)
            raise
        self._runs += 1
        self._snapshot = DiagnosticList.from_events(events, generation=self._runs, skipped=skipped)
        logger.debug(
            "Run %d: %d event(s), %d report-worthy", self._runs, len(events), len(self._snapshot)
        )
        self._transition(OrchestratorState.IDLE)
        self.print_listing()
        return self._snapshot

    def handle_command(self, text: str) -> None:
        """Execute one command line; recoverable errors are reported, not raised."""
        try:
            outcome: CommandOutcome = self.interpreter.execute(self._snapshot, text)
        except UnknownCommandError as exc:
            self.console.error(str(exc))
            self.console.print(self.interpreter.help())
            self._prompt()
            return
        except CommandError as exc:
            logger.info("Command %r failed: %s", text, exc)
            self.console.error(str(exc))
            self._prompt()
            return

        if outcome.output is not None:
            self.console.print(outcome.output)
        if outcome.written is not None:
            self._own_writes.add(outcome.written.resolve())
        if outcome.quit:
            self._transition(OrchestratorState.STOPPED)
            return
        if outcome.rerun:
            self.analyze()
        elif outcome.relist:
            self.print_listing()
        else:
            self._prompt()

    def print_listing(self) -> None:
        """Print the indexed listing and summary of the current snapshot."""
        for line in render_listing(self._snapshot, self.styler, self.width):
            self.console.print(line)
        self.console.print(
            render_summary(self._snapshot.stats(), self.styler, skipped=self._snapshot.skipped)
        )
        self._prompt()

    def _only_own_writes(self, signal: ChangeSignal) -> bool:
        """Return True if ``signal`` names nothing but files written by fixes.

        Fixes are re-analyzed right away, so the watcher's later report of the
        same write is dropped. Recorded writes are forgotten after one signal.
        """
        own: set[Path] = self._own_writes
        self._own_writes = set()
        return bool(own) and all(path.resolve() in own for path in signal.paths)

    def _prompt(self) -> None:
        self.console.prompt(PROMPT)

    def _transition(self, state: OrchestratorState) -> None:
        logger.debug("State %s -> %s", self._state.value, state.value)
        self._state = state
