# topmark:header:start
#
#   project      : Coral
#   file         : process.py
#   file_relpath : src/coral/analyzer/process.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Spawn the checker subprocess.

The child runs with stdin closed and stdout piped. Stderr is either
discarded or spooled to an anonymous temporary file: spooling instead of
piping means a chatty checker can never block on a full stderr pipe while
Coral is busy reading stdout.
"""

from __future__ import annotations

import subprocess
import tempfile
from typing import IO, TYPE_CHECKING, Protocol

from coral.config.logging import get_logger
from coral.config.types import StderrMode
from coral.errors import ProcessSpawnError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from coral.config.logging import CoralLogger

logger: CoralLogger = get_logger(__name__)


class ReadableStream(Protocol):
    """Binary stream supporting partial reads (``io.BufferedReader``, ``io.BytesIO``)."""

    def read1(self, size: int = -1, /) -> bytes:
        """Read up to ``size`` bytes with at most one underlying read."""
        ...


class ProcessLike(Protocol):
    """What the stream decoder needs from a running checker."""

    @property
    def stdout(self) -> ReadableStream:
        """The child's standard output."""
        ...

    def wait(self) -> int:
        """Wait for the child to exit and return its exit status."""
        ...

    def kill(self) -> None:
        """Terminate the child immediately."""
        ...

    @property
    def stderr_text(self) -> str | None:
        """Captured standard error, available once the child was waited on."""
        ...


class CheckerProcess:
    """A running checker subprocess; owns the child handle exclusively.

    Args:
        popen (subprocess.Popen[bytes]): The spawned child.
        stderr_file (IO[bytes] | None): Spool file receiving the child's stderr.
    """

    def __init__(self, popen: subprocess.Popen[bytes], stderr_file: IO[bytes] | None) -> None:
        self._popen: subprocess.Popen[bytes] = popen
        self._stderr_file: IO[bytes] | None = stderr_file
        self._stderr_text: str | None = None

    @property
    def pid(self) -> int:
        """Process id of the child."""
        return self._popen.pid

    @property
    def stdout(self) -> ReadableStream:
        """The child's standard output."""
        assert self._popen.stdout is not None  # always piped
        return self._popen.stdout

    @property
    def returncode(self) -> int | None:
        """Exit status once the child has been reaped, else None."""
        return self._popen.returncode

    def wait(self) -> int:
        """Reap the child, collect spooled stderr, and return the exit status."""
        status: int = self._popen.wait()
        if self._popen.stdout is not None:
            self._popen.stdout.close()
        if self._stderr_file is not None and self._stderr_text is None:
            self._stderr_file.seek(0)
            self._stderr_text = self._stderr_file.read().decode("utf-8", errors="replace")
            self._stderr_file.close()
        logger.debug("Checker process %d exited with status %d", self._popen.pid, status)
        return status

    def kill(self) -> None:
        """Terminate the child immediately (it still has to be reaped with `wait`)."""
        if self._popen.poll() is None:
            logger.debug("Killing checker process %d", self._popen.pid)
            self._popen.kill()

    @property
    def stderr_text(self) -> str | None:
        """Captured stderr, available after `wait`; None when discarded."""
        return self._stderr_text


class ProcessRunner:
    """Starts checker subprocesses.

    Args:
        cwd (Path | None): Working directory for the child.
        stderr_mode (StderrMode): Capture (spool) or discard the child's stderr.
    """

    def __init__(
        self,
        *,
        cwd: Path | None = None,
        stderr_mode: StderrMode = StderrMode.CAPTURE,
    ) -> None:
        self.cwd: Path | None = cwd
        self.stderr_mode: StderrMode = stderr_mode

    def spawn(self, argv: Sequence[str]) -> CheckerProcess:
        """Start ``argv`` with stdin closed and stdout piped.

        Args:
            argv (Sequence[str]): Executable followed by its arguments.

        Returns:
            CheckerProcess: Handle to the running child.

        Raises:
            ProcessSpawnError: If the executable cannot be launched.
        """
        stderr_file: IO[bytes] | None = None
        if self.stderr_mode is StderrMode.CAPTURE:
            stderr_file = tempfile.TemporaryFile(prefix="coral-stderr-")
        try:
            popen: subprocess.Popen[bytes] = subprocess.Popen(
                list(argv),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=stderr_file if stderr_file is not None else subprocess.DEVNULL,
                cwd=self.cwd,
            )
        except OSError as exc:
            if stderr_file is not None:
                stderr_file.close()
            raise ProcessSpawnError(argv, exc.strerror or str(exc)) from exc
        logger.debug("Spawned checker process %d: %s", popen.pid, " ".join(argv))
        return CheckerProcess(popen, stderr_file)
