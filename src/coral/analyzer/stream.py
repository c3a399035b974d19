# topmark:header:start
#
#   project      : Coral
#   file         : stream.py
#   file_relpath : src/coral/analyzer/stream.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Incremental decoder for the checker's newline-delimited JSON stream.

`Analyzer` is a pull-based producer: each call to `Analyzer.next` reads
from the child's stdout only as far as needed to complete one record.

Buffering:
    Bytes are accumulated in an internal buffer with partial reads of
    arbitrary size, so a record may arrive split across any number of reads
    and several records may arrive in one read. A zero-length read is end of
    stream.

End of stream:
    Trailing bytes without a newline terminator are discarded; a partial
    record is never decoded. On first observing end of stream the child is
    reaped; its exit status is recorded but not otherwise interpreted.

Malformed records:
    With `MalformedRecordPolicy.FAIL` (the default) a complete line that does
    not decode raises `DecodeError` after the child has been killed and
    reaped. With `MalformedRecordPolicy.SKIP` the line is logged at WARNING,
    counted in `Analyzer.skipped`, and decoding continues. Callers must check
    `skipped` if they need to know the two behaved differently.
"""

from __future__ import annotations

from typing import IO, TYPE_CHECKING

from coral.analyzer.process import ProcessRunner
from coral.config.logging import get_logger
from coral.config.types import MalformedRecordPolicy
from coral.diagnostic.decode import decode_record
from coral.errors import DecodeError

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence
    from pathlib import Path
    from types import TracebackType

    from coral.analyzer.process import ProcessLike
    from coral.config.logging import CoralLogger
    from coral.config.model import Config
    from coral.diagnostic.model import DiagnosticEvent

logger: CoralLogger = get_logger(__name__)

READ_CHUNK_SIZE: int = 4096


class Analyzer:
    """Decodes the output of one checker run into `DiagnosticEvent` values.

    Args:
        process (ProcessLike): The running checker; the analyzer reaps it.
        debug_file (Path | None): When set, every raw record is appended to this file.
        on_malformed (MalformedRecordPolicy): Fail on, or skip, malformed records.
        chunk_size (int): Maximum number of bytes requested per read.
    """

    def __init__(
        self,
        process: ProcessLike,
        *,
        debug_file: Path | None = None,
        on_malformed: MalformedRecordPolicy = MalformedRecordPolicy.FAIL,
        chunk_size: int = READ_CHUNK_SIZE,
    ) -> None:
        self.process: ProcessLike = process
        self.debug_file: Path | None = debug_file
        self.on_malformed: MalformedRecordPolicy = on_malformed
        self.chunk_size: int = chunk_size
        self.skipped: int = 0
        self.returncode: int | None = None
        self._buffer: bytearray = bytearray()
        self._scanned: int = 0
        self._eof: bool = False
        self._finished: bool = False
        self._debug_sink: IO[bytes] | None = None

    @classmethod
    def start(
        cls,
        command: str,
        args: Sequence[str],
        *,
        runner: ProcessRunner | None = None,
        debug_file: Path | None = None,
        on_malformed: MalformedRecordPolicy = MalformedRecordPolicy.FAIL,
    ) -> Analyzer:
        """Spawn ``command args...`` and return an analyzer over its output.

        Raises:
            ProcessSpawnError: If the executable cannot be launched.
        """
        runner = runner or ProcessRunner()
        process: ProcessLike = runner.spawn([command, *args])
        return cls(process, debug_file=debug_file, on_malformed=on_malformed)

    @classmethod
    def from_config(cls, config: Config) -> Analyzer:
        """Spawn the checker described by ``config`` in its project root.

        Raises:
            ProcessSpawnError: If the checker executable cannot be launched.
        """
        return cls.start(
            config.checker_binary,
            config.checker_args(),
            runner=ProcessRunner(cwd=config.root, stderr_mode=config.stderr_mode),
            debug_file=config.debug_file if config.debug else None,
            on_malformed=config.on_malformed,
        )

    @property
    def finished(self) -> bool:
        """True once end of stream was reached and the child was reaped."""
        return self._finished

    def next(self) -> DiagnosticEvent | None:
        """Return the next decoded event, or None at end of stream.

        Blocks while waiting for the child to produce output.

        Raises:
            DecodeError: If a complete line is malformed and the policy is ``FAIL``.
        """
        while not self._finished:
            line: bytes | None = self._take_line()
            if line is None:
                if self._eof:
                    self._finish()
                    break
                self._fill()
                continue
            if not line.strip():
                continue
            self._write_debug(line)
            try:
                return decode_record(line)
            except DecodeError as exc:
                if self.on_malformed is MalformedRecordPolicy.SKIP:
                    self.skipped += 1
                    logger.warning("Skipping malformed checker record: %s", exc)
                    continue
                self._abort()
                raise
        return None

    def __iter__(self) -> Iterator[DiagnosticEvent]:
        return self

    def __next__(self) -> DiagnosticEvent:
        event: DiagnosticEvent | None = self.next()
        if event is None:
            raise StopIteration
        return event

    def close(self) -> None:
        """Stop reading; kill the child if it is still running and reap it."""
        if not self._finished:
            self._abort()

    def __enter__(self) -> Analyzer:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _take_line(self) -> bytes | None:
        newline: int = self._buffer.find(b"\n", self._scanned)
        if newline < 0:
            self._scanned = len(self._buffer)
            return None
        line: bytes = bytes(self._buffer[:newline])
        del self._buffer[: newline + 1]
        self._scanned = 0
        return line

    def _fill(self) -> None:
        try:
            chunk: bytes = self.process.stdout.read1(self.chunk_size)
        except (OSError, ValueError) as exc:
            logger.warning("Reading checker output failed, treating as end of stream: %s", exc)
            chunk = b""
        if chunk:
            self._buffer.extend(chunk)
        else:
            self._eof = True

    def _finish(self) -> None:
        if self._buffer:
            logger.debug("Discarding %d trailing bytes without newline", len(self._buffer))
            self._buffer.clear()
        self._close_debug_sink()
        self.returncode = self.process.wait()
        if self.process.stderr_text:
            logger.debug("Checker stderr:\n%s", self.process.stderr_text.rstrip())
        self._finished = True

    def _abort(self) -> None:
        self.process.kill()
        self._buffer.clear()
        self._eof = True
        self._finish()

    def _write_debug(self, line: bytes) -> None:
        if self.debug_file is None:
            return
        if self._debug_sink is None:
            self._debug_sink = self.debug_file.open("ab")
        self._debug_sink.write(line + b"\n")
        logger.debug("Raw record: %s", line.decode("utf-8", errors="replace"))

    def _close_debug_sink(self) -> None:
        if self._debug_sink is not None:
            self._debug_sink.close()
            self._debug_sink = None
