# topmark:header:start
#
#   project      : Coral
#   file         : fixer.py
#   file_relpath : src/coral/watch/fixer.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Apply a suggested replacement to a source file.

The splice works on bytes, because span offsets are byte offsets::

    new = content[:byte_start] + replacement + content[byte_end:]

The range is validated before anything is written; an out-of-bounds range
leaves the file untouched. Writing goes through a sink chosen by
`FileWriteStrategy`: the atomic sink writes a temporary file next to the
target and renames it over the original, the in-place sink overwrites the
file directly.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from coral.config.logging import get_logger
from coral.config.types import FileWriteStrategy
from coral.constants import FIX_TEMP_SUFFIX
from coral.errors import FixIOError, RangeOutOfBoundsError

if TYPE_CHECKING:
    from coral.config.logging import CoralLogger
    from coral.diagnostic.model import Span

logger: CoralLogger = get_logger(__name__)


class WriteSink(Protocol):
    """Writes the full new contents of a file."""

    def write(self, path: Path, data: bytes) -> None:
        """Replace the contents of ``path`` with ``data``."""
        ...


class InPlaceSink:
    """Overwrites the target file directly."""

    def write(self, path: Path, data: bytes) -> None:
        """Replace the contents of ``path`` with ``data``.

        Raises:
            OSError: If the file cannot be written.
        """
        with open(path, "wb") as f:
            f.write(data)


class AtomicSink:
    """Writes a sibling temporary file and renames it over the target.

    Readers (including the checker) never observe a half-written file, and
    the target keeps its permission bits.
    """

    def write(self, path: Path, data: bytes) -> None:
        """Replace the contents of ``path`` with ``data``.

        Raises:
            OSError: If the temporary file cannot be written or renamed.
        """
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=FIX_TEMP_SUFFIX, dir=path.parent
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            shutil.copymode(path, tmp_name)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


@dataclass(frozen=True)
class FixResult:
    """Outcome of a successful fix application."""

    path: Path
    bytes_written: int


class FixApplier:
    """Splices suggested replacements into files.

    Args:
        root (Path | None): Directory that relative span file names are
            resolved against (the Cargo workspace root).
        strategy (FileWriteStrategy): How to write the new contents.
    """

    def __init__(
        self,
        *,
        root: Path | None = None,
        strategy: FileWriteStrategy = FileWriteStrategy.ATOMIC,
    ) -> None:
        self.root: Path | None = root
        self.strategy: FileWriteStrategy = strategy
        self._sink: WriteSink = (
            AtomicSink() if strategy is FileWriteStrategy.ATOMIC else InPlaceSink()
        )

    def resolve(self, span: Span) -> Path:
        """Return the file a span refers to."""
        path = Path(span.file_name)
        if not path.is_absolute() and self.root is not None:
            path = self.root / path
        return path

    def apply(self, span: Span, replacement: str) -> FixResult:
        """Replace ``span``'s byte range in its file with ``replacement``.

        Args:
            span (Span): Span whose ``byte_start``/``byte_end`` select the bytes to replace.
            replacement (str): Replacement text, encoded as UTF-8.

        Returns:
            FixResult: The written file and its new size.

        Raises:
            RangeOutOfBoundsError: If ``byte_start > byte_end`` or the range
                exceeds the file; the file is left untouched.
            FixIOError: If the file cannot be read or written.
        """
        path: Path = self.resolve(span)
        try:
            content: bytes = path.read_bytes()
        except OSError as exc:
            raise FixIOError(path, exc.strerror or str(exc)) from exc

        start, end = span.byte_start, span.byte_end
        if start < 0 or start > end or end > len(content):
            raise RangeOutOfBoundsError(path, start, end, len(content))

        data: bytes = content[:start] + replacement.encode("utf-8") + content[end:]
        try:
            self._sink.write(path, data)
        except OSError as exc:
            raise FixIOError(path, exc.strerror or str(exc)) from exc
        logger.info("Applied fix to %s: bytes %d..%d replaced", path, start, end)
        return FixResult(path=path, bytes_written=len(data))
