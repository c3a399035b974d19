# topmark:header:start
#
#   project      : Coral
#   file         : snapshot.py
#   file_relpath : src/coral/diagnostic/snapshot.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""The indexed diagnostics snapshot produced by one completed analysis run.

A `DiagnosticList` holds the report-worthy messages of a single run and
assigns them stable 0-based indices. It is immutable: the next run builds a
new list (with a higher ``generation``) and the old one is discarded, which
invalidates every index handed out against it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from coral.diagnostic.model import Level, Message
from coral.errors import InvalidIndexError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from coral.diagnostic.model import DiagnosticEvent


@dataclass(frozen=True)
class LevelStats:
    """Aggregated counts of snapshot messages by severity level."""

    n_error: int = 0
    n_warning: int = 0
    n_help: int = 0
    n_note: int = 0

    @property
    def total(self) -> int:
        """Return the total count of messages."""
        return self.n_error + self.n_warning + self.n_help + self.n_note


def compute_level_stats(messages: Iterable[Message]) -> LevelStats:
    """Return per-level counts for a sequence of top-level messages."""
    levels: list[Level] = [m.level for m in messages]
    return LevelStats(
        n_error=levels.count(Level.ERROR),
        n_warning=levels.count(Level.WARNING),
        n_help=levels.count(Level.HELP),
        n_note=levels.count(Level.NOTE),
    )


@dataclass(frozen=True)
class DiagnosticList:
    """Report-worthy messages of one run, addressed by 0-based index.

    Attributes:
        messages (tuple[Message, ...]): The messages in emission order.
        generation (int): Run counter; a new run always yields a higher value.
        skipped (int): Malformed records skipped by a tolerant decoder.
    """

    messages: tuple[Message, ...] = ()
    generation: int = 0
    skipped: int = 0

    @classmethod
    def from_events(
        cls,
        events: Iterable[DiagnosticEvent],
        *,
        generation: int = 0,
        skipped: int = 0,
    ) -> DiagnosticList:
        """Build a snapshot from decoded events, keeping only report-worthy messages.

        Args:
            events (Iterable[DiagnosticEvent]): Events of one complete run.
            generation (int): Run counter of the producing run.
            skipped (int): Number of malformed records the decoder skipped.

        Returns:
            DiagnosticList: The new snapshot.
        """
        messages: tuple[Message, ...] = tuple(
            e for e in events if isinstance(e, Message) and e.is_reportable
        )
        return cls(messages=messages, generation=generation, skipped=skipped)

    def get(self, index: int) -> Message:
        """Return the message at ``index``.

        Raises:
            InvalidIndexError: If ``index`` is outside ``[0, len)``.
        """
        if not 0 <= index < len(self.messages):
            raise InvalidIndexError(index, len(self.messages))
        return self.messages[index]

    def stats(self) -> LevelStats:
        """Return per-level counts for this snapshot."""
        return compute_level_stats(self.messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self.messages)

    def __len__(self) -> int:
        return len(self.messages)
