# topmark:header:start
#
#   project      : Coral
#   file         : model.py
#   file_relpath : src/coral/diagnostic/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Typed representation of the records emitted by `cargo --message-format json`.

Every line of checker output decodes into exactly one `DiagnosticEvent`, a
tagged union with one variant per ``reason`` discriminant:

Sections:
    * Level: ordered severity (``NONE < NOTE < HELP < WARNING < ERROR``).
    * Span, SpanText, Expansion: located regions of source text.
    * Code, Message: a reportable finding and its owned tree of children.
    * Target, Profile, Artifact: a completed build unit.
    * BuildScriptExecuted, BuildFinished: passthrough records, never reportable.

Message and span trees are owned: children never point back at their
parent. Walk a message tree with `Message.unroll` and a macro backtrace with
`Span.expansions` rather than recursing at call sites.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering
from typing import TYPE_CHECKING, Any, Union

from coral.config.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping
    from pathlib import Path

    from coral.config.logging import CoralLogger


logger: CoralLogger = get_logger(__name__)


@total_ordering
class Level(Enum):
    """Severity of a checker message.

    Levels are ordered by importance: ``ERROR > WARNING > HELP > NOTE > NONE``.
    ``NONE`` (the empty string on the wire) means "not report-worthy".
    """

    NONE = ""
    NOTE = "note"
    HELP = "help"
    WARNING = "warning"
    ERROR = "error"

    @classmethod
    def from_wire(cls, value: str) -> Level:
        """Return the level for a wire ``level`` string.

        Besides the canonical values, rustc emits ``"failure-note"`` (mapped to
        ``NOTE``) and ``"error: internal compiler error"`` (mapped to ``ERROR``).

        Args:
            value (str): The raw ``level`` string.

        Returns:
            Level: The matching level.

        Raises:
            ValueError: If ``value`` is not a known level string.
        """
        alias: Level | None = _LEVEL_ALIASES.get(value)
        if alias is not None:
            return alias
        return cls(value)

    @property
    def rank(self) -> int:
        """Position of this level in the severity order (``NONE`` is 0)."""
        return _LEVEL_ORDER.index(self)

    @property
    def is_reportable(self) -> bool:
        """Return True unless this is `Level.NONE`."""
        return self is not Level.NONE

    @property
    def style(self) -> str:
        """Name of the yachalk style used to render this level."""
        return _LEVEL_STYLES[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Level):
            return NotImplemented
        return self.rank < other.rank


_LEVEL_ORDER: tuple[Level, ...] = (
    Level.NONE,
    Level.NOTE,
    Level.HELP,
    Level.WARNING,
    Level.ERROR,
)

_LEVEL_ALIASES: dict[str, Level] = {
    "failure-note": Level.NOTE,
    "error: internal compiler error": Level.ERROR,
}

_LEVEL_STYLES: dict[Level, str] = {
    Level.NONE: "reset",
    Level.NOTE: "cyan_bright",
    Level.HELP: "green_bright",
    Level.WARNING: "yellow_bright",
    Level.ERROR: "red_bright",
}


@dataclass(frozen=True)
class SpanText:
    """One line of source text covered by a span, with its highlighted columns."""

    text: str
    highlight_start: int
    highlight_end: int


@dataclass(frozen=True)
class Expansion:
    """Macro expansion that produced a span.

    Attributes:
        span (Span): Where the macro was invoked.
        macro_decl_name (str): Name of the macro, e.g. ``"println!"``.
        def_site_span (Span | None): Where the macro was defined, if known.
    """

    span: Span
    macro_decl_name: str
    def_site_span: Span | None = None


@dataclass(frozen=True)
class Span:
    """A located byte/line/column region of source text.

    Byte offsets are 0-based and ``byte_end`` is exclusive; lines and columns
    are 1-based, as emitted by rustc.
    """

    file_name: str
    byte_start: int
    byte_end: int
    line_start: int
    line_end: int
    column_start: int
    column_end: int
    is_primary: bool
    text: tuple[SpanText, ...] = ()
    label: str | None = None
    suggested_replacement: str | None = None
    suggestion_applicability: str | None = None
    expansion: Expansion | None = None

    @property
    def location(self) -> tuple[int, int]:
        """Return ``(line_start, column_start)``."""
        return (self.line_start, self.column_start)

    def expansions(self) -> Iterator[Expansion]:
        """Iterate over the macro backtrace, innermost expansion first."""
        current: Expansion | None = self.expansion
        while current is not None:
            yield current
            current = current.span.expansion


@dataclass(frozen=True)
class Code:
    """Diagnostic code (e.g. ``E0425`` or ``clippy::needless_return``)."""

    code: str
    explanation: str | None = None


@dataclass(frozen=True)
class Message:
    """A reportable finding decoded from checker output.

    Attributes:
        text (str): The primary message text.
        level (Level): Severity; ``Level.NONE`` never produces output.
        code (Code | None): Diagnostic code, if any.
        spans (tuple[Span, ...]): Source regions, in emission order.
        children (tuple[Message, ...]): Owned sub-messages (notes, help, ...).
        rendered (str | None): The checker's own pre-rendered text, if any.
    """

    text: str
    level: Level
    code: Code | None = None
    spans: tuple[Span, ...] = ()
    children: tuple[Message, ...] = ()
    rendered: str | None = None

    @property
    def is_reportable(self) -> bool:
        """Return True if this message is report-worthy."""
        return self.level.is_reportable

    def primary_span(self) -> Span | None:
        """Return the span to report this message at.

        The first span flagged ``is_primary`` wins; when none is flagged the
        last span is used. Returns None for a message without spans.
        """
        for span in self.spans:
            if span.is_primary:
                return span
        return self.spans[-1] if self.spans else None

    def unroll(self) -> Iterator[tuple[int, Message]]:
        """Walk this message and its children depth-first.

        Each call returns a fresh, lazy iterator, so the walk can be restarted.

        Yields:
            tuple[int, Message]: ``(depth, message)`` pairs, starting with
            ``(0, self)``.
        """
        stack: list[tuple[int, Message]] = [(0, self)]
        while stack:
            depth, message = stack.pop()
            yield depth, message
            stack.extend((depth + 1, child) for child in reversed(message.children))

    def find_replacement(self) -> Span | None:
        """Return the first span in depth-first order carrying a suggested replacement."""
        for _depth, message in self.unroll():
            for span in message.spans:
                if span.suggested_replacement is not None:
                    return span
        return None


@dataclass(frozen=True)
class Target:
    """Build target described by a ``compiler-artifact`` record."""

    name: str
    kind: tuple[str, ...] = ()
    crate_types: tuple[str, ...] = ()
    src_path: str | None = None
    edition: str | None = None


@dataclass(frozen=True)
class Profile:
    """Build profile described by a ``compiler-artifact`` record."""

    opt_level: str
    debuginfo: int | None = None
    debug_assertions: bool = False
    overflow_checks: bool = False
    test: bool = False


@dataclass(frozen=True)
class Artifact:
    """A completed build unit. Carries no reportable message."""

    package_id: str
    target: Target | None = None
    profile: Profile | None = None
    features: tuple[str, ...] = ()
    filenames: tuple[Path, ...] = ()
    executable: Path | None = None
    fresh: bool = False


@dataclass(frozen=True)
class BuildScriptExecuted:
    """Opaque ``build-script-executed`` record, kept verbatim."""

    package_id: str
    fields: Mapping[str, Any] = field(default_factory=lambda: {})


@dataclass(frozen=True)
class BuildFinished:
    """Final ``build-finished`` record emitted by current cargo versions."""

    success: bool


DiagnosticEvent = Union[Artifact, Message, BuildScriptExecuted, BuildFinished]
"""One decoded record of checker output."""
