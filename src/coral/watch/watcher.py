# topmark:header:start
#
#   project      : Coral
#   file         : watcher.py
#   file_relpath : src/coral/watch/watcher.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Filesystem-watch context.

A background thread observes OS change notifications through `watchfiles`.
Both its ``debounce`` (longest grouping time) and its ``step`` (quiet time
that ends a batch) are set to the debounce window, so writes spread across
one window land in a single batch rather than one batch per short pause.
Each batch that still contains a relevant change after filtering becomes
exactly one `ChangeSignal` on the outgoing channel. The orchestrator never
de-duplicates signals itself.

Changes to paths matching the configured gitignore-style ``ignore`` patterns
(by default the build directory, VCS metadata and the debug file) are
dropped, so Coral's own writes there never trigger a run.
"""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pathspec import PathSpec
from pathspec.patterns.gitwildmatch import GitWildMatchPattern
from watchfiles import Change, DefaultFilter, watch

from coral.config.logging import get_logger
from coral.constants import FIX_TEMP_SUFFIX
from coral.errors import WatchRegistrationError

if TYPE_CHECKING:
    import queue
    from collections.abc import Callable, Iterable, Iterator, Sequence

    from coral.config.logging import CoralLogger

    WatchFn = Callable[..., Iterator[set[tuple[Change, str]]]]

logger: CoralLogger = get_logger(__name__)


@dataclass(frozen=True)
class ChangeSignal:
    """One coalesced "content changed" notification."""

    paths: frozenset[Path]


class ChangeFilter:
    """``watch_filter`` for `watchfiles` that also honors ignore patterns.

    Temporary files of atomic fix writes are always dropped.

    Args:
        root (Path): Directory the patterns are relative to.
        ignore_patterns (Iterable[str]): Gitignore-style patterns.
    """

    def __init__(self, root: Path, ignore_patterns: Iterable[str]) -> None:
        self.root: Path = root
        self._default: DefaultFilter = DefaultFilter()
        self._spec: PathSpec = PathSpec.from_lines(GitWildMatchPattern, list(ignore_patterns))

    def __call__(self, change: Change, path: str) -> bool:
        if not self._default(change, path) or path.endswith(FIX_TEMP_SUFFIX):
            return False
        try:
            rel: str = Path(path).resolve().relative_to(self.root.resolve()).as_posix()
        except ValueError:
            return True
        return not self._spec.match_file(rel)


def check_watch_paths(paths: Sequence[Path]) -> None:
    """Verify every path exists and is readable.

    Raises:
        WatchRegistrationError: For the first missing or unreadable path.
    """
    if not paths:
        raise WatchRegistrationError(Path("."), "no paths to watch")
    for path in paths:
        if not path.exists():
            raise WatchRegistrationError(path, "no such file or directory")
        if not os.access(path, os.R_OK):
            raise WatchRegistrationError(path, "permission denied")


class FileWatcher:
    """Forwards debounced filesystem changes to a channel from a daemon thread.

    Args:
        paths (Sequence[Path]): Files and directories to watch (recursively).
        channel (queue.Queue[ChangeSignal]): Single-consumer output channel.
        root (Path): Project root, base of ``ignore_patterns``.
        debounce_ms (int): Window used to coalesce bursts of events.
        ignore_patterns (Iterable[str]): Gitignore-style patterns of changes to drop.
        watch_fn (WatchFn): The change-batch generator (``watchfiles.watch``).
    """

    def __init__(
        self,
        paths: Sequence[Path],
        channel: queue.Queue[ChangeSignal],
        *,
        root: Path,
        debounce_ms: int,
        ignore_patterns: Iterable[str] = (),
        watch_fn: WatchFn = watch,
    ) -> None:
        self.paths: tuple[Path, ...] = tuple(paths)
        self.channel: queue.Queue[ChangeSignal] = channel
        self.debounce_ms: int = debounce_ms
        self.watch_filter: ChangeFilter = ChangeFilter(root, ignore_patterns)
        self._watch_fn: WatchFn = watch_fn
        self._stop_event: threading.Event = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        """Validate the paths and start the watch thread.

        Raises:
            WatchRegistrationError: If a path is missing or unreadable.
        """
        check_watch_paths(self.paths)
        self._thread = threading.Thread(target=self.run, name="coral-watch", daemon=True)
        self._thread.start()
        logger.debug("Watching %s", ", ".join(str(p) for p in self.paths))

    def run(self) -> None:
        """Forward one `ChangeSignal` per debounced batch until stopped."""
        options: dict[str, Any] = {
            "watch_filter": self.watch_filter,
            "debounce": self.debounce_ms,
            "step": self.debounce_ms,
            "stop_event": self._stop_event,
            "raise_interrupt": False,
        }
        for changes in self._watch_fn(*self.paths, **options):
            if not changes:
                continue
            signal = ChangeSignal(paths=frozenset(Path(path) for _change, path in changes))
            logger.debug("%d change(s) coalesced into one signal", len(changes))
            self.channel.put(signal)
        logger.debug("Watch thread finished")

    def stop(self) -> None:
        """Ask the watch thread to finish after its current wait."""
        self._stop_event.set()
