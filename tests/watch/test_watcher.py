# topmark:header:start
#
#   project      : Coral
#   file         : test_watcher.py
#   file_relpath : tests/watch/test_watcher.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for the filesystem-watch context."""

from __future__ import annotations

import queue
import time
from pathlib import Path
from typing import Any

import pytest
from watchfiles import Change

from coral.constants import FIX_TEMP_SUFFIX
from coral.errors import WatchRegistrationError
from coral.watch.watcher import ChangeFilter, ChangeSignal, FileWatcher, check_watch_paths


class FakeWatch:
    """Stands in for `watchfiles.watch`, yielding canned batches."""

    def __init__(self, *batches: set[tuple[Change, str]]) -> None:
        self.batches = batches
        self.paths: tuple[Path, ...] = ()
        self.options: dict[str, Any] = {}

    def __call__(self, *paths: Path, **options: Any) -> Any:
        self.paths = paths
        self.options = options
        yield from self.batches


def test_one_signal_per_batch(tmp_path: Path) -> None:
    src: Path = tmp_path / "src"
    src.mkdir()
    burst = {
        (Change.modified, str(src / "main.rs")),
        (Change.added, str(src / "lib.rs")),
        (Change.modified, str(src / "lib.rs")),
    }
    fake = FakeWatch(burst, set(), {(Change.deleted, str(src / "old.rs"))})
    channel: queue.Queue[ChangeSignal] = queue.Queue()

    FileWatcher([src], channel, root=tmp_path, debounce_ms=2000, watch_fn=fake).run()

    first = channel.get_nowait()
    assert first.paths == frozenset({src / "main.rs", src / "lib.rs"})
    second = channel.get_nowait()
    assert second.paths == frozenset({src / "old.rs"})
    assert channel.empty()


def test_watch_options_are_forwarded(tmp_path: Path) -> None:
    fake = FakeWatch()
    watcher = FileWatcher(
        [tmp_path], queue.Queue(), root=tmp_path, debounce_ms=350, watch_fn=fake
    )

    watcher.run()

    assert fake.paths == (tmp_path,)
    assert fake.options["debounce"] == 350
    assert fake.options["step"] == 350
    assert fake.options["watch_filter"] is watcher.watch_filter
    assert fake.options["raise_interrupt"] is False


def test_start_runs_on_a_daemon_thread(tmp_path: Path) -> None:
    channel: queue.Queue[ChangeSignal] = queue.Queue()
    fake = FakeWatch({(Change.modified, str(tmp_path / "Cargo.toml"))})
    watcher = FileWatcher([tmp_path], channel, root=tmp_path, debounce_ms=10, watch_fn=fake)

    watcher.start()

    signal = channel.get(timeout=5)
    assert signal.paths == frozenset({tmp_path / "Cargo.toml"})
    watcher.stop()


def test_writes_within_one_window_trigger_one_signal(tmp_path: Path) -> None:
    src: Path = tmp_path / "src"
    src.mkdir()
    main_rs: Path = src / "main.rs"
    main_rs.write_text("fn main() {}\n", encoding="utf-8")
    channel: queue.Queue[ChangeSignal] = queue.Queue()
    watcher = FileWatcher([src], channel, root=tmp_path, debounce_ms=1000)
    watcher.start()
    time.sleep(0.5)

    for n in range(4):
        main_rs.write_text(f"fn main() {{ let _x = {n}; }}\n", encoding="utf-8")
        time.sleep(0.15)

    signal = channel.get(timeout=10)
    time.sleep(2.5)
    watcher.stop()

    assert {p.resolve() for p in signal.paths} == {main_rs.resolve()}
    assert channel.empty()


def test_start_rejects_missing_path(tmp_path: Path) -> None:
    fake = FakeWatch()
    watcher = FileWatcher(
        [tmp_path / "missing"], queue.Queue(), root=tmp_path, debounce_ms=10, watch_fn=fake
    )

    with pytest.raises(WatchRegistrationError) as exc_info:
        watcher.start()

    assert exc_info.value.path == tmp_path / "missing"
    assert fake.paths == ()


def test_check_watch_paths_rejects_empty_list() -> None:
    with pytest.raises(WatchRegistrationError, match="no paths to watch"):
        check_watch_paths([])


def test_change_filter_honors_ignore_patterns(tmp_path: Path) -> None:
    watch_filter = ChangeFilter(tmp_path, ["target/", "coral.json"])

    assert watch_filter(Change.modified, str(tmp_path / "src" / "main.rs"))
    assert not watch_filter(Change.modified, str(tmp_path / "target" / "debug" / "demo"))
    assert not watch_filter(Change.modified, str(tmp_path / "coral.json"))
    assert not watch_filter(Change.modified, str(tmp_path / "crates" / "a" / "coral.json"))


def test_change_filter_keeps_default_exclusions(tmp_path: Path) -> None:
    watch_filter = ChangeFilter(tmp_path, [])

    assert not watch_filter(Change.modified, str(tmp_path / ".git" / "index"))
    assert watch_filter(Change.added, str(tmp_path / "build.rs"))


def test_change_filter_accepts_paths_outside_root(tmp_path: Path) -> None:
    watch_filter = ChangeFilter(tmp_path / "project", ["*.rs"])
    assert watch_filter(Change.modified, str(tmp_path / "shared" / "lib.rs"))


def test_change_filter_drops_fix_temp_files(tmp_path: Path) -> None:
    watch_filter = ChangeFilter(tmp_path, [])
    tmp_file = tmp_path / "src" / f".main.rs.k2j4{FIX_TEMP_SUFFIX}"

    assert not watch_filter(Change.added, str(tmp_file))
    assert not watch_filter(Change.deleted, str(tmp_file))
