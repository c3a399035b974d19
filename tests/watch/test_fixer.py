# topmark:header:start
#
#   project      : Coral
#   file         : test_fixer.py
#   file_relpath : tests/watch/test_fixer.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for splicing suggested replacements into files."""

from __future__ import annotations

import os
import stat
import sys
from typing import TYPE_CHECKING

import pytest

from coral.config.types import FileWriteStrategy
from coral.diagnostic.model import Span
from coral.errors import FixIOError, RangeOutOfBoundsError
from coral.watch.fixer import FixApplier
from tests.conftest import parametrize

if TYPE_CHECKING:
    from pathlib import Path


def _span(file_name: str, start: int, end: int) -> Span:
    return Span(
        file_name=file_name,
        byte_start=start,
        byte_end=end,
        line_start=1,
        line_end=1,
        column_start=start + 1,
        column_end=end + 1,
        is_primary=True,
    )


@parametrize("strategy", list(FileWriteStrategy))
def test_replacement_is_spliced_by_byte_offset(tmp_path: Path, strategy: FileWriteStrategy) -> None:
    target: Path = tmp_path / "f.txt"
    target.write_bytes(b"abcdefgh")

    result = FixApplier(root=tmp_path, strategy=strategy).apply(_span("f.txt", 2, 5), "XYZ")

    assert target.read_bytes() == b"abXYZfgh"
    assert result.path == tmp_path / "f.txt"
    assert result.bytes_written == 8


def test_insertion_and_deletion(tmp_path: Path) -> None:
    target: Path = tmp_path / "f.txt"
    target.write_bytes(b"abc")
    fixer = FixApplier(root=tmp_path)

    fixer.apply(_span("f.txt", 3, 3), "d")
    assert target.read_bytes() == b"abcd"

    fixer.apply(_span("f.txt", 0, 2), "")
    assert target.read_bytes() == b"cd"


def test_offsets_are_bytes_not_characters(tmp_path: Path) -> None:
    target: Path = tmp_path / "f.rs"
    target.write_bytes("let é = 1;".encode())

    # "é" is two bytes long: bytes 4..6
    FixApplier(root=tmp_path).apply(_span("f.rs", 4, 6), "_ü")

    assert target.read_text(encoding="utf-8") == "let _ü = 1;"


def test_fixing_the_unused_variable(cargo_project: Path) -> None:
    FixApplier(root=cargo_project).apply(_span("src/main.rs", 20, 26), "_unused")

    assert (cargo_project / "src" / "main.rs").read_text(encoding="utf-8") == (
        "fn main() {\n    let _unused = 5;\n}\n"
    )


@parametrize("start, end", [(5, 9), (9, 9), (6, 2), (-1, 2)])
def test_out_of_bounds_range_leaves_file_untouched(tmp_path: Path, start: int, end: int) -> None:
    target: Path = tmp_path / "f.txt"
    target.write_bytes(b"abcdefgh")

    with pytest.raises(RangeOutOfBoundsError) as exc_info:
        FixApplier(root=tmp_path).apply(_span("f.txt", start, end), "XYZ")

    assert target.read_bytes() == b"abcdefgh"
    assert exc_info.value.length == 8
    assert (exc_info.value.byte_start, exc_info.value.byte_end) == (start, end)
    assert sorted(p.name for p in tmp_path.iterdir()) == ["f.txt"]


def test_missing_file_raises_fix_io_error(tmp_path: Path) -> None:
    with pytest.raises(FixIOError) as exc_info:
        FixApplier(root=tmp_path).apply(_span("gone.rs", 0, 1), "x")
    assert exc_info.value.path == tmp_path / "gone.rs"


def test_absolute_file_names_ignore_root(tmp_path: Path) -> None:
    target: Path = tmp_path / "abs.txt"
    target.write_bytes(b"0123")

    FixApplier(root=tmp_path / "elsewhere").apply(_span(str(target), 1, 3), "-")

    assert target.read_bytes() == b"0-3"


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permission bits")
def test_atomic_write_keeps_permissions_and_leaves_no_temp_file(tmp_path: Path) -> None:
    target: Path = tmp_path / "script.sh"
    target.write_bytes(b"echo hi\n")
    os.chmod(target, 0o750)

    FixApplier(root=tmp_path, strategy=FileWriteStrategy.ATOMIC).apply(
        _span("script.sh", 5, 7), "there"
    )

    assert target.read_bytes() == b"echo there\n"
    assert stat.S_IMODE(target.stat().st_mode) == 0o750
    assert [p.name for p in tmp_path.iterdir()] == ["script.sh"]
