# topmark:header:start
#
#   project      : Coral
#   file         : test_decode.py
#   file_relpath : tests/diagnostic/test_decode.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for decoding single checker records."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from coral.diagnostic.decode import decode_record
from coral.diagnostic.model import (
    Artifact,
    BuildFinished,
    BuildScriptExecuted,
    Code,
    Level,
    Message,
)
from coral.errors import DecodeError
from tests import records
from tests.conftest import parametrize


def _decode(record: dict[str, object]) -> object:
    return decode_record(json.dumps(record).encode("utf-8"))


def test_compiler_message_decodes_full_tree() -> None:
    event = _decode(records.compiler_message())

    assert isinstance(event, Message)
    assert event.level is Level.WARNING
    assert event.text == "unused variable: `unused`"
    assert event.code == Code(code="unused_variables")
    assert event.rendered == records.UNUSED_RENDERED
    assert len(event.spans) == 1
    span = event.spans[0]
    assert (span.file_name, span.byte_start, span.byte_end) == ("src/main.rs", 20, 26)
    assert span.location == (2, 9)
    assert span.is_primary
    assert span.text[0].text == "    let unused = 5;"

    note, help_ = event.children
    assert note.level is Level.NOTE
    assert note.spans == ()
    assert help_.level is Level.HELP
    assert help_.spans[0].suggested_replacement == "_unused"
    assert help_.spans[0].suggestion_applicability == "MachineApplicable"


def test_compiler_artifact_decodes() -> None:
    event = _decode(records.compiler_artifact(fresh=True))

    assert isinstance(event, Artifact)
    assert event.package_id == records.PACKAGE_ID
    assert event.fresh is True
    assert event.target is not None and event.target.name == "demo"
    assert event.target.kind == ("bin",)
    assert event.profile is not None and event.profile.debuginfo == 2
    assert event.filenames == (
        Path("/work/demo/target/debug/deps/libdemo-0123456789abcdef.rmeta"),
    )
    assert event.executable is None


def test_build_script_executed_keeps_fields() -> None:
    event = _decode(records.build_script_executed())

    assert isinstance(event, BuildScriptExecuted)
    assert event.package_id == records.PACKAGE_ID
    assert event.fields["cfgs"] == ["has_feature"]
    assert "reason" not in event.fields


@parametrize("success", [True, False])
def test_build_finished_decodes(success: bool) -> None:
    assert _decode(records.build_finished(success=success)) == BuildFinished(success=success)


@parametrize(
    "wire, level",
    [
        ("", Level.NONE),
        ("note", Level.NOTE),
        ("help", Level.HELP),
        ("warning", Level.WARNING),
        ("error", Level.ERROR),
        ("failure-note", Level.NOTE),
        ("error: internal compiler error", Level.ERROR),
    ],
)
def test_level_strings(wire: str, level: Level) -> None:
    event = _decode(records.compiler_message(records.message(level=wire)))
    assert isinstance(event, Message)
    assert event.level is level


def test_missing_spans_and_children_decode_as_empty() -> None:
    msg = {"message": "aborting due to 1 previous error", "level": "error"}
    event = _decode(records.compiler_message(msg))

    assert isinstance(event, Message)
    assert event.spans == ()
    assert event.children == ()
    assert event.code is None
    assert event.rendered is None


def test_unknown_keys_are_ignored() -> None:
    record = records.compiler_message()
    record["something_new"] = {"nested": [1, 2, 3]}
    record["message"]["spans"][0]["future_field"] = True

    assert isinstance(_decode(record), Message)


def test_expansion_chain_decodes() -> None:
    inner = records.span(file_name="src/lib.rs", line=10)
    outer = records.span(
        expansion={
            "span": records.span(
                line=5,
                expansion={"span": inner, "macro_decl_name": "format_args!", "def_site_span": None},
            ),
            "macro_decl_name": "println!",
            "def_site_span": records.span(file_name="<std macros>", line=1),
        }
    )
    event = _decode(records.compiler_message(records.message(spans=[outer])))

    assert isinstance(event, Message)
    chain = list(event.spans[0].expansions())
    assert [e.macro_decl_name for e in chain] == ["println!", "format_args!"]
    assert chain[0].def_site_span is not None
    assert chain[0].def_site_span.file_name == "<std macros>"
    assert chain[1].span.file_name == "src/lib.rs"


@parametrize(
    "line",
    [
        b"not json at all",
        b'{"reason": "compiler-message", ',
        b"[1, 2, 3]",
        b'"just a string"',
        b'{"no_reason": true}',
        b'{"reason": "compiler-telepathy"}',
        b'{"reason": 42}',
        b"\xff\xfe garbage",
    ],
)
def test_malformed_lines_raise_decode_error(line: bytes) -> None:
    with pytest.raises(DecodeError) as exc_info:
        decode_record(line)
    assert exc_info.value.line == line


def test_shape_errors_raise_decode_error() -> None:
    bad_span = records.span()
    bad_span["byte_start"] = "twenty"
    record = records.compiler_message(records.message(spans=[bad_span]))

    with pytest.raises(DecodeError, match="invalid compiler-message record"):
        _decode(record)


def test_missing_required_key_raises_decode_error() -> None:
    record = records.compiler_artifact()
    del record["package_id"]

    with pytest.raises(DecodeError):
        _decode(record)


def test_unknown_level_raises_decode_error() -> None:
    with pytest.raises(DecodeError):
        _decode(records.compiler_message(records.message(level="catastrophe")))
