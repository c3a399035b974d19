# topmark:header:start
#
#   project      : Coral
#   file         : decode.py
#   file_relpath : src/coral/diagnostic/decode.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Decode one line of checker output into a `DiagnosticEvent`.

The ``reason`` key selects exactly one decoder; each decoder reads only the
keys of its own variant and ignores anything else on the record. Shape
errors (missing keys, wrong JSON types, unknown enum strings) surface as
`DecodeError` carrying the offending line.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

from coral.config.logging import get_logger
from coral.diagnostic.model import (
    Artifact,
    BuildFinished,
    BuildScriptExecuted,
    Code,
    Expansion,
    Level,
    Message,
    Profile,
    Span,
    SpanText,
    Target,
)
from coral.errors import DecodeError

if TYPE_CHECKING:
    from collections.abc import Callable

    from coral.config.logging import CoralLogger
    from coral.diagnostic.model import DiagnosticEvent

logger: CoralLogger = get_logger(__name__)

Record = dict[str, Any]


def _str(record: Record, key: str) -> str:
    value: Any = record[key]
    if not isinstance(value, str):
        raise TypeError(f"{key!r} must be a string, got {type(value).__name__}")
    return value


def _opt_str(record: Record, key: str) -> str | None:
    value: Any = record.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise TypeError(f"{key!r} must be a string or null, got {type(value).__name__}")
    return value


def _int(record: Record, key: str) -> int:
    value: Any = record[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{key!r} must be an integer, got {type(value).__name__}")
    return value


def _bool(record: Record, key: str, default: bool | None = None) -> bool:
    value: Any = record.get(key, default)
    if not isinstance(value, bool):
        raise TypeError(f"{key!r} must be a boolean, got {type(value).__name__}")
    return value


def _list(record: Record, key: str) -> list[Any]:
    value: Any = record.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise TypeError(f"{key!r} must be an array, got {type(value).__name__}")
    return value


def _obj(value: Any, what: str) -> Record:
    if not isinstance(value, dict):
        raise TypeError(f"{what} must be an object, got {type(value).__name__}")
    return value


def decode_span(record: Record) -> Span:
    """Decode a ``span`` object (recursively, through its expansion)."""
    expansion: Expansion | None = None
    raw_expansion: Any = record.get("expansion")
    if raw_expansion is not None:
        exp: Record = _obj(raw_expansion, "expansion")
        def_site: Any = exp.get("def_site_span")
        expansion = Expansion(
            span=decode_span(_obj(exp["span"], "expansion.span")),
            macro_decl_name=_str(exp, "macro_decl_name"),
            def_site_span=(
                None if def_site is None else decode_span(_obj(def_site, "def_site_span"))
            ),
        )
    return Span(
        file_name=_str(record, "file_name"),
        byte_start=_int(record, "byte_start"),
        byte_end=_int(record, "byte_end"),
        line_start=_int(record, "line_start"),
        line_end=_int(record, "line_end"),
        column_start=_int(record, "column_start"),
        column_end=_int(record, "column_end"),
        is_primary=_bool(record, "is_primary"),
        text=tuple(
            SpanText(
                text=_str(t, "text"),
                highlight_start=_int(t, "highlight_start"),
                highlight_end=_int(t, "highlight_end"),
            )
            for t in (_obj(item, "span text") for item in _list(record, "text"))
        ),
        label=_opt_str(record, "label"),
        suggested_replacement=_opt_str(record, "suggested_replacement"),
        suggestion_applicability=_opt_str(record, "suggestion_applicability"),
        expansion=expansion,
    )


def decode_message(record: Record) -> Message:
    """Decode a ``message`` object and its children."""
    code: Code | None = None
    raw_code: Any = record.get("code")
    if raw_code is not None:
        code_obj: Record = _obj(raw_code, "code")
        code = Code(code=_str(code_obj, "code"), explanation=_opt_str(code_obj, "explanation"))
    return Message(
        text=_str(record, "message"),
        level=Level.from_wire(_str(record, "level")),
        code=code,
        spans=tuple(decode_span(_obj(s, "span")) for s in _list(record, "spans")),
        children=tuple(decode_message(_obj(c, "child")) for c in _list(record, "children")),
        rendered=_opt_str(record, "rendered"),
    )


def _decode_compiler_message(record: Record) -> Message:
    return decode_message(_obj(record["message"], "message"))


def _decode_compiler_artifact(record: Record) -> Artifact:
    target: Target | None = None
    raw_target: Any = record.get("target")
    if raw_target is not None:
        t: Record = _obj(raw_target, "target")
        target = Target(
            name=_str(t, "name"),
            kind=tuple(str(k) for k in _list(t, "kind")),
            crate_types=tuple(str(c) for c in _list(t, "crate_types")),
            src_path=_opt_str(t, "src_path"),
            edition=_opt_str(t, "edition"),
        )
    profile: Profile | None = None
    raw_profile: Any = record.get("profile")
    if raw_profile is not None:
        p: Record = _obj(raw_profile, "profile")
        debuginfo: Any = p.get("debuginfo")
        profile = Profile(
            opt_level=str(p["opt_level"]),
            debuginfo=debuginfo if isinstance(debuginfo, int) else None,
            debug_assertions=_bool(p, "debug_assertions", False),
            overflow_checks=_bool(p, "overflow_checks", False),
            test=_bool(p, "test", False),
        )
    executable: str | None = _opt_str(record, "executable")
    return Artifact(
        package_id=_str(record, "package_id"),
        target=target,
        profile=profile,
        features=tuple(str(f) for f in _list(record, "features")),
        filenames=tuple(Path(str(f)) for f in _list(record, "filenames")),
        executable=None if executable is None else Path(executable),
        fresh=_bool(record, "fresh", False),
    )


def _decode_build_script_executed(record: Record) -> BuildScriptExecuted:
    fields: Record = {k: v for k, v in record.items() if k not in ("reason", "package_id")}
    return BuildScriptExecuted(package_id=_str(record, "package_id"), fields=fields)


def _decode_build_finished(record: Record) -> BuildFinished:
    return BuildFinished(success=_bool(record, "success"))


_DECODERS: dict[str, Callable[[Record], DiagnosticEvent]] = {
    "compiler-message": _decode_compiler_message,
    "compiler-artifact": _decode_compiler_artifact,
    "build-script-executed": _decode_build_script_executed,
    "build-finished": _decode_build_finished,
}


def decode_record(line: bytes) -> DiagnosticEvent:
    """Decode one complete line of checker output.

    Args:
        line (bytes): The record, without its trailing newline.

    Returns:
        DiagnosticEvent: The decoded event.

    Raises:
        DecodeError: If the line is not valid JSON, is not an object, carries an
            unknown ``reason``, or does not match the shape of its variant.
    """
    try:
        record: Any = json.loads(line)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DecodeError(line, f"invalid JSON: {exc}") from exc
    if not isinstance(record, dict):
        raise DecodeError(line, "record is not a JSON object")

    reason: Any = record.get("reason")
    decoder: Callable[[Record], DiagnosticEvent] | None = (
        _DECODERS.get(reason) if isinstance(reason, str) else None
    )
    if decoder is None:
        raise DecodeError(line, f"unknown reason {reason!r}")

    try:
        event: DiagnosticEvent = decoder(record)
    except (KeyError, TypeError, ValueError) as exc:
        raise DecodeError(line, f"invalid {reason} record: {exc}") from exc
    logger.trace("Decoded %s record", reason)
    return event
