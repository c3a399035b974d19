# topmark:header:start
#
#   project      : Coral
#   file         : model.py
#   file_relpath : src/coral/config/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Configuration model and merge policy.

`Config` is an immutable runtime snapshot. It is built from code defaults,
then the project's config file (``coral.toml`` or ``[tool.coral]`` in
``pyproject.toml``), then CLI overrides, in that order of increasing
precedence.

Path semantics:
    - Relative paths in a config file (``debug_file``, ``watch_paths``) are
      resolved against the project root.
    - ``ignore`` patterns are gitignore-style and matched relative to the root.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import TYPE_CHECKING, Any

from coral.config.loaders import find_config_file, load_config_table
from coral.config.logging import get_logger
from coral.config.types import Checker, FileWriteStrategy, MalformedRecordPolicy, StderrMode
from coral.constants import (
    DEFAULT_CHECKER_BINARY,
    DEFAULT_DEBOUNCE_MS,
    DEFAULT_DEBUG_FILE,
    DEFAULT_POLL_INTERVAL,
    MESSAGE_FORMAT_ARGS,
)
from coral.errors import ConfigError
from coral.rendering.color import ColorMode

if TYPE_CHECKING:
    from coral.config.loaders import TomlTable
    from coral.config.logging import CoralLogger
    from coral.config.types import ConfigEnum

logger: CoralLogger = get_logger(__name__)

DEFAULT_IGNORE_PATTERNS: tuple[str, ...] = ("target/", ".git/", DEFAULT_DEBUG_FILE)


@dataclass(frozen=True)
class Config:
    """Immutable runtime configuration for Coral.

    Attributes:
        root (Path): Project root; the checker runs with this working directory.
        checker (Checker): Cargo subcommand (``check`` or ``clippy``).
        checker_binary (str): Executable used to run the checker.
        extra_args (tuple[str, ...]): Arguments appended after ``--message-format json``.
        color_mode (ColorMode): Color intent for human-facing output.
        debug (bool): Append every raw record to ``debug_file``.
        debug_file (Path): Side file for raw records in debug mode.
        debounce_ms (int): Window used to coalesce bursts of file changes.
        poll_interval (float): Seconds the watch loop sleeps between channel polls.
        stderr_mode (StderrMode): Capture or discard the checker's stderr.
        on_malformed (MalformedRecordPolicy): Fail on, or skip, malformed records.
        write_strategy (FileWriteStrategy): How fixes are written to disk.
        watch_paths (tuple[Path, ...]): Extra paths to watch besides the discovered ones.
        ignore_patterns (tuple[str, ...]): Changes matching these never trigger a run.
        config_files (tuple[Path, ...]): Config sources that contributed to this snapshot.
    """

    root: Path
    checker: Checker = Checker.CHECK
    checker_binary: str = DEFAULT_CHECKER_BINARY
    extra_args: tuple[str, ...] = ()
    color_mode: ColorMode = ColorMode.AUTO
    debug: bool = False
    debug_file: Path = Path(DEFAULT_DEBUG_FILE)
    debounce_ms: int = DEFAULT_DEBOUNCE_MS
    poll_interval: float = DEFAULT_POLL_INTERVAL
    stderr_mode: StderrMode = StderrMode.CAPTURE
    on_malformed: MalformedRecordPolicy = MalformedRecordPolicy.FAIL
    write_strategy: FileWriteStrategy = FileWriteStrategy.ATOMIC
    watch_paths: tuple[Path, ...] = ()
    ignore_patterns: tuple[str, ...] = DEFAULT_IGNORE_PATTERNS
    config_files: tuple[Path, ...] = ()

    @classmethod
    def from_defaults(cls, root: Path) -> Config:
        """Return a config holding only code defaults for ``root``."""
        return cls.from_mapping({}, root)

    @classmethod
    def from_mapping(cls, data: TomlTable, root: Path, *, source: Path | None = None) -> Config:
        """Build a config from a TOML table layered over the defaults.

        Args:
            data (TomlTable): Settings, e.g. the ``[tool.coral]`` table.
            root (Path): Project root.
            source (Path | None): The file the settings came from, for messages.

        Returns:
            Config: The validated configuration.

        Raises:
            ConfigError: On unknown keys or values of the wrong type.
        """
        where: str = str(source) if source is not None else "configuration"
        root = root.resolve()
        known: set[str] = {
            "checker",
            "checker_binary",
            "extra_args",
            "color",
            "debug",
            "debug_file",
            "debounce_ms",
            "poll_interval",
            "stderr",
            "on_malformed",
            "write_strategy",
            "watch_paths",
            "ignore",
        }
        unknown: set[str] = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown key(s) in {where}: {', '.join(sorted(unknown))}")

        overrides: dict[str, Any] = {}
        if "checker" in data:
            overrides["checker"] = _enum(Checker, data["checker"], "checker", where)
        if "checker_binary" in data:
            overrides["checker_binary"] = _str(data["checker_binary"], "checker_binary", where)
        if "extra_args" in data:
            overrides["extra_args"] = _str_tuple(data["extra_args"], "extra_args", where)
        if "color" in data:
            overrides["color_mode"] = _enum(ColorMode, data["color"], "color", where)
        if "debug" in data:
            overrides["debug"] = _bool(data["debug"], "debug", where)
        if "debug_file" in data:
            overrides["debug_file"] = root / _str(data["debug_file"], "debug_file", where)
        if "debounce_ms" in data:
            overrides["debounce_ms"] = _positive_int(data["debounce_ms"], "debounce_ms", where)
        if "poll_interval" in data:
            value: Any = data["poll_interval"]
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                raise ConfigError(f"'poll_interval' in {where} must be a positive number")
            overrides["poll_interval"] = float(value)
        if "stderr" in data:
            overrides["stderr_mode"] = _enum(StderrMode, data["stderr"], "stderr", where)
        if "on_malformed" in data:
            overrides["on_malformed"] = _enum(
                MalformedRecordPolicy, data["on_malformed"], "on_malformed", where
            )
        if "write_strategy" in data:
            overrides["write_strategy"] = _enum(
                FileWriteStrategy, data["write_strategy"], "write_strategy", where
            )
        if "watch_paths" in data:
            overrides["watch_paths"] = tuple(
                root / p for p in _str_tuple(data["watch_paths"], "watch_paths", where)
            )
        if "ignore" in data:
            overrides["ignore_patterns"] = _str_tuple(data["ignore"], "ignore", where)

        config_files: tuple[Path, ...] = (source,) if source is not None else ()
        base: Config = cls(root=root, debug_file=root / DEFAULT_DEBUG_FILE)
        return replace(base, config_files=config_files, **overrides)

    @classmethod
    def load(cls, root: Path) -> Config:
        """Load the configuration for a project root.

        Args:
            root (Path): Project root directory.

        Returns:
            Config: Defaults layered with the project's config file, if any.
        """
        path: Path | None = find_config_file(root)
        if path is None:
            logger.debug("No config file found under %s; using defaults", root)
            return cls.from_defaults(root)
        logger.info("Using config file %s", path)
        return cls.from_mapping(load_config_table(path), root, source=path)

    def with_overrides(self, **overrides: Any) -> Config:
        """Return a copy with CLI overrides applied; ``None`` values are ignored.

        Raises:
            ConfigError: If an override names an unknown field.
        """
        names: set[str] = {f.name for f in fields(self)}
        changes: dict[str, Any] = {}
        for key, value in overrides.items():
            if key not in names:
                raise ConfigError(f"Unknown configuration field: {key}")
            if value is not None:
                changes[key] = value
        return replace(self, **changes)

    def checker_args(self) -> list[str]:
        """Return the checker arguments: subcommand, message format, extras."""
        return [self.checker.value, *MESSAGE_FORMAT_ARGS, *self.extra_args]


def _enum(enum_cls: type[ConfigEnum] | type[ColorMode], value: Any, key: str, where: str) -> Any:
    member: Any = None
    if isinstance(value, str):
        normalized: str = value.strip().lower().replace("-", "_")
        member = next((m for m in enum_cls if m.value == normalized), None)
    if member is None:
        allowed: str = ", ".join(repr(m.value) for m in enum_cls)
        raise ConfigError(f"{key!r} in {where} must be one of {allowed}, got {value!r}")
    return member


def _str(value: Any, key: str, where: str) -> str:
    if not isinstance(value, str) or not value:
        raise ConfigError(f"{key!r} in {where} must be a non-empty string")
    return value


def _bool(value: Any, key: str, where: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{key!r} in {where} must be a boolean")
    return value


def _positive_int(value: Any, key: str, where: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"{key!r} in {where} must be a positive integer")
    return value


def _str_tuple(value: Any, key: str, where: str) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{key!r} in {where} must be a list of strings")
    return tuple(value)
