# topmark:header:start
#
#   project      : Coral
#   file         : workspace.py
#   file_relpath : src/coral/workspace.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Discover the paths to watch from a Cargo project layout.

For the root package and every workspace member the manifest and the
conventional source locations (``src/``, ``tests/``, ``examples/``,
``benches/``, ``build.rs``) are watched when they exist. Workspace
``members`` may be glob patterns; ``exclude`` entries are honored.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from coral.config.loaders import load_toml_dict
from coral.config.logging import get_logger
from coral.constants import CARGO_MANIFEST
from coral.errors import ConfigError, WatchRegistrationError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from coral.config.logging import CoralLogger

logger: CoralLogger = get_logger(__name__)

PACKAGE_SOURCES: tuple[str, ...] = ("src", "tests", "examples", "benches", "build.rs")


def _string_list(table: dict[str, Any], key: str) -> list[str]:
    value: Any = table.get(key, [])
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, str)]


def _member_dirs(root: Path, workspace: dict[str, Any]) -> list[Path]:
    excluded: set[Path] = {(root / e).resolve() for e in _string_list(workspace, "exclude")}
    members: list[Path] = []
    for pattern in _string_list(workspace, "members"):
        for candidate in sorted(root.glob(pattern)):
            if candidate.resolve() in excluded:
                continue
            if (candidate / CARGO_MANIFEST).is_file():
                members.append(candidate)
            else:
                logger.warning("Workspace member %s has no %s", candidate, CARGO_MANIFEST)
    return members


def _package_paths(package_dir: Path) -> list[Path]:
    paths: list[Path] = [package_dir / CARGO_MANIFEST]
    paths.extend(package_dir / name for name in PACKAGE_SOURCES if (package_dir / name).exists())
    return paths


def discover_watch_paths(root: Path, extra: Iterable[Path] = ()) -> list[Path]:
    """Return the files and directories to watch for a Cargo project.

    Args:
        root (Path): Directory holding the root ``Cargo.toml``.
        extra (Iterable[Path]): Additional paths (e.g. from configuration),
            appended as given.

    Returns:
        list[Path]: Paths in discovery order, without duplicates.

    Raises:
        WatchRegistrationError: If the root manifest is missing or unreadable.
    """
    manifest: Path = root / CARGO_MANIFEST
    if not manifest.is_file():
        raise WatchRegistrationError(manifest, "no Cargo manifest found")
    try:
        data: dict[str, Any] = load_toml_dict(manifest)
    except ConfigError as exc:
        raise WatchRegistrationError(manifest, str(exc)) from exc

    paths: list[Path] = _package_paths(root) if "package" in data else [manifest]
    workspace: Any = data.get("workspace")
    if isinstance(workspace, dict):
        for member in _member_dirs(root, workspace):
            paths.extend(_package_paths(member))
    paths.extend(extra)

    seen: set[Path] = set()
    unique: list[Path] = []
    for path in paths:
        key: Path = path.resolve()
        if key not in seen:
            seen.add(key)
            unique.append(path)
    logger.debug("Discovered %d watch path(s) under %s", len(unique), root)
    return unique


def find_workspace_root(root: Path) -> Path:
    """Return the directory cargo reports relative span file names against.

    That is the nearest directory at or above ``root`` whose ``Cargo.toml``
    has a ``[workspace]`` table, or ``root`` itself when there is none (a
    standalone package). Unreadable manifests on the way up are skipped.
    """
    start: Path = root.resolve()
    for directory in (start, *start.parents):
        manifest: Path = directory / CARGO_MANIFEST
        if not manifest.is_file():
            continue
        try:
            data: dict[str, Any] = load_toml_dict(manifest)
        except ConfigError as exc:
            logger.warning("Skipping unreadable manifest %s: %s", manifest, exc)
            continue
        if "workspace" in data:
            logger.debug("Workspace root of %s is %s", root, directory)
            return directory
    return root
