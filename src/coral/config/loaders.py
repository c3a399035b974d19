# topmark:header:start
#
#   project      : Coral
#   file         : loaders.py
#   file_relpath : src/coral/config/loaders.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Load TOML configuration sources.

This module provides I/O helpers for reading Coral configuration from
on-disk TOML files (``coral.toml`` or the ``[tool.coral]`` table of
``pyproject.toml``) and for reading Cargo manifests.

Parsing is done with `tomlkit` and returned as plain `dict` structures.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

import tomlkit
from tomlkit.exceptions import ParseError as TomlkitParseError

from coral.config.logging import get_logger
from coral.constants import CORAL_TOML, PYPROJECT_TOML, TOOL_TABLE
from coral.errors import ConfigError

if TYPE_CHECKING:
    from pathlib import Path

    from coral.config.logging import CoralLogger

TomlTable = dict[str, Any]

logger: CoralLogger = get_logger(__name__)


def load_toml_dict(path: Path) -> TomlTable:
    """Load and parse a TOML file from the filesystem.

    Args:
        path (Path): Path to a TOML document.

    Returns:
        TomlTable: The parsed TOML content as plain Python values.

    Raises:
        ConfigError: If the file cannot be read or is not valid TOML.
    """
    try:
        text: str = path.read_text(encoding="utf-8")
        doc: tomlkit.TOMLDocument = tomlkit.parse(text)
    except OSError as e:
        raise ConfigError(f"Error loading TOML from {path}: {e}") from e
    except TomlkitParseError as e:
        raise ConfigError(f"Error decoding TOML from {path}: {e}") from e
    data_any: Any = doc.unwrap()
    logger.debug("Loaded TOML from %s", path)
    return cast("TomlTable", data_any) if isinstance(data_any, dict) else {}


def find_config_file(root: Path) -> Path | None:
    """Return the Coral config source for a project root, if any.

    ``coral.toml`` takes precedence over ``pyproject.toml``; the latter only
    counts when it has a ``[tool.coral]`` table.

    Args:
        root (Path): Project root directory.

    Returns:
        Path | None: The config file, or None if the project has none.
    """
    standalone: Path = root / CORAL_TOML
    if standalone.is_file():
        return standalone
    pyproject: Path = root / PYPROJECT_TOML
    if pyproject.is_file() and TOOL_TABLE in load_toml_dict(pyproject).get("tool", {}):
        return pyproject
    return None


def load_config_table(path: Path) -> TomlTable:
    """Return the Coral settings table from a config file.

    Args:
        path (Path): A ``coral.toml`` or ``pyproject.toml`` file.

    Returns:
        TomlTable: The settings; the whole document for ``coral.toml``,
        the ``[tool.coral]`` table for ``pyproject.toml``.

    Raises:
        ConfigError: If the file cannot be loaded or the table is not a table.
    """
    data: TomlTable = load_toml_dict(path)
    if path.name == PYPROJECT_TOML:
        data = data.get("tool", {}).get(TOOL_TABLE, {})
    if not isinstance(data, dict):
        raise ConfigError(f"[tool.{TOOL_TABLE}] in {path} must be a table")
    return data
