# topmark:header:start
#
#   project      : Coral
#   file         : __init__.py
#   file_relpath : src/coral/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Coral package.

Coral runs `cargo check` (or `cargo clippy`) with JSON message output, decodes
the diagnostic stream incrementally, and drives an interactive watch loop that
re-runs the checker on file changes and can apply suggested fixes.
"""

from __future__ import annotations
