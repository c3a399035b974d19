# topmark:header:start
#
#   project      : Coral
#   file         : style.py
#   file_relpath : src/coral/rendering/style.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Explicit, per-call terminal styling.

A `Styler` is created once from the resolved color decision and passed to
every formatting function. It owns a private `yachalk` factory, so enabling
color for one output never affects another and no global color override is
involved.

Example:
    ```python
    styler = Styler(enabled=False)
    assert styler.apply("yellow_bright", "warning") == "warning"
    ```
"""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from yachalk.chalk_factory import ChalkFactory
from yachalk.types import ColorMode as ChalkColorMode

if TYPE_CHECKING:
    from collections.abc import Callable


class Styler:
    """Applies named yachalk styles when color is enabled.

    Args:
        enabled (bool): Whether to emit ANSI escape codes.
    """

    def __init__(self, *, enabled: bool) -> None:
        self.enabled: bool = enabled
        self._chalk: ChalkFactory = ChalkFactory()
        self._chalk.set_color_mode(
            ChalkColorMode.Basic16 if enabled else ChalkColorMode.AllOff
        )

    def apply(self, style: str, text: str) -> str:
        """Return ``text`` decorated with the yachalk style named ``style``.

        Args:
            style (str): A yachalk style attribute, e.g. ``"cyan_bright"``.
            text (str): Text to decorate.

        Returns:
            str: The styled text, or ``text`` unchanged when color is disabled.
        """
        if not self.enabled:
            return text
        colorizer = cast("Callable[[str], str]", getattr(self._chalk, style))
        return colorizer(text)

    def bold(self, text: str) -> str:
        """Return ``text`` in bold."""
        return self.apply("bold", text)

    def heading(self, text: str) -> str:
        """Return ``text`` styled as a column heading."""
        return self.apply("white_bright", text)

    def location(self, text: str) -> str:
        """Return ``text`` styled as a file location."""
        return self.apply("cyan_bright", text)

    def message(self, text: str) -> str:
        """Return ``text`` styled as message body."""
        return self.apply("white", text)
