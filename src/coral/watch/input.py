# topmark:header:start
#
#   project      : Coral
#   file         : input.py
#   file_relpath : src/coral/watch/input.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Line-oriented input context.

A daemon thread reads user input line by line and forwards every non-blank
line to the command channel. It stops after forwarding an exit keyword. End
of input is forwarded as ``quit`` so a closed stdin also ends the watch loop.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from coral.config.logging import get_logger
from coral.constants import EXIT_KEYWORDS

if TYPE_CHECKING:
    import queue
    from collections.abc import Set
    from typing import TextIO

    from coral.config.logging import CoralLogger

logger: CoralLogger = get_logger(__name__)

EOF_COMMAND: str = "quit"


class InputReader:
    """Forwards user commands from a text stream to a channel.

    Args:
        stream (TextIO): Where commands are read from (normally stdin).
        channel (queue.Queue[str]): Single-consumer output channel.
        exit_keywords (Set[str]): Lines that end input processing.
    """

    def __init__(
        self,
        stream: TextIO,
        channel: queue.Queue[str],
        *,
        exit_keywords: Set[str] = EXIT_KEYWORDS,
    ) -> None:
        self.stream: TextIO = stream
        self.channel: queue.Queue[str] = channel
        self.exit_keywords: Set[str] = exit_keywords
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        """Start reading on a daemon thread."""
        self._thread = threading.Thread(target=self.run, name="coral-input", daemon=True)
        self._thread.start()

    def run(self) -> None:
        """Read and forward lines until an exit keyword or end of input."""
        for line in iter(self.stream.readline, ""):
            text: str = line.strip()
            if not text:
                continue
            self.channel.put(text)
            if text.lower() in self.exit_keywords:
                logger.debug("Exit keyword read; input thread finished")
                return
        logger.debug("End of input; forwarding %r", EOF_COMMAND)
        self.channel.put(EOF_COMMAND)

    def join(self, timeout: float | None = None) -> None:
        """Wait for the input thread to finish."""
        if self._thread is not None:
            self._thread.join(timeout)
