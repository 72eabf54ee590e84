"""Listening for the stop key (Enter) while recording."""

import sys
import threading
from typing import Optional, Callable, TextIO
import logging

logger = logging.getLogger(__name__)


class StopKeyListener:
    """Calls ``callback`` once when the operator presses Enter.

    Runs in a daemon thread polling stdin with ``select`` so ``stop()`` can
    retire it without waiting for input. End of input (a closed or redirected
    stdin) retires the listener without firing.
    """

    def __init__(self, callback: Callable[[], None], stream: Optional[TextIO] = None, poll_interval: float = 0.1):
        """Initialize stop key listener.

        Args:
            callback: Invoked from the listener thread when Enter is read
            stream: Input stream, sys.stdin by default
            poll_interval: Seconds between checks of the running flag
        """
        self.callback = callback
        self.stream = stream
        self.poll_interval = poll_interval
        self.running = False
        self.thread: Optional[threading.Thread] = None

    def start(self) -> None:
        """Start the listener thread."""
        if self.running:
            return

        self.running = True
        self.thread = threading.Thread(target=self._input_loop, daemon=True)
        self.thread.name = "StopKeyListener"
        self.thread.start()
        logger.debug("Stop key listener started")

    def stop(self) -> None:
        """Stop listening; the callback will not fire after this returns."""
        self.running = False
        if self.thread:
            self.thread.join(timeout=self.poll_interval * 5)
        logger.debug("Stop key listener stopped")

    def _input_loop(self) -> None:
        stream = self.stream or sys.stdin
        try:
            while self.running:
                if not self._wait_readable(stream):
                    continue
                line = stream.readline()
                if not line:
                    logger.debug("Stop key listener reached end of input")
                    break
                if self.running:
                    logger.info("Stop key pressed")
                    self.callback()
                break
        except (OSError, ValueError) as e:
            logger.warning(f"Stop key listener disabled: {e}")
        self.running = False

    def _wait_readable(self, stream: TextIO) -> bool:
        import select

        try:
            readable, _, _ = select.select([stream], [], [], self.poll_interval)
        except (OSError, ValueError, TypeError):
            # No selectable descriptor (e.g. Windows console); block on readline.
            return True
        return bool(readable)
