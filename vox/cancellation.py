"""One-shot cancellation tokens and two-phase interrupt routing."""

import asyncio
import logging
import signal
from typing import Optional

logger = logging.getLogger(__name__)


class CancellationToken:
    """A flag that can be set once, checked, and awaited.

    Must be created and cancelled on the event loop thread; other threads go
    through ``loop.call_soon_threadsafe(token.cancel, reason)``.
    """

    def __init__(self, name: str):
        self.name = name
        self.reason: Optional[str] = None
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str = "") -> bool:
        """Set the token. Returns True only for the call that actually set it."""
        if self._event.is_set():
            return False
        self.reason = reason
        self._event.set()
        logger.info(f"Token '{self.name}' cancelled ({reason or 'no reason'})")
        return True

    async def wait(self) -> None:
        await self._event.wait()

    def __repr__(self) -> str:
        state = f"cancelled: {self.reason}" if self.cancelled else "armed"
        return f"CancellationToken({self.name!r}, {state})"


class InterruptRouter:
    """Maps repeated SIGINTs onto a stop phase and then an abort phase.

    The first interrupt that arrives while the stop token is still armed
    stops capture. Every interrupt after that (including the first one, if
    capture was already stopped some other way) cancels the abort token.
    Because both tokens are only touched on the loop thread, an interrupt is
    never handled twice and never dropped between the two phases.
    """

    def __init__(self, stop_token: Optional[CancellationToken], abort_token: CancellationToken):
        self.stop_token = stop_token
        self.abort_token = abort_token
        self.interrupts = 0
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    def on_interrupt(self) -> None:
        self.interrupts += 1
        logger.info(f"Interrupt #{self.interrupts} received")
        if self.stop_token is not None and self.stop_token.cancel("interrupt"):
            return
        self.abort_token.cancel("interrupt")

    def install(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> bool:
        """Route SIGINT to this router. Returns False where the platform has no loop signal support."""
        loop = loop or asyncio.get_running_loop()
        try:
            loop.add_signal_handler(signal.SIGINT, self.on_interrupt)
        except (NotImplementedError, RuntimeError) as e:
            logger.warning(f"SIGINT routing unavailable, Ctrl+C will exit immediately: {e}")
            return False
        self._loop = loop
        return True

    def uninstall(self) -> None:
        if self._loop is not None:
            self._loop.remove_signal_handler(signal.SIGINT)
            self._loop = None
