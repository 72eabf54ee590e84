"""Transient single-line terminal displays: volume meter and spinner."""

from typing import Optional

from rich.console import Console, RenderableType
from rich.live import Live
from rich.spinner import Spinner
from rich.text import Text


class LiveLine:
    """A status line that is erased when stopped.

    ``stop()`` returns only once rich's refresh thread can no longer draw,
    so anything printed afterwards never interleaves with the line.
    """

    def __init__(self, console: Console, renderable: RenderableType, refresh_per_second: float = 12.5):
        self.console = console
        self._live = Live(
            renderable,
            console=console,
            transient=True,
            refresh_per_second=refresh_per_second,
            redirect_stdout=False,
            redirect_stderr=False,
        )

    def update(self, renderable: RenderableType) -> None:
        self._live.update(renderable)

    def start(self) -> None:
        self._live.start()

    def stop(self) -> None:
        self._live.stop()

    def __enter__(self) -> "LiveLine":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()


class VolumeMeter(LiveLine):
    """Live line fed with bars rendered from rec's progress output."""

    def __init__(self, console: Console, indent: str = "  "):
        super().__init__(console, Text(""))
        self.indent = indent

    def show(self, bar: str) -> None:
        self.update(Text(f"{self.indent}{bar}"))


class TranscribingSpinner(LiveLine):
    """Braille spinner shown while segments are being transcribed."""

    def __init__(self, console: Console, message: str = "Transcribing..."):
        super().__init__(console, Spinner("dots", text=message))


def make_console(file: Optional[object] = None) -> Console:
    """Console for UI feedback; stderr so stdout stays clean for transcripts."""
    if file is not None:
        return Console(file=file)
    return Console(stderr=True)
