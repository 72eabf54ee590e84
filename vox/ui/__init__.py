"""Terminal UI pieces: stop key, live displays, formatting."""

from .display import LiveLine, TranscribingSpinner, VolumeMeter, make_console
from .format import relative_time, truncate
from .keyboard_input import StopKeyListener

__all__ = [
    "LiveLine",
    "TranscribingSpinner",
    "VolumeMeter",
    "make_console",
    "relative_time",
    "truncate",
    "StopKeyListener",
]
