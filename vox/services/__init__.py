"""Services layer for Vox application logic."""

from .clipboard import Clipboard
from .session_controller import SessionController

__all__ = [
    "Clipboard",
    "SessionController",
]
