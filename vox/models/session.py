"""Session-related data models."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..errors import VoxError


class SessionState(Enum):
    """States of a capture-and-transcribe session."""
    IDLE = "idle"
    RECORDING = "recording"
    TRANSCRIBING = "transcribing"
    DONE = "done"
    ABORTED = "aborted"
    FAILED = "failed"


@dataclass
class SessionOutcome:
    """Structured result handed back to the CLI layer."""
    state: SessionState
    text: str = ""  # Partial text when a remote call failed midway
    duration_seconds: float = 0.0
    chunks: int = 0
    error: Optional[VoxError] = None
    stage: Optional[str] = None  # e.g. "recording failed", "clipboard"

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def exit_code(self) -> int:
        if self.error is None:
            return 0
        return self.error.exit_code

    @property
    def message(self) -> str:
        if self.error is None:
            return ""
        if self.stage:
            return f"{self.stage}: {self.error}"
        return str(self.error)
