"""Audio-related data models."""

from dataclasses import dataclass


@dataclass
class RecordingResult:
    """A finalized recording handed from the recorder to the session."""
    file_path: str
    duration_seconds: float  # Wall-clock time from rec start to exit


@dataclass
class AudioSegment:
    """One temporary slice of a longer recording."""
    path: str
    index: int  # Used for naming only; segments keep creation order
