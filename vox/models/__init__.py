"""Data models for the Vox application."""

from .audio import RecordingResult, AudioSegment
from .transcription import TranscriptionOutcome
from .session import SessionState, SessionOutcome
from .history import HistoryEntry

__all__ = [
    "RecordingResult",
    "AudioSegment",
    "TranscriptionOutcome",
    "SessionState",
    "SessionOutcome",
    "HistoryEntry",
]
