"""Transcription-related data models."""

from dataclasses import dataclass
from typing import Optional

from ..errors import VoxError


@dataclass
class TranscriptionOutcome:
    """Result of transcribing one audio file, possibly partial."""
    text: str
    duration_seconds: Optional[float] = None  # Probed duration, None if unknown
    error: Optional[VoxError] = None
    segments_total: int = 1
    segments_done: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None
