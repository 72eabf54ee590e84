"""Transcription module for Vox."""

from .base import AbstractTranscriptionBackend
from .openai_backend import OpenAITranscriptionBackend
from .orchestrator import TranscriptionOrchestrator
from ..models.transcription import TranscriptionOutcome

__all__ = [
    "AbstractTranscriptionBackend",
    "OpenAITranscriptionBackend",
    "TranscriptionOrchestrator",
    "TranscriptionOutcome",
]
