"""Storage helpers: temporary audio files and the transcription history."""

from .files import create_temp_file, discard_file, discard_files
from .history import HistoryStore, default_history_path

__all__ = [
    "create_temp_file",
    "discard_file",
    "discard_files",
    "HistoryStore",
    "default_history_path",
]
