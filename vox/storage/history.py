"""Append-only JSONL storage for transcription history."""

import logging
import os
from pathlib import Path
from typing import List, Optional

from ..config import default_history_path
from ..models.history import HistoryEntry

logger = logging.getLogger(__name__)


class HistoryStore:
    """Reads and writes history entries, one JSON object per line."""

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path or default_history_path())

    def append(self, entry: HistoryEntry) -> None:
        """Append an entry, creating the directory (0700) and file (0600) if needed."""
        self.path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
        fd = os.open(self.path, os.O_APPEND | os.O_CREAT | os.O_WRONLY, 0o600)
        with os.fdopen(fd, 'a', encoding='utf-8') as f:
            f.write(entry.to_json_line() + "\n")
        logger.info(f"History entry appended to {self.path}")

    def list(self, n: int = 0) -> List[HistoryEntry]:
        """Return entries newest-first.

        Args:
            n: Maximum number of entries; 0 returns all of them

        Returns:
            Entries in reverse chronological order; empty if the file is missing

        Raises:
            ValueError: A line is not a valid history entry
        """
        if not self.path.exists():
            return []

        entries: List[HistoryEntry] = []
        with open(self.path, 'r', encoding='utf-8') as f:
            for line in f:
                if not line.strip():
                    continue
                entries.append(HistoryEntry.model_validate_json(line))

        entries.reverse()
        if n > 0:
            entries = entries[:n]
        return entries

    def get(self, number: int) -> HistoryEntry:
        """Return entry ``number`` counting from 1 = most recent."""
        entries = self.list(0)
        if number < 1 or number > len(entries):
            raise IndexError(f"entry #{number} not found (have {len(entries)} entries)")
        return entries[number - 1]

    def clear(self) -> None:
        """Remove the history file; missing file is not an error."""
        try:
            self.path.unlink()
            logger.info(f"History cleared: {self.path}")
        except FileNotFoundError:
            pass
