"""Splitting long recordings into fixed-length segments with sox trim."""

import logging
from pathlib import Path
from typing import List, Optional

from ..errors import LocalIOError
from ..models.audio import AudioSegment
from ..storage.files import discard_file, discard_files
from .tools import ToolRunner, run_tool

logger = logging.getLogger(__name__)

# Length of each segment (5 minutes).
CHUNK_DURATION_SECONDS = 300.0
# Recordings longer than this are split (8 minutes).
CHUNK_THRESHOLD_SECONDS = 480.0


def needs_chunking(duration: Optional[float]) -> bool:
    return duration is not None and duration > CHUNK_THRESHOLD_SECONDS


def chunk_count(duration: Optional[float]) -> int:
    """Number of segments reported to the user for a recording of ``duration`` seconds."""
    if not needs_chunking(duration):
        return 1
    return int(duration // CHUNK_DURATION_SECONDS) + 1


def segment_path(source: Path, index: int) -> Path:
    ext = source.suffix or ".wav"
    return source.parent / f"{source.stem}_chunk{index:03d}{ext}"


async def chunk_file(
    path: str,
    total_duration: float,
    runner: ToolRunner = run_tool,
    chunk_duration: float = CHUNK_DURATION_SECONDS,
) -> List[AudioSegment]:
    """Split an audio file into consecutive segments of ``chunk_duration`` seconds.

    Segments are written next to the source file and must be deleted by the
    caller. If any trim fails, every segment created so far is removed and
    LocalIOError is raised; a partial list is never returned.

    Args:
        path: Source audio file
        total_duration: Duration of the source in seconds (already probed)
        runner: Coroutine used to invoke sox
        chunk_duration: Segment length in seconds

    Returns:
        Segments in playback order
    """
    source = Path(path)
    segments: List[AudioSegment] = []
    pending: Optional[Path] = None
    completed = False

    try:
        start = 0.0
        while start < total_duration:
            index = len(segments)
            pending = segment_path(source, index)
            result = await runner([
                "sox", str(source), str(pending), "trim",
                f"{start:.2f}", f"{chunk_duration:.2f}",
            ])
            if result.returncode != 0:
                raise LocalIOError(f"sox trim at {start:.0f}s: {result.output}")
            segments.append(AudioSegment(path=str(pending), index=index))
            pending = None
            start += chunk_duration
        completed = True
    finally:
        if not completed:
            discard_files(s.path for s in segments)
            if pending is not None:
                discard_file(str(pending))

    logger.info(f"Split {path} ({total_duration:.1f}s) into {len(segments)} segments")
    return segments
