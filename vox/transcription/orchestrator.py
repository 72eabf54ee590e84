"""Single-shot or chunked transcription of one audio file."""

import logging
import os
from typing import List, Optional

from ..audio.chunker import chunk_count, chunk_file, needs_chunking
from ..audio.probe import probe_duration
from ..audio.tools import ToolRunner, run_tool
from ..cancellation import CancellationToken
from ..errors import LocalIOError, MissingCredentialError, UserCancelledError, VoxError
from ..models.audio import AudioSegment
from ..models.transcription import TranscriptionOutcome
from ..storage.files import discard_file, discard_files
from .base import AbstractTranscriptionBackend

logger = logging.getLogger(__name__)


class TranscriptionOrchestrator:
    """Decides how to split a file and feeds the segments to a backend in order."""

    def __init__(self, backend: AbstractTranscriptionBackend, runner: ToolRunner = run_tool):
        """Initialize orchestrator.

        Args:
            backend: Remote transcription service
            runner: Coroutine used to invoke soxi and sox
        """
        self.backend = backend
        self.runner = runner

    async def transcribe(
        self,
        path: str,
        cancel_token: Optional[CancellationToken] = None,
    ) -> TranscriptionOutcome:
        """Transcribe ``path``, splitting it first when it is long.

        Never raises for pipeline failures: the error is returned in the
        outcome together with whatever text was already transcribed. The
        input file itself is left in place.

        Args:
            path: Audio file to transcribe
            cancel_token: Checked before every segment; once cancelled no
                further remote calls are made

        Returns:
            TranscriptionOutcome with text, probed duration and error
        """
        if not self.backend.has_credentials():
            return TranscriptionOutcome(text="", error=MissingCredentialError())

        if not os.path.exists(path):
            return TranscriptionOutcome(text="", error=LocalIOError(f"audio file: {path} not found"))

        duration: Optional[float] = None
        try:
            duration = await probe_duration(path, self.runner)
        except VoxError as e:
            logger.warning(f"Could not determine duration of {path}, transcribing as one file: {e}")

        if not needs_chunking(duration):
            segments = [AudioSegment(path=path, index=0)]
            return await self._transcribe_segments(segments, duration, cancel_token, owned=False)

        logger.info(f"{path} is {duration:.1f}s long, splitting into ~{chunk_count(duration)} segments")
        try:
            segments = await chunk_file(path, duration, self.runner)
        except VoxError as e:
            logger.error(f"Chunking {path} failed: {e}")
            return TranscriptionOutcome(text="", duration_seconds=duration, error=e,
                                        segments_total=chunk_count(duration))
        return await self._transcribe_segments(segments, duration, cancel_token, owned=True)

    async def _transcribe_segments(
        self,
        segments: List[AudioSegment],
        duration: Optional[float],
        cancel_token: Optional[CancellationToken],
        owned: bool,
    ) -> TranscriptionOutcome:
        parts: List[str] = []
        done = 0

        def outcome(error: Optional[VoxError] = None) -> TranscriptionOutcome:
            return TranscriptionOutcome(
                text=" ".join(parts),
                duration_seconds=duration,
                error=error,
                segments_total=len(segments),
                segments_done=done,
            )

        try:
            for segment in segments:
                if cancel_token is not None and cancel_token.cancelled:
                    logger.info(f"Cancelled before segment {segment.index} ({done}/{len(segments)} done)")
                    return outcome(UserCancelledError())

                try:
                    text = await self.backend.transcribe_file(segment.path)
                except VoxError as e:
                    logger.error(f"Segment {segment.index} failed after {done}/{len(segments)}: {e}")
                    return outcome(e)
                finally:
                    if owned:
                        discard_file(segment.path)

                done += 1
                text = text.strip()
                if text:
                    parts.append(text)
                logger.debug(f"Segment {segment.index} transcribed ({len(text)} chars)")

            return outcome()
        finally:
            if owned:
                discard_files(s.path for s in segments)
