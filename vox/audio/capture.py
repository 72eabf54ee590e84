"""Microphone capture through SoX ``rec`` with a live volume meter."""

import asyncio
import codecs
import logging
import re
import signal
import time
from typing import Callable, List, Optional

from ..cancellation import CancellationToken
from ..errors import LocalIOError
from ..models.audio import RecordingResult
from ..storage.files import create_temp_file, discard_file
from .tools import require_program
from .volume import parse_volume, render_bar

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(r"[\r\n]")


class ProgressSplitter:
    """Split a byte stream into lines on either ``\\r`` or ``\\n``.

    SoX redraws its progress line with ``\\r`` and only uses ``\\n`` for
    headers, so plain line iteration would never yield meter updates.
    """

    def __init__(self):
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="ignore")
        self._pending = ""

    def feed(self, data: bytes) -> List[str]:
        self._pending += self._decoder.decode(data)
        pieces = _LINE_BREAK.split(self._pending)
        self._pending = pieces.pop()
        return pieces

    def flush(self) -> List[str]:
        rest = self._pending + self._decoder.decode(b"", final=True)
        self._pending = ""
        return [rest] if rest else []


class Recorder:
    """Records speech-friendly WAV audio until a stop token fires."""

    def __init__(
        self,
        sample_rate: int = 16000,
        channels: int = 1,
        bit_depth: int = 16,
        grace_seconds: float = 3.0,
        bar_width: int = 30,
    ):
        """Initialize recorder.

        Args:
            sample_rate: Capture sample rate in Hz
            channels: Number of channels (1 for mono)
            bit_depth: Bits per sample
            grace_seconds: How long rec may take to finalize after SIGINT
            bar_width: Width of the rendered volume bar in glyphs
        """
        self.sample_rate = sample_rate
        self.channels = channels
        self.bit_depth = bit_depth
        self.grace_seconds = grace_seconds
        self.bar_width = bar_width
        self.last_message = ""

    def build_command(self, program: str, output_path: str) -> List[str]:
        return [
            program, "-S",
            "-r", str(self.sample_rate),
            "-c", str(self.channels),
            "-b", str(self.bit_depth),
            output_path,
        ]

    async def record(
        self,
        stop_token: CancellationToken,
        on_progress: Optional[Callable[[str], None]] = None,
    ) -> RecordingResult:
        """Capture audio until ``stop_token`` is cancelled or rec exits.

        The caller owns the returned file and must delete it.

        Args:
            stop_token: Cancelling it asks rec to finish the file and exit
            on_progress: Receives each rendered volume bar

        Returns:
            RecordingResult with the WAV path and wall-clock duration

        Raises:
            MissingDependencyError: rec is not installed
            LocalIOError: temp file or subprocess could not be created, or
                rec failed on its own
        """
        program = require_program("rec")
        output_path = create_temp_file(prefix="vox-", suffix=".wav")
        command = self.build_command(program, output_path)
        logger.info(f"Starting capture: {' '.join(command)}")

        start = time.monotonic()
        try:
            proc = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=True,
            )
        except OSError as e:
            discard_file(output_path)
            raise LocalIOError(f"starting rec: {e}") from e

        self.last_message = ""
        reader = asyncio.ensure_future(self._read_progress(proc.stderr, on_progress))
        try:
            stopped = await self._supervise(proc, stop_token)
        except asyncio.CancelledError:
            await self._kill(proc)
            discard_file(output_path)
            raise
        finally:
            await self._finish_reader(reader)

        elapsed = time.monotonic() - start
        logger.info(f"Capture ended after {elapsed:.2f}s (rc={proc.returncode}, stopped={stopped})")

        if not stopped and proc.returncode != 0:
            discard_file(output_path)
            detail = self.last_message or f"exit status {proc.returncode}"
            raise LocalIOError(f"rec exited unexpectedly: {detail}")

        return RecordingResult(file_path=output_path, duration_seconds=elapsed)

    async def _supervise(self, proc: asyncio.subprocess.Process, stop_token: CancellationToken) -> bool:
        """Wait for rec to exit or for a stop request. Returns True if we stopped it."""
        exited = asyncio.ensure_future(proc.wait())
        stop_requested = asyncio.ensure_future(stop_token.wait())
        try:
            await asyncio.wait({exited, stop_requested}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            stop_requested.cancel()

        if exited.done():
            return False

        await self._interrupt(proc, exited)
        return True

    async def _interrupt(self, proc: asyncio.subprocess.Process, exited: "asyncio.Future") -> None:
        # SIGINT rather than a kill so rec can write the WAV header.
        logger.info("Stop requested, sending SIGINT to rec")
        try:
            proc.send_signal(signal.SIGINT)
        except ProcessLookupError:
            pass

        try:
            await asyncio.wait_for(asyncio.shield(exited), timeout=self.grace_seconds)
        except asyncio.TimeoutError:
            logger.warning(f"rec still running {self.grace_seconds}s after SIGINT, killing it")
            await self._kill(proc)

    async def _kill(self, proc: asyncio.subprocess.Process) -> None:
        if proc.returncode is None:
            try:
                proc.kill()
            except ProcessLookupError:
                pass
            await proc.wait()

    async def _read_progress(
        self,
        stream: Optional[asyncio.StreamReader],
        on_progress: Optional[Callable[[str], None]],
    ) -> None:
        if stream is None:
            return
        splitter = ProgressSplitter()
        while True:
            data = await stream.read(1024)
            if not data:
                break
            for line in splitter.feed(data):
                self._handle_line(line, on_progress)
        for line in splitter.flush():
            self._handle_line(line, on_progress)

    def _handle_line(self, line: str, on_progress: Optional[Callable[[str], None]]) -> None:
        level, found = parse_volume(line)
        if not found:
            if line.strip():
                self.last_message = line.strip()
            return
        if on_progress is None:
            return
        try:
            on_progress(render_bar(level, self.bar_width))
        except Exception as e:
            logger.debug(f"Volume display update failed: {e}")

    async def _finish_reader(self, reader: "asyncio.Future") -> None:
        try:
            await asyncio.wait_for(reader, timeout=1.0)
        except asyncio.TimeoutError:
            logger.debug("Progress reader did not reach EOF, cancelled")
