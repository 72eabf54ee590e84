"""Session controller: record, transcribe, deliver, with two-phase Ctrl+C."""

import asyncio
import logging
import os
from typing import Callable, Optional

from rich.console import Console

from ..audio.capture import Recorder
from ..audio.chunker import chunk_count
from ..audio.tools import require_program
from ..cancellation import CancellationToken, InterruptRouter
from ..errors import LocalIOError, MissingCredentialError, UserCancelledError, VoxError
from ..models.history import HistoryEntry
from ..models.session import SessionOutcome, SessionState
from ..models.transcription import TranscriptionOutcome
from ..storage.files import discard_file
from ..storage.history import HistoryStore
from ..transcription.orchestrator import TranscriptionOrchestrator
from ..ui.display import TranscribingSpinner, VolumeMeter
from ..ui.keyboard_input import StopKeyListener
from .clipboard import Clipboard

logger = logging.getLogger(__name__)

StopListenerFactory = Callable[[Callable[[], None]], StopKeyListener]


class SessionController:
    """Drives one capture-and-transcribe session from start to a final state."""

    def __init__(self,
                 recorder: Recorder,
                 orchestrator: TranscriptionOrchestrator,
                 clipboard: Clipboard,
                 history: HistoryStore,
                 console: Console,
                 stop_listener_factory: StopListenerFactory = StopKeyListener,
                 route_signals: bool = True):
        """Initialize session controller.

        Args:
            recorder: Captures audio from the microphone
            orchestrator: Turns an audio file into text
            clipboard: Receives the final text
            history: Receives one entry per successful session
            console: Where progress and feedback are drawn
            stop_listener_factory: Builds the Enter-key listener from a callback
            route_signals: Install the SIGINT handler on the running loop
        """
        self.recorder = recorder
        self.orchestrator = orchestrator
        self.clipboard = clipboard
        self.history = history
        self.console = console
        self.stop_listener_factory = stop_listener_factory
        self.route_signals = route_signals

        self.state = SessionState.IDLE
        self.router: Optional[InterruptRouter] = None

    def _set_state(self, state: SessionState) -> None:
        logger.info(f"Session state: {self.state.value} -> {state.value}")
        self.state = state

    # ---- preconditions ----

    def _check_credential(self) -> None:
        if not self.orchestrator.backend.has_credentials():
            raise MissingCredentialError()

    def check_recording_preconditions(self) -> None:
        """Credential, rec and clipboard, in that order; nothing is spawned or created."""
        self._check_credential()
        require_program("rec")
        self.clipboard.detect()

    # ---- entry points ----

    async def record_and_transcribe(self) -> SessionOutcome:
        """Run a full session: record until stopped, transcribe, deliver."""
        self._set_state(SessionState.IDLE)
        try:
            self.check_recording_preconditions()
        except VoxError as e:
            return self._fail(e)

        stop_token = CancellationToken("stop-recording")
        abort_token = CancellationToken("abort-transcription")
        self.router = InterruptRouter(stop_token, abort_token)
        installed = self.route_signals and self.router.install()
        try:
            return await self._record_then_transcribe(stop_token, abort_token)
        finally:
            if installed:
                self.router.uninstall()

    async def transcribe_file(self, path: str, deliver: bool = True, show_progress: bool = True) -> SessionOutcome:
        """Transcribe an existing file; one Ctrl+C aborts. The file is never deleted.

        Args:
            path: Audio file to transcribe
            deliver: Write the text to clipboard and history on success
            show_progress: Draw the spinner while transcribing
        """
        self._set_state(SessionState.IDLE)
        try:
            if not os.path.exists(path):
                raise LocalIOError(f"file not found: {path}")
            self._check_credential()
            if deliver:
                self.clipboard.detect()
        except VoxError as e:
            return self._fail(e)

        abort_token = CancellationToken("abort-transcription")
        self.router = InterruptRouter(None, abort_token)
        installed = self.route_signals and self.router.install()
        try:
            self._set_state(SessionState.TRANSCRIBING)
            outcome = await self._transcribe_until_aborted(path, abort_token, show_progress)
        finally:
            if installed:
                self.router.uninstall()

        if outcome is None:
            return self._abort()
        if not deliver and outcome.ok:
            self._set_state(SessionState.DONE)
            return self._done(outcome, outcome.duration_seconds or 0.0)
        return self._deliver(outcome, fallback_duration=0.0)

    # ---- phases ----

    async def _record_then_transcribe(self,
                                      stop_token: CancellationToken,
                                      abort_token: CancellationToken) -> SessionOutcome:
        loop = asyncio.get_running_loop()
        listener = self.stop_listener_factory(
            lambda: loop.call_soon_threadsafe(stop_token.cancel, "stop key")
        )

        self._set_state(SessionState.RECORDING)
        self.console.print("● Recording... (Enter to stop)")
        listener.start()
        try:
            with VolumeMeter(self.console) as meter:
                recording = await self.recorder.record(stop_token, on_progress=meter.show)
        except VoxError as e:
            return self._fail(e, stage="recording failed")
        finally:
            listener.stop()

        # Capture is over however it ended; later interrupts abort.
        stop_token.cancel("recording finished")

        try:
            if abort_token.cancelled:
                return self._abort()
            self._set_state(SessionState.TRANSCRIBING)
            outcome = await self._transcribe_until_aborted(recording.file_path, abort_token, True)
        finally:
            discard_file(recording.file_path)

        if outcome is None:
            return self._abort()
        return self._deliver(outcome, fallback_duration=recording.duration_seconds)

    async def _transcribe_until_aborted(self,
                                        path: str,
                                        abort_token: CancellationToken,
                                        show_progress: bool) -> Optional[TranscriptionOutcome]:
        """Run the orchestrator, racing it against the abort token.

        Returns None when the abort token won the race.
        """
        task = asyncio.ensure_future(self.orchestrator.transcribe(path, abort_token))
        aborted = asyncio.ensure_future(abort_token.wait())
        spinner = TranscribingSpinner(self.console) if show_progress else None
        if spinner is not None:
            spinner.start()
        try:
            await asyncio.wait({task, aborted}, return_when=asyncio.FIRST_COMPLETED)
            if not task.done():
                logger.info("Abort requested, cancelling transcription")
                task.cancel()
                await asyncio.wait({task})
                return None
        finally:
            aborted.cancel()
            if spinner is not None:
                spinner.stop()
        return task.result()

    def _deliver(self, outcome: TranscriptionOutcome, fallback_duration: float) -> SessionOutcome:
        if isinstance(outcome.error, UserCancelledError):
            return self._abort()
        if outcome.error is not None:
            return self._fail(outcome.error, stage="transcription failed", partial=outcome)

        text = outcome.text.strip()
        duration = outcome.duration_seconds
        if duration is None:
            logger.info(f"Duration unknown, using wall-clock {fallback_duration:.2f}s")
            duration = fallback_duration

        self.console.print(f'\n"{text}"\n', markup=False, highlight=False)

        try:
            self.clipboard.write(text)
        except VoxError as e:
            return self._fail(e, stage="clipboard")
        self.console.print("✓ Copied to clipboard")

        try:
            self.history.append(HistoryEntry.now(text, duration))
        except OSError as e:
            return self._fail(LocalIOError(str(e)), stage="saving history")

        self._set_state(SessionState.DONE)
        return self._done(outcome, duration)

    # ---- final states ----

    def _done(self, outcome: TranscriptionOutcome, duration: float) -> SessionOutcome:
        return SessionOutcome(
            state=SessionState.DONE,
            text=outcome.text.strip(),
            duration_seconds=duration,
            chunks=chunk_count(outcome.duration_seconds),
        )

    def _abort(self) -> SessionOutcome:
        self._set_state(SessionState.ABORTED)
        return SessionOutcome(state=SessionState.ABORTED, error=UserCancelledError())

    def _fail(self,
              error: VoxError,
              stage: Optional[str] = None,
              partial: Optional[TranscriptionOutcome] = None) -> SessionOutcome:
        self._set_state(SessionState.FAILED)
        logger.error(f"Session failed{f' ({stage})' if stage else ''}: {error}")
        outcome = SessionOutcome(state=SessionState.FAILED, error=error, stage=stage)
        if partial is not None:
            outcome.text = partial.text.strip()
            outcome.duration_seconds = partial.duration_seconds or 0.0
            outcome.chunks = chunk_count(partial.duration_seconds)
        return outcome
