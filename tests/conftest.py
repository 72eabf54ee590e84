"""Pytest configuration and fixtures for Vox tests."""

import pytest
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from vox.audio.tools import ToolResult
from vox.errors import VoxError
from vox.transcription.base import AbstractTranscriptionBackend


# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests with no external programs")
    config.addinivalue_line("markers", "integration: tests that spawn real subprocesses")


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point HOME at a temp dir and clear the environment Vox reads."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("VOX_CONFIG", raising=False)
    return home


@pytest.fixture
def audio_file(tmp_path):
    """A small stand-in audio file; content is never decoded by the fakes."""
    path = tmp_path / "speech.wav"
    path.write_bytes(b"RIFF" + b"\x00" * 64)
    return str(path)


class FakeToolRunner:
    """Records SoX invocations and answers them without spawning anything.

    ``soxi -D`` prints ``duration``; ``sox ... trim`` creates the output file
    unless the call number is listed in ``fail_trims`` (1-based).
    """

    def __init__(self, duration: Optional[float] = 10.0, fail_trims: Sequence[int] = (), probe_rc: int = 0):
        self.duration = duration
        self.fail_trims = set(fail_trims)
        self.probe_rc = probe_rc
        self.calls: List[List[str]] = []
        self.trims = 0

    async def __call__(self, args: Sequence[str]) -> ToolResult:
        args = list(args)
        self.calls.append(args)
        if args[0] == "soxi":
            if self.probe_rc != 0:
                return ToolResult(returncode=self.probe_rc, stderr="soxi FAIL formats: can't open input file")
            return ToolResult(returncode=0, stdout=f"{self.duration}\n")
        if args[0] == "sox":
            self.trims += 1
            Path(args[2]).write_bytes(b"segment")
            if self.trims in self.fail_trims:
                return ToolResult(returncode=2, stderr="sox FAIL trim: disk full")
            return ToolResult(returncode=0)
        raise AssertionError(f"unexpected tool call: {args}")


@pytest.fixture
def fake_runner():
    return FakeToolRunner()


class FakeBackend(AbstractTranscriptionBackend):
    """Scripted backend: returns texts in order, or raises the given errors."""

    service_name = "fake"

    def __init__(self, responses: Optional[List] = None, credentials: bool = True):
        self.responses = list(responses or ["hello world"])
        self.credentials = credentials
        self.calls: List[str] = []
        self.seen_existing: Dict[str, bool] = {}

    def has_credentials(self) -> bool:
        return self.credentials

    async def transcribe_file(self, audio_path: str) -> str:
        self.calls.append(audio_path)
        self.seen_existing[audio_path] = Path(audio_path).exists()
        response = self.responses[min(len(self.calls), len(self.responses)) - 1]
        if isinstance(response, VoxError):
            raise response
        return response


@pytest.fixture
def fake_backend():
    return FakeBackend()


class FakeClipboard:
    """Clipboard that stores the last text instead of calling pbcopy."""

    def __init__(self, error: Optional[VoxError] = None, detect_error: Optional[VoxError] = None):
        self.error = error
        self.detect_error = detect_error
        self.texts: List[str] = []

    def detect(self) -> str:
        if self.detect_error is not None:
            raise self.detect_error
        return "fake"

    def available(self) -> bool:
        return self.detect_error is None

    def write(self, text: str) -> None:
        if self.error is not None:
            raise self.error
        self.texts.append(text)


@pytest.fixture
def fake_clipboard():
    return FakeClipboard()


@pytest.fixture
def history_path(tmp_path):
    return str(tmp_path / "vox" / "history.jsonl")


@pytest.fixture
def runner_factory():
    return FakeToolRunner


@pytest.fixture
def backend_factory():
    return FakeBackend


@pytest.fixture
def clipboard_factory():
    return FakeClipboard
