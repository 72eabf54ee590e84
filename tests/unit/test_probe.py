"""Unit tests for duration probing with soxi."""

import asyncio

import pytest

from vox.audio.probe import probe_duration
from vox.audio.tools import ToolResult
from vox.errors import LocalIOError


def _runner(result: ToolResult):
    calls = []

    async def runner(args):
        calls.append(list(args))
        return result

    runner.calls = calls
    return runner


@pytest.mark.unit
class TestProbeDuration:
    """Test cases for probe_duration."""

    def test_parses_seconds(self):
        runner = _runner(ToolResult(returncode=0, stdout="620.500000\n"))

        duration = asyncio.run(probe_duration("/tmp/a.wav", runner))

        assert duration == pytest.approx(620.5)
        assert runner.calls == [["soxi", "-D", "/tmp/a.wav"]]

    def test_nonzero_exit_raises_local_io(self):
        runner = _runner(ToolResult(returncode=1, stderr="soxi FAIL formats: can't open input file"))

        with pytest.raises(LocalIOError, match="can't open input file"):
            asyncio.run(probe_duration("/tmp/missing.wav", runner))

    def test_unparseable_output_raises_local_io(self):
        runner = _runner(ToolResult(returncode=0, stdout="not a number\n"))

        with pytest.raises(LocalIOError, match="parsing duration"):
            asyncio.run(probe_duration("/tmp/a.wav", runner))
