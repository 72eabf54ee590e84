"""Unit tests for StopKeyListener driven over an OS pipe."""

import os
import sys
import time

import pytest

from vox.ui.keyboard_input import StopKeyListener

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="select() needs a pipe descriptor")


@pytest.fixture
def pipe():
    """Text-mode read end and raw write descriptor of a fresh pipe."""
    read_fd, write_fd = os.pipe()
    reader = os.fdopen(read_fd, "r")
    state = {"write_fd": write_fd}
    yield reader, state
    reader.close()
    if state["write_fd"] is not None:
        os.close(state["write_fd"])


def _close_writer(state):
    os.close(state["write_fd"])
    state["write_fd"] = None


def _wait_retired(listener, timeout=2.0):
    deadline = time.monotonic() + timeout
    while listener.thread.is_alive() and time.monotonic() < deadline:
        time.sleep(0.01)


@pytest.mark.unit
class TestStopKeyListener:
    """Test cases for StopKeyListener."""

    def test_enter_fires_once(self, pipe):
        reader, state = pipe
        hits = []
        listener = StopKeyListener(lambda: hits.append(1), stream=reader, poll_interval=0.05)

        os.write(state["write_fd"], b"\n\n")
        listener.start()
        _wait_retired(listener)

        assert hits == [1]
        assert listener.running is False
        assert not listener.thread.is_alive()

    def test_end_of_input_retires_without_firing(self, pipe):
        reader, state = pipe
        hits = []
        listener = StopKeyListener(lambda: hits.append(1), stream=reader, poll_interval=0.05)

        listener.start()
        _close_writer(state)
        _wait_retired(listener)

        assert hits == []
        assert listener.running is False

    def test_no_callback_after_stop(self, pipe):
        reader, state = pipe
        hits = []
        listener = StopKeyListener(lambda: hits.append(1), stream=reader, poll_interval=0.05)

        listener.start()
        listener.stop()
        os.write(state["write_fd"], b"\n")
        time.sleep(0.2)

        assert hits == []
        assert not listener.thread.is_alive()

    def test_start_twice_keeps_one_thread(self, pipe):
        reader, state = pipe
        listener = StopKeyListener(lambda: None, stream=reader, poll_interval=0.05)

        listener.start()
        first = listener.thread
        listener.start()

        assert listener.thread is first
        listener.stop()
