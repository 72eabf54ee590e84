"""Unit tests for Clipboard."""

import subprocess
from unittest.mock import Mock, patch

import pytest

from vox.errors import LocalIOError, MissingDependencyError
from vox.services.clipboard import Clipboard


def _which(*present):
    return lambda name: f"/usr/bin/{name}" if name in present else None


@pytest.mark.unit
class TestClipboard:
    """Test cases for Clipboard."""

    def test_prefers_pbcopy(self):
        with patch("vox.services.clipboard.shutil.which", side_effect=_which("pbcopy", "xsel")):
            assert Clipboard().detect() == "pbcopy"

    def test_falls_back_to_xclip(self):
        with patch("vox.services.clipboard.shutil.which", side_effect=_which("xclip")):
            assert Clipboard().detect() == "xclip"

    def test_no_tool(self):
        with patch("vox.services.clipboard.shutil.which", side_effect=_which()):
            with pytest.raises(MissingDependencyError) as exc_info:
                Clipboard().detect()

        assert "no clipboard tool found" in str(exc_info.value)
        assert "sudo apt-get install xsel" in str(exc_info.value)

    def test_write_pipes_text(self):
        with patch("vox.services.clipboard.shutil.which", side_effect=_which("xsel")), \
                patch("vox.services.clipboard.subprocess.run") as mock_run:
            Clipboard().write("héllo")

        args, kwargs = mock_run.call_args
        assert args[0] == ["xsel", "--clipboard", "--input"]
        assert kwargs["input"] == "héllo".encode("utf-8")
        assert kwargs["check"] is True

    def test_write_failure(self):
        error = subprocess.CalledProcessError(1, ["xclip"], stderr=b"Error: Can't open display")
        with patch("vox.services.clipboard.shutil.which", side_effect=_which("xclip")), \
                patch("vox.services.clipboard.subprocess.run", side_effect=error):
            with pytest.raises(LocalIOError, match="Can't open display"):
                Clipboard().write("text")

    def test_write_timeout(self):
        error = subprocess.TimeoutExpired(["pbcopy"], 10)
        with patch("vox.services.clipboard.shutil.which", side_effect=_which("pbcopy")), \
                patch("vox.services.clipboard.subprocess.run", side_effect=error):
            with pytest.raises(LocalIOError):
                Clipboard().write("text")

    def test_unavailable_on_headless_linux(self, monkeypatch):
        monkeypatch.setattr("vox.services.clipboard.sys.platform", "linux")
        monkeypatch.delenv("DISPLAY", raising=False)
        monkeypatch.delenv("WAYLAND_DISPLAY", raising=False)

        assert Clipboard().available() is False

    def test_available_with_display(self, monkeypatch):
        monkeypatch.setattr("vox.services.clipboard.sys.platform", "linux")
        monkeypatch.setenv("DISPLAY", ":0")
        clipboard = Clipboard()
        clipboard.detect = Mock(return_value="xsel")

        assert clipboard.available() is True
