"""System clipboard access through pbcopy, xsel or xclip."""

import logging
import os
import shutil
import subprocess
import sys
from typing import Dict, List

from ..errors import LocalIOError, MissingDependencyError

logger = logging.getLogger(__name__)

CLIPBOARD_TOOLS = ("pbcopy", "xsel", "xclip")

_TOOL_ARGS: Dict[str, List[str]] = {
    "pbcopy": [],
    "xsel": ["--clipboard", "--input"],
    "xclip": ["-selection", "clipboard"],
}

CLIPBOARD_INSTALL_HINTS = [
    "macOS:  pbcopy is built-in",
    "Linux:  sudo apt-get install xsel",
]


class Clipboard:
    """Copies text to the system clipboard with the first tool found on PATH."""

    def detect(self) -> str:
        """Return the clipboard program to use.

        Raises:
            MissingDependencyError: None of pbcopy, xsel, xclip is installed
        """
        for tool in CLIPBOARD_TOOLS:
            if shutil.which(tool) is not None:
                return tool
        raise MissingDependencyError("no clipboard tool found", CLIPBOARD_INSTALL_HINTS)

    def available(self) -> bool:
        """Whether a copy is likely to work (false on headless Linux)."""
        if sys.platform.startswith("linux"):
            if not os.environ.get("DISPLAY") and not os.environ.get("WAYLAND_DISPLAY"):
                return False
        try:
            self.detect()
        except MissingDependencyError:
            return False
        return True

    def write(self, text: str) -> None:
        """Copy ``text`` to the clipboard.

        Raises:
            MissingDependencyError: No clipboard tool is installed
            LocalIOError: The clipboard tool failed
        """
        tool = self.detect()
        try:
            subprocess.run(
                [tool] + _TOOL_ARGS[tool],
                input=text.encode("utf-8"),
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                check=True,
                timeout=10,
            )
        except subprocess.CalledProcessError as e:
            detail = e.stderr.decode("utf-8", errors="ignore").strip() if e.stderr else ""
            raise LocalIOError(f"{tool} failed ({e.returncode}): {detail}") from e
        except (OSError, subprocess.TimeoutExpired) as e:
            raise LocalIOError(f"{tool}: {e}") from e
        logger.info(f"Copied {len(text)} chars to clipboard with {tool}")
