"""Locating and running the SoX command-line programs."""

import asyncio
import logging
import shutil
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Sequence

from ..errors import LocalIOError, MissingDependencyError

logger = logging.getLogger(__name__)

SOX_PACKAGE = "SoX"
SOX_INSTALL_HINTS: List[str] = [
    "macOS:  brew install sox",
    "Linux:  sudo apt-get install sox",
]


def require_program(name: str) -> str:
    """Return the absolute path of a SoX program or raise MissingDependencyError."""
    path = shutil.which(name)
    if path is None:
        raise MissingDependencyError(f"{name} ({SOX_PACKAGE}) not found", SOX_INSTALL_HINTS)
    return path


@dataclass
class ToolResult:
    """Exit status and decoded output of one external program run."""
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def output(self) -> str:
        return (self.stdout + self.stderr).strip()


ToolRunner = Callable[[Sequence[str]], Awaitable[ToolResult]]


async def run_tool(args: Sequence[str]) -> ToolResult:
    """Run a SoX program to completion and capture its output.

    Args:
        args: Program name followed by its arguments

    Returns:
        ToolResult with the exit status and decoded stdout/stderr

    Raises:
        MissingDependencyError: If the program is not on the PATH
        LocalIOError: If the program cannot be started
    """
    program = require_program(args[0])
    logger.debug(f"Running: {' '.join(args)}")
    try:
        proc = await asyncio.create_subprocess_exec(
            program, *args[1:],
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise LocalIOError(f"starting {args[0]}: {e}") from e

    try:
        stdout, stderr = await proc.communicate()
    except asyncio.CancelledError:
        if proc.returncode is None:
            proc.kill()
            await proc.wait()
        raise

    return ToolResult(
        returncode=proc.returncode,
        stdout=stdout.decode("utf-8", errors="ignore"),
        stderr=stderr.decode("utf-8", errors="ignore"),
    )
