"""Exact audio duration via soxi."""

import logging

from ..errors import LocalIOError
from .tools import ToolRunner, run_tool

logger = logging.getLogger(__name__)


async def probe_duration(path: str, runner: ToolRunner = run_tool) -> float:
    """Return the duration of an audio file in seconds using ``soxi -D``.

    Raises:
        MissingDependencyError: If soxi is not installed
        LocalIOError: If soxi fails or prints something that is not a number
    """
    result = await runner(["soxi", "-D", path])
    if result.returncode != 0:
        detail = result.output or f"exit status {result.returncode}"
        raise LocalIOError(f"soxi -D {path}: {detail}")

    text = result.stdout.strip()
    try:
        duration = float(text)
    except ValueError:
        raise LocalIOError(f"parsing duration {text!r}")

    logger.debug(f"Probed duration of {path}: {duration:.2f}s")
    return duration
