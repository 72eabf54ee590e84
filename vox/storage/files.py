"""Temporary file management for recordings and segments."""

import logging
import os
import tempfile
from typing import Iterable, Optional

from ..errors import LocalIOError

logger = logging.getLogger(__name__)


def create_temp_file(prefix: str = "vox-", suffix: str = ".wav", directory: Optional[str] = None) -> str:
    """Create an empty private temp file and return its path.

    Raises:
        LocalIOError: If the file cannot be created
    """
    try:
        fd, path = tempfile.mkstemp(prefix=prefix, suffix=suffix, dir=directory)
    except OSError as e:
        raise LocalIOError(f"creating temp file: {e}") from e
    os.close(fd)
    logger.debug(f"Created temp file: {path}")
    return path


def discard_file(path: Optional[str]) -> None:
    """Delete a transient file; a file that is already gone is not an error."""
    if not path:
        return
    try:
        os.remove(path)
        logger.debug(f"Removed temp file: {path}")
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Could not remove {path}: {e}")


def discard_files(paths: Iterable[str]) -> None:
    for path in paths:
        discard_file(path)
