"""Audio capture, probing and chunking on top of the SoX programs."""

from .capture import Recorder, ProgressSplitter
from .chunker import (
    CHUNK_DURATION_SECONDS,
    CHUNK_THRESHOLD_SECONDS,
    chunk_count,
    chunk_file,
    needs_chunking,
)
from .probe import probe_duration
from .tools import ToolResult, require_program, run_tool
from .volume import parse_volume, render_bar

__all__ = [
    'Recorder',
    'ProgressSplitter',
    'CHUNK_DURATION_SECONDS',
    'CHUNK_THRESHOLD_SECONDS',
    'chunk_count',
    'chunk_file',
    'needs_chunking',
    'probe_duration',
    'ToolResult',
    'require_program',
    'run_tool',
    'parse_volume',
    'render_bar',
]
