"""Parsing SoX progress meters and rendering them as a glyph bar."""

import math
from typing import Optional, Tuple

FILLED_GLYPH = "█"
EMPTY_GLYPH = "░"

# Characters SoX uses inside its ASCII VU meter.
_BAR_GLYPHS = frozenset(" =-!|")


def _clamp(level: float) -> float:
    if math.isnan(level):
        return 0.0
    return max(0.0, min(1.0, level))


def _parse_decibels(text: str) -> Optional[float]:
    if text.startswith("-inf"):
        return 0.0
    if not text.endswith("dB"):
        return None
    try:
        db = float(text[:-2].strip())
    except ValueError:
        return None
    if math.isnan(db):
        return None
    if db > 0:
        return 1.0
    return _clamp(10 ** (db / 20.0))


def _parse_ascii_bar(inner: str) -> Optional[float]:
    if "|" not in inner or not set(inner) <= _BAR_GLYPHS:
        return None
    channels = inner.split("|")
    if len(channels) != 2:
        return None
    levels = [
        sum(1 for ch in half if ch != " ") / len(half)
        for half in channels
        if half
    ]
    if not levels:
        return None
    return _clamp(max(levels))


def _parse_meter(inner: str) -> Optional[float]:
    text = inner.strip()
    if not text:
        return None
    level = _parse_decibels(text)
    if level is not None:
        return level
    return _parse_ascii_bar(inner)


def parse_volume(line: str) -> Tuple[float, bool]:
    """Extract a linear level (0.0-1.0) from one line of SoX progress output.

    Understands the decibel form ``[ -3.5dB]`` / ``[ -inf dB]`` and the
    dual-channel ASCII meter ``[===   |===   ]``. The rightmost bracket pair
    holding meter content wins, so other bracketed fields (such as the
    remaining-time counter) are skipped.

    Returns:
        (level, found); found is False when the line carries no meter
    """
    end = line.rfind("]")
    while end >= 0:
        start = line.rfind("[", 0, end)
        if start < 0:
            break
        level = _parse_meter(line[start + 1:end])
        if level is not None:
            return level, True
        end = line.rfind("]", 0, end)
    return 0.0, False


def render_bar(level: float, width: int) -> str:
    """Render ``level`` as exactly ``width`` glyphs, filled ones first."""
    if width <= 0:
        return ""
    filled = int(math.floor(_clamp(level) * width + 0.5))
    return FILLED_GLYPH * filled + EMPTY_GLYPH * (width - filled)
