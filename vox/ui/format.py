"""Formatting helpers for history listings."""

from datetime import datetime, timezone
from typing import Optional


def parse_timestamp(ts: str) -> Optional[datetime]:
    try:
        parsed = datetime.fromisoformat(ts.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def relative_time(ts: str, now: Optional[datetime] = None) -> str:
    """Turn an RFC 3339 timestamp into "just now", "5m ago", "3h ago", "2d ago" or "Jan 2"."""
    when = parse_timestamp(ts)
    if when is None:
        return ts
    now = now or datetime.now(timezone.utc)
    seconds = (now - when).total_seconds()

    if seconds < 60:
        return "just now"
    if seconds < 3600:
        return f"{int(seconds // 60)}m ago"
    if seconds < 24 * 3600:
        return f"{int(seconds // 3600)}h ago"
    if seconds < 7 * 24 * 3600:
        return f"{int(seconds // (24 * 3600))}d ago"
    return f"{when.strftime('%b')} {when.day}"


def truncate(text: str, limit: int) -> str:
    """Shorten to ``limit`` characters with "..." and flatten newlines."""
    text = text.replace("\n", " ")
    if len(text) <= limit:
        return text
    return text[:limit - 3] + "..."
