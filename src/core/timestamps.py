"""
Generic timestamp helpers shared by the orchestrator, CLI and reports.

Browser-specific epoch conversions live in extractors/_shared/timestamps.py.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Union


def utc_now() -> datetime:
    """Current UTC time without microseconds."""
    return datetime.now(tz=timezone.utc).replace(microsecond=0)


def to_iso(dt: Optional[datetime]) -> Optional[str]:
    """Render an aware datetime as ISO 8601 (naive values are assumed UTC)."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.isoformat()


def format_duration(seconds: Union[int, float]) -> str:
    """
    Format duration in seconds to human-readable string.

    Example:
        >>> format_duration(3661)
        '1h 1m 1s'
    """
    if seconds < 0:
        return "0s"

    hours, remainder = divmod(int(seconds), 3600)
    minutes, secs = divmod(remainder, 60)

    parts = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    if secs > 0 or not parts:
        parts.append(f"{secs}s")

    return " ".join(parts)
