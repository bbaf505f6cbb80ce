"""
Shared date/time formatting helpers for report output.

Keeps the JSON, CSV and Markdown renderers consistent: machine-readable
formats carry ISO 8601, the Markdown table carries a short UTC form.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from core.timestamps import to_iso

DISPLAY_FORMAT = "%Y-%m-%d %H:%M"


def format_iso(value: Optional[datetime]) -> Optional[str]:
    """ISO 8601 string, or None for a missing timestamp."""
    return to_iso(value)


def format_datetime(value: Optional[datetime], fmt: str = DISPLAY_FORMAT) -> str:
    """
    Format a datetime for human-readable report output.

    Args:
        value: Aware or naive (assumed UTC) datetime
        fmt: strftime pattern

    Returns:
        Formatted UTC string with " UTC" suffix, or "" when value is None
    """
    if value is None:
        return ""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(fmt) + " UTC"
