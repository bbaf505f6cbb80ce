"""
Timestamp conversion utilities for browser extractors.

These are PURE FUNCTIONS with no side effects. Each one maps a browser
family's native history timestamp to an aware UTC datetime and fails soft:
malformed, negative or out-of-range input yields None instead of raising.

Formats supported:
- WebKit: Microseconds since 1601-01-01 (Chromium browsers: Chrome, Edge)
- PRTime: Microseconds since 1970-01-01 (Firefox places.sqlite)
- Cocoa: Seconds (fractional) since 2001-01-01 (Safari History.db)

Values may arrive as int, float or str (the CLI query engine returns text).
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional, Union

from core.enums import BrowserEngine

# Constants for timestamp epoch calculations
WEBKIT_EPOCH = datetime(1601, 1, 1, tzinfo=timezone.utc)
UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
COCOA_EPOCH = datetime(2001, 1, 1, tzinfo=timezone.utc)
WEBKIT_EPOCH_DIFF = 11644473600  # Seconds between 1601-01-01 and 1970-01-01
COCOA_EPOCH_DIFF = 978307200     # Seconds between 1970-01-01 and 2001-01-01

RawTimestamp = Union[int, float, str, None]


def _coerce_number(value: RawTimestamp) -> Optional[Union[int, float]]:
    """Parse a raw column value into a finite number, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = value
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = int(text)
        except ValueError:
            try:
                number = float(text)
            except ValueError:
                return None
    if isinstance(number, float) and not math.isfinite(number):
        return None
    return number


def _offset(epoch: datetime, value: RawTimestamp, unit: str) -> Optional[datetime]:
    number = _coerce_number(value)
    if number is None or number < 0:
        return None
    try:
        return epoch + timedelta(**{unit: number})
    except (OverflowError, ValueError):
        return None


def webkit_to_datetime(microseconds: RawTimestamp) -> Optional[datetime]:
    """
    Convert WebKit timestamp to datetime.

    WebKit timestamps are microseconds since 1601-01-01 00:00:00 UTC.
    Used by Chromium-based browsers (Chrome, Edge).

    Args:
        microseconds: WebKit timestamp (microseconds since 1601)

    Returns:
        datetime in UTC, or None if invalid

    Example:
        >>> webkit_to_datetime(13349245200000000)
        datetime.datetime(2024, 1, 9, 3, 40, tzinfo=datetime.timezone.utc)
    """
    return _offset(WEBKIT_EPOCH, microseconds, "microseconds")


def prtime_to_datetime(microseconds: RawTimestamp) -> Optional[datetime]:
    """
    Convert PRTime timestamp to datetime.

    PRTime timestamps are microseconds since 1970-01-01 00:00:00 UTC.
    Used by Firefox (moz_* tables).

    Args:
        microseconds: PRTime timestamp (microseconds since 1970)

    Returns:
        datetime in UTC, or None if invalid
    """
    return _offset(UNIX_EPOCH, microseconds, "microseconds")


def cocoa_to_datetime(seconds: RawTimestamp) -> Optional[datetime]:
    """
    Convert Cocoa/Core Data timestamp to datetime.

    Cocoa timestamps are seconds since 2001-01-01 00:00:00 UTC.
    Used by Safari and macOS applications.

    Args:
        seconds: Cocoa timestamp (seconds since 2001, may be fractional)

    Returns:
        datetime in UTC, or None if invalid
    """
    return _offset(COCOA_EPOCH, seconds, "seconds")


NORMALIZERS: Dict[BrowserEngine, Callable[[RawTimestamp], Optional[datetime]]] = {
    BrowserEngine.CHROMIUM: webkit_to_datetime,
    BrowserEngine.GECKO: prtime_to_datetime,
    BrowserEngine.WEBKIT: cocoa_to_datetime,
}


def get_normalizer(engine: BrowserEngine) -> Callable[[RawTimestamp], Optional[datetime]]:
    """Timestamp normalizer for a browser engine."""
    return NORMALIZERS[engine]
