"""
Chromium browser family extractors.

Covers: Chrome and Edge.

All Chromium browsers share:
- Same SQLite schema for History
- Same profile structure (User Data/Default, Profile 1, etc.)
- Same timestamp format (WebKit microseconds since 1601-01-01)
"""

from .history import ChromiumHistoryExtractor

__all__ = ["ChromiumHistoryExtractor"]
