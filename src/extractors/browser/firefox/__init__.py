"""
Firefox browser family extractors.

Firefox keeps history in places.sqlite inside randomly named profile
directories and uses PRTime timestamps (microseconds since 1970-01-01).
"""

from .history import FirefoxHistoryExtractor

__all__ = ["FirefoxHistoryExtractor"]
