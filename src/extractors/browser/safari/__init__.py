"""
Safari Browser Family Extractors.

Safari is Apple's web browser, exclusive to macOS. History lives in
~/Library/Safari/History.db with Cocoa timestamps (seconds since 2001-01-01).
Reading it requires Full Disk Access for the scanning process.
"""

from .history import SafariHistoryExtractor

__all__ = ["SafariHistoryExtractor"]
