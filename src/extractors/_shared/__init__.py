"""
Shared utilities for browser extractors.

This package provides common functionality used across multiple extractors:
- timestamps: Browser timestamp format conversions (WebKit, PRTime, Cocoa)
- sqlite_helpers: Copy-then-read SQLite access and query engines
- path_utils: Platform layouts, account and profile path helpers
- profile_locator: History database discovery per browser and user
"""
