"""
Browser extractors organized by browser family.

Structure:
    browser/
    ├── chromium/    # Chrome, Edge (Blink engine)
    ├── firefox/     # Firefox (Gecko engine)
    └── safari/      # Safari (WebKit engine, macOS only)

Usage:
    from extractors.browser.chromium import ChromiumHistoryExtractor
"""

from . import chromium
from . import firefox
from . import safari

__all__ = ['chromium', 'firefox', 'safari']
