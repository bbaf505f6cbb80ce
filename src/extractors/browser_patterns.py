"""
Shared Browser Patterns

Centralized browser storage locations for the history extractors, so the
profile locator and the extractors cannot drift apart.

Each entry lists, per operating system (``platform.system()`` value), the
profile-storage roots relative to an anchor directory of the user:

- ``home``: the user's home directory
- ``local``: %LOCALAPPDATA% (Windows), defaults to ``<home>/AppData/Local``
- ``roaming``: %APPDATA% (Windows), defaults to ``<home>/AppData/Roaming``

Profile layouts:
- ``chromium``: ``Default`` and ``Profile *`` directories under the root
- ``firefox``: every directory under the profiles root (random prefixes)
- ``safari``: the root itself is the only profile (macOS only)
"""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

from core.enums import Browser

# (anchor, relative path) pairs
BasePath = Tuple[str, str]


BROWSER_PATTERNS: Dict[Browser, Dict[str, Any]] = {
    Browser.CHROME: {
        "profile_layout": "chromium",
        "history_file": "History",
        "base_paths": {
            "Windows": [("local", "Google/Chrome/User Data")],
            "Darwin": [("home", "Library/Application Support/Google/Chrome")],
            "Linux": [
                ("home", ".config/google-chrome"),
                ("home", ".var/app/com.google.Chrome/config/google-chrome"),
            ],
        },
    },
    Browser.EDGE: {
        "profile_layout": "chromium",
        "history_file": "History",
        "base_paths": {
            "Windows": [("local", "Microsoft/Edge/User Data")],
            "Darwin": [("home", "Library/Application Support/Microsoft Edge")],
            "Linux": [
                ("home", ".config/microsoft-edge"),
                ("home", ".var/app/com.microsoft.Edge/config/microsoft-edge"),
            ],
        },
    },
    Browser.FIREFOX: {
        "profile_layout": "firefox",
        "history_file": "places.sqlite",
        "base_paths": {
            "Windows": [("roaming", "Mozilla/Firefox/Profiles")],
            "Darwin": [("home", "Library/Application Support/Firefox/Profiles")],
            "Linux": [
                ("home", ".mozilla/firefox"),
                # Snap and Flatpak packages keep the profile tree elsewhere
                ("home", "snap/firefox/common/.mozilla/firefox"),
                ("home", ".var/app/org.mozilla.firefox/.mozilla/firefox"),
            ],
        },
    },
    Browser.SAFARI: {
        "profile_layout": "safari",
        "history_file": "History.db",
        "base_paths": {
            "Darwin": [("home", "Library/Safari")],
        },
    },
}


def get_base_paths(browser: Browser, system: str) -> List[BasePath]:
    """
    Get profile-storage roots for a browser on an operating system.

    Args:
        browser: Browser identifier
        system: ``platform.system()`` value ("Windows", "Darwin", "Linux")

    Returns:
        List of (anchor, relative path) pairs; empty when the browser does not
        exist on that platform
    """
    if browser not in BROWSER_PATTERNS:
        return []
    return list(BROWSER_PATTERNS[browser]["base_paths"].get(system, []))


def get_history_filename(browser: Browser) -> str:
    return BROWSER_PATTERNS[browser]["history_file"]


def get_profile_layout(browser: Browser) -> str:
    return BROWSER_PATTERNS[browser]["profile_layout"]
