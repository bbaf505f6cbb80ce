"""
Core Enumerations

Centralized enum definitions for consistent typing across the codebase.
Using StrEnum (Python 3.11+) for string-based enums that serialize naturally.
"""

from enum import StrEnum


class Browser(StrEnum):
    """Supported browser identifiers."""

    CHROME = "chrome"
    EDGE = "edge"
    FIREFOX = "firefox"
    SAFARI = "safari"

    @property
    def display_name(self) -> str:
        """Name used in reports and Finding records."""
        return _DISPLAY_NAMES[self]

    @property
    def engine(self) -> "BrowserEngine":
        return _ENGINES[self]

    @classmethod
    def chromium_browsers(cls) -> tuple["Browser", ...]:
        """Return browsers using Chromium engine (shared DB schemas)."""
        return (cls.CHROME, cls.EDGE)

    @classmethod
    def all_browsers(cls) -> tuple["Browser", ...]:
        """Return all supported browsers."""
        return tuple(cls)

    @classmethod
    def parse(cls, value: str) -> "Browser":
        """Resolve an identifier or display name ("edge", "Edge") to a Browser."""
        key = (value or "").strip().lower()
        for browser in cls:
            if key in (browser.value, browser.display_name.lower()):
                return browser
        raise ValueError(f"Unknown browser: {value!r}")


class BrowserEngine(StrEnum):
    """Browser rendering engine types."""

    CHROMIUM = "chromium"
    GECKO = "gecko"      # Firefox
    WEBKIT = "webkit"    # Safari


class ToolCategory(StrEnum):
    """AI tool taxonomy used by the pattern catalog."""

    GENERATIVE = "Generative AI"
    CODE = "Code AI"
    IMAGE = "Image AI"
    AUDIO_VIDEO = "Audio/Video AI"
    BUSINESS = "Business AI"
    RESEARCH = "Research AI"


class ReadStatus(StrEnum):
    """Outcome of a single history database read."""

    OK = "ok"
    EMPTY = "empty"      # Readable, zero rows (or nothing to read)
    FAILED = "failed"    # Copy, engine or query failure


class ExportFormat(StrEnum):
    """Report file formats."""

    JSON = "json"
    CSV = "csv"
    MARKDOWN = "md"


_DISPLAY_NAMES = {
    Browser.CHROME: "Chrome",
    Browser.EDGE: "Edge",
    Browser.FIREFOX: "Firefox",
    Browser.SAFARI: "Safari",
}

_ENGINES = {
    Browser.CHROME: BrowserEngine.CHROMIUM,
    Browser.EDGE: BrowserEngine.CHROMIUM,
    Browser.FIREFOX: BrowserEngine.GECKO,
    Browser.SAFARI: BrowserEngine.WEBKIT,
}
