"""
Extractor registry: one history extractor factory per browser.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from core.enums import Browser
from core.logging import get_logger

from .base import BaseHistoryExtractor
from .exceptions import ExtractionFailedError
from .browser.chromium import ChromiumHistoryExtractor
from .browser.firefox import FirefoxHistoryExtractor
from .browser.safari import SafariHistoryExtractor

LOGGER = get_logger("extractors.registry")

ExtractorFactory = Callable[..., BaseHistoryExtractor]


def _chromium_factory(browser: Browser) -> ExtractorFactory:
    def factory(**kwargs) -> BaseHistoryExtractor:
        return ChromiumHistoryExtractor(browser, **kwargs)
    return factory


DEFAULT_FACTORIES: Dict[Browser, ExtractorFactory] = {
    Browser.CHROME: _chromium_factory(Browser.CHROME),
    Browser.EDGE: _chromium_factory(Browser.EDGE),
    Browser.FIREFOX: FirefoxHistoryExtractor,
    Browser.SAFARI: SafariHistoryExtractor,
}


class ExtractorRegistry:
    """
    Central registry of history extractors.

    Factories take the shared collaborators (locator, reader, clock, patterns)
    as keyword arguments, so every extractor built for one scan reads through
    the same DatabaseReader and clock.

    Usage:
        registry = ExtractorRegistry()
        chrome = registry.create(Browser.CHROME, reader=reader)

        # Tests swap one browser for a stub
        registry.register(Browser.EDGE, lambda **kw: ExplodingExtractor())
    """

    def __init__(self, factories: Optional[Dict[Browser, ExtractorFactory]] = None):
        self._factories: Dict[Browser, ExtractorFactory] = dict(
            DEFAULT_FACTORIES if factories is None else factories
        )

    def register(self, browser: Browser, factory: ExtractorFactory) -> None:
        if browser in self._factories:
            LOGGER.debug("Replacing extractor factory for %s", browser.display_name)
        self._factories[browser] = factory

    def browsers(self) -> List[Browser]:
        """Registered browsers in declaration order."""
        return [b for b in Browser.all_browsers() if b in self._factories]

    def create(self, browser: Browser, **kwargs) -> BaseHistoryExtractor:
        """
        Build the extractor for a browser.

        Raises:
            ExtractionFailedError: If no extractor is registered for the browser
        """
        try:
            factory = self._factories[browser]
        except KeyError:
            raise ExtractionFailedError(f"No extractor registered for {browser.display_name}") from None
        return factory(**kwargs)
