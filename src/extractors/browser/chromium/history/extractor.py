"""
Chromium History Extractor

Extracts AI tool visits from Chromium-based browsers (Chrome, Edge). Both
browsers share the History database schema, so one extractor serves both;
only the browser identity (and with it the profile roots) differs.

History schema used:
    urls(url, title, visit_count, last_visit_time)

``last_visit_time`` is a WebKit timestamp (microseconds since 1601-01-01).
"""

from __future__ import annotations

from typing import Optional

from core.enums import Browser

from ....base import BaseHistoryExtractor, HistoryVisit, parse_int
from ...._shared.sqlite_helpers import Row

HISTORY_QUERY = """
    SELECT url, title, visit_count, last_visit_time
    FROM urls
    WHERE last_visit_time IS NOT NULL AND last_visit_time > 0
    ORDER BY last_visit_time DESC
"""


class ChromiumHistoryExtractor(BaseHistoryExtractor):
    """History extractor for a Chromium-family browser."""

    history_query = HISTORY_QUERY

    def __init__(self, browser: Browser = Browser.CHROME, **kwargs) -> None:
        if browser not in Browser.chromium_browsers():
            raise ValueError(f"{browser} is not a Chromium browser")
        self.browser = browser
        super().__init__(**kwargs)

    def row_to_visit(self, row: Row) -> Optional[HistoryVisit]:
        return HistoryVisit(
            url=row.get("url", ""),
            title=row.get("title", ""),
            visit_count=parse_int(row.get("visit_count", "")),
            raw_timestamp=row.get("last_visit_time"),
        )
