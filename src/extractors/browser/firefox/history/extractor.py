"""
Firefox History Extractor

Extracts AI tool visits from Firefox places.sqlite.

History schema used:
    moz_places(url, title, visit_count, last_visit_date)

``last_visit_date`` is a PRTime timestamp (microseconds since 1970-01-01).
``place:`` URLs are saved searches and smart bookmarks, not page visits.
"""

from __future__ import annotations

from typing import Optional

from core.enums import Browser

from ....base import BaseHistoryExtractor, HistoryVisit, parse_int
from ...._shared.sqlite_helpers import Row

INTERNAL_SCHEME = "place:"

HISTORY_QUERY = """
    SELECT url, title, visit_count, last_visit_date
    FROM moz_places
    WHERE last_visit_date IS NOT NULL AND last_visit_date > 0
      AND url NOT LIKE 'place:%'
    ORDER BY last_visit_date DESC
"""


class FirefoxHistoryExtractor(BaseHistoryExtractor):
    """History extractor for Firefox profiles."""

    browser = Browser.FIREFOX
    history_query = HISTORY_QUERY

    def row_to_visit(self, row: Row) -> Optional[HistoryVisit]:
        url = row.get("url", "")
        if url.lower().startswith(INTERNAL_SCHEME):
            return None
        return HistoryVisit(
            url=url,
            title=row.get("title", ""),
            visit_count=parse_int(row.get("visit_count", "")),
            raw_timestamp=row.get("last_visit_date"),
        )
