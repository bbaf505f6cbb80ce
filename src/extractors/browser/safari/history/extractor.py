"""
Safari History Extractor

Extracts AI tool visits from Safari History.db (macOS only).

Safari stores history in two tables:
- history_items: one row per URL, with an aggregate visit_count
- history_visits: one row per visit, with the page title at that time

``visit_time`` is a Cocoa timestamp (seconds since 2001-01-01). The query
returns visits newest first; only the first (latest) visit of each history
item is kept, so an item produces at most one finding.
"""

from __future__ import annotations

from typing import List, Optional, Set

from core.enums import Browser

from ....base import BaseHistoryExtractor, HistoryVisit, parse_int
from ...._shared.sqlite_helpers import Row

HISTORY_QUERY = """
    SELECT hi.id AS item_id, hi.url, hi.visit_count, hv.title, hv.visit_time
    FROM history_visits hv
    JOIN history_items hi ON hv.history_item = hi.id
    WHERE hv.visit_time IS NOT NULL AND hv.visit_time > 0
    ORDER BY hv.visit_time DESC
"""


class SafariHistoryExtractor(BaseHistoryExtractor):
    """History extractor for Safari."""

    browser = Browser.SAFARI
    history_query = HISTORY_QUERY

    def row_to_visit(self, row: Row) -> Optional[HistoryVisit]:
        return HistoryVisit(
            url=row.get("url", ""),
            title=row.get("title", ""),
            visit_count=parse_int(row.get("visit_count", "")),
            raw_timestamp=row.get("visit_time"),
        )

    def iter_visits(self, rows: List[Row]) -> List[HistoryVisit]:
        seen: Set[str] = set()
        latest: List[Row] = []
        for row in rows:
            item_id = row.get("item_id") or row.get("url", "")
            if item_id in seen:
                continue
            seen.add(item_id)
            latest.append(row)
        return super().iter_visits(latest)
