"""
Base extractor interface for browser history extractors.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Sequence

from core.enums import Browser, ReadStatus
from core.logging import get_logger
from core.models import Finding, ProfileLocation, ToolPattern
from core.timestamps import utc_now

from ._shared.profile_locator import ProfileLocator
from ._shared.sqlite_helpers import DatabaseReader, Row
from ._shared.timestamps import RawTimestamp, get_normalizer
from .ai_patterns import classify_url

LOGGER = get_logger("extractors.base")

Clock = Callable[[], datetime]


@dataclass(slots=True)
class HistoryVisit:
    """One history row in a browser-neutral shape, before classification."""

    url: str
    title: str
    visit_count: int
    raw_timestamp: RawTimestamp


def parse_int(value: str) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return 0


class BaseHistoryExtractor(ABC):
    """
    Base class for browser history extractors.

    Subclasses declare the browser, the history query and how a raw row maps
    to a HistoryVisit; the locate -> read -> classify -> normalize -> window
    pipeline is shared.

    Collaborators are injected so tests can use temporary profile roots, a
    stub reader or a fixed clock:

        extractor = ChromiumHistoryExtractor(
            Browser.CHROME,
            locator=ProfileLocator(LinuxLayout(home_root=tmp_path)),
            clock=lambda: datetime(2024, 3, 1, tzinfo=timezone.utc),
        )
        findings = extractor.extract(days_back=90, all_users=True)
    """

    browser: Browser
    history_query: str = ""

    def __init__(
        self,
        *,
        locator: Optional[ProfileLocator] = None,
        reader: Optional[DatabaseReader] = None,
        clock: Optional[Clock] = None,
        patterns: Optional[Sequence[ToolPattern]] = None,
    ) -> None:
        self.locator = locator or ProfileLocator()
        self.reader = reader or DatabaseReader()
        self.clock = clock or utc_now
        self.patterns = patterns
        self.normalize_timestamp = get_normalizer(self.browser.engine)

    @property
    def name(self) -> str:
        return self.browser.display_name

    @abstractmethod
    def row_to_visit(self, row: Row) -> Optional[HistoryVisit]:
        """
        Map one query row to a HistoryVisit.

        Returns:
            None to drop rows that are not real page visits
        """

    def iter_visits(self, rows: List[Row]) -> List[HistoryVisit]:
        visits = []
        for row in rows:
            visit = self.row_to_visit(row)
            if visit is not None and visit.url:
                visits.append(visit)
        return visits

    def extract(self, days_back: int, all_users: bool = False) -> List[Finding]:
        """
        Extract AI tool findings from every profile of this browser.

        Args:
            days_back: Keep visits newer than now - days_back days
            all_users: Scan every local account instead of the invoking user

        Returns:
            Findings ordered by profile, newest visit first within a profile
        """
        cutoff = self.clock() - timedelta(days=days_back)
        findings: List[Finding] = []

        for location in self.locator.locate_profiles(self.browser, all_users):
            findings.extend(self.extract_profile(location, cutoff))

        LOGGER.info("%s: %d finding(s)", self.name, len(findings))
        return findings

    def extract_profile(self, location: ProfileLocation, cutoff: datetime) -> List[Finding]:
        """Findings for one profile; a read failure yields an empty list."""
        if not location.exists():
            LOGGER.debug("%s profile %s/%s disappeared before read",
                         self.name, location.username, location.profile_name)
            return []

        result = self.reader.query(location.history_path, self.history_query)
        if result.status is not ReadStatus.OK:
            LOGGER.debug("%s profile %s/%s: %s (%s)", self.name, location.username,
                         location.profile_name, result.status, result.reason)
            return []

        findings = []
        for visit in self.iter_visits(result.rows):
            finding = self.classify_visit(visit, location, cutoff)
            if finding is not None:
                findings.append(finding)
        return findings

    def classify_visit(
        self,
        visit: HistoryVisit,
        location: ProfileLocation,
        cutoff: datetime,
    ) -> Optional[Finding]:
        pattern = classify_url(visit.url, self.patterns)
        if pattern is None:
            return None

        timestamp = self.normalize_timestamp(visit.raw_timestamp)
        if timestamp is not None and timestamp < cutoff:
            return None

        return Finding(
            browser=self.name,
            username=location.username,
            profile=location.profile_name,
            tool=pattern.name,
            category=pattern.category,
            url=visit.url,
            title=visit.title,
            visit_count=visit.visit_count,
            timestamp=timestamp,
        )
