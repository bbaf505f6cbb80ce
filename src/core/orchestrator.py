"""
Scan orchestrator.

Runs one history extractor per requested browser and aggregates the findings
into a ScanReport. A failure inside one browser never aborts the scan: it is
recorded as ``"<Browser>: <message>"`` and that browser contributes an empty
finding list.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Iterable, List, Optional, Sequence

from core.enums import Browser
from core.logging import get_logger
from core.models import ScanReport, ToolPattern
from core.platform import is_elevated, machine_name
from core.timestamps import format_duration, utc_now

from extractors._shared.profile_locator import ProfileLocator
from extractors._shared.sqlite_helpers import DatabaseReader
from extractors.extractor_registry import ExtractorRegistry

LOGGER = get_logger("core.orchestrator")

ALL_USERS_ADVISORY = (
    "Scanning all users without administrator/root privileges; "
    "other users' browser data may be inaccessible and silently skipped."
)


class ScanOrchestrator:
    """
    Drives a single scan pass.

    Collaborators are injected so tests can use a stub registry, a fixed
    clock or a temporary filesystem layout:

        orchestrator = ScanOrchestrator(
            registry=registry,
            locator=ProfileLocator(LinuxLayout(home_root=tmp_path)),
            clock=lambda: fixed_now,
            elevated=lambda: True,
        )
        report = orchestrator.scan([Browser.CHROME], days_back=30)
    """

    def __init__(
        self,
        *,
        registry: Optional[ExtractorRegistry] = None,
        locator: Optional[ProfileLocator] = None,
        reader: Optional[DatabaseReader] = None,
        clock: Optional[Callable[[], datetime]] = None,
        elevated: Optional[Callable[[], bool]] = None,
        machine: Optional[str] = None,
        patterns: Optional[Sequence[ToolPattern]] = None,
    ) -> None:
        self.registry = registry or ExtractorRegistry()
        self.locator = locator
        self.reader = reader
        self.clock = clock or utc_now
        self.elevated = elevated or is_elevated
        self.machine = machine
        self.patterns = patterns

    def scan(
        self,
        browsers: Iterable[Browser],
        days_back: int,
        all_users: bool = False,
    ) -> ScanReport:
        """
        Scan the requested browsers.

        Args:
            browsers: Browsers to scan; duplicates are ignored, order is kept
            days_back: Day-window; visits older than now - days_back are dropped
            all_users: Scan every local account instead of the invoking user

        Returns:
            ScanReport with one entry per requested browser (empty on failure)
        """
        if days_back <= 0:
            raise ValueError(f"days_back must be positive, got {days_back}")

        scan_time = self.clock()
        report = ScanReport(
            machine=self.machine or machine_name(),
            scan_time=scan_time,
            days_back=days_back,
            all_users=all_users,
        )

        if all_users and not self.elevated():
            LOGGER.warning(ALL_USERS_ADVISORY)
            report.warnings.append(ALL_USERS_ADVISORY)

        locator = self.locator or ProfileLocator()
        reader = self.reader or DatabaseReader()

        for browser in _unique(browsers):
            name = browser.display_name
            LOGGER.info("Scanning %s", name)
            try:
                extractor = self.registry.create(
                    browser,
                    locator=locator,
                    reader=reader,
                    clock=lambda: scan_time,
                    patterns=self.patterns,
                )
                report.results[name] = list(extractor.extract(days_back, all_users))
            except Exception as exc:
                LOGGER.error("%s extraction failed: %s", name, exc, exc_info=True)
                report.errors.append(f"{name}: {exc}")
                report.results[name] = []

        summary = report.summary
        elapsed = (self.clock() - scan_time).total_seconds()
        LOGGER.info(
            "Scan complete in %s: %d finding(s), %d unique tool(s), %d browser(s), %d error(s)",
            format_duration(elapsed), summary.total_findings, summary.unique_tools,
            summary.browsers_scanned, len(report.errors),
        )
        return report


def _unique(browsers: Iterable[Browser]) -> List[Browser]:
    ordered: List[Browser] = []
    for browser in browsers:
        if browser not in ordered:
            ordered.append(browser)
    return ordered
