"""Tests for the scan orchestrator."""

from __future__ import annotations

import logging

import pytest

from core.enums import Browser
from core.models import Finding
from core.orchestrator import ALL_USERS_ADVISORY, ScanOrchestrator
from extractors.extractor_registry import ExtractorRegistry


class StubExtractor:
    """Extractor double returning canned findings."""

    def __init__(self, findings=None, error=None):
        self.findings = findings or []
        self.error = error
        self.calls = []

    def extract(self, days_back, all_users=False):
        self.calls.append((days_back, all_users))
        if self.error is not None:
            raise self.error
        return list(self.findings)


def _chatgpt(browser="Chrome"):
    return Finding(
        browser=browser,
        username="alice",
        profile="Default",
        tool="ChatGPT",
        category="Generative AI",
        url="https://chatgpt.com/c/1",
    )


def _orchestrator(stubs, fixed_clock, elevated=True):
    registry = ExtractorRegistry(factories={})
    for browser, stub in stubs.items():
        registry.register(browser, lambda stub=stub, **kwargs: stub)
    return ScanOrchestrator(
        registry=registry,
        clock=fixed_clock,
        elevated=lambda: elevated,
        machine="WS-01",
    )


class TestScanOrchestrator:
    """Per-browser isolation and report aggregation."""

    def test_failing_browser_does_not_affect_others(self, fixed_clock):
        chrome = StubExtractor([_chatgpt()])
        edge = StubExtractor(error=RuntimeError("database is locked"))
        orchestrator = _orchestrator({Browser.CHROME: chrome, Browser.EDGE: edge}, fixed_clock)

        report = orchestrator.scan([Browser.CHROME, Browser.EDGE], days_back=30)

        assert report.results["Chrome"] == [_chatgpt()]
        assert report.results["Edge"] == []
        assert report.errors == ["Edge: database is locked"]
        assert report.summary.total_findings == 1
        assert report.summary.browsers_scanned == 2

    def test_error_is_logged(self, fixed_clock, caplog):
        edge = StubExtractor(error=RuntimeError("boom"))
        orchestrator = _orchestrator({Browser.EDGE: edge}, fixed_clock)

        with caplog.at_level(logging.ERROR, logger="prompttrail"):
            orchestrator.scan([Browser.EDGE], days_back=30)

        assert any("Edge extraction failed" in r.getMessage() for r in caplog.records)

    def test_unregistered_browser_is_recorded_as_error(self, fixed_clock):
        orchestrator = _orchestrator({}, fixed_clock)
        report = orchestrator.scan([Browser.SAFARI], days_back=30)

        assert report.results == {"Safari": []}
        assert len(report.errors) == 1
        assert report.errors[0].startswith("Safari: ")

    def test_report_metadata(self, fixed_clock, fixed_now):
        orchestrator = _orchestrator({Browser.FIREFOX: StubExtractor()}, fixed_clock)
        report = orchestrator.scan([Browser.FIREFOX], days_back=7, all_users=False)

        assert report.machine == "WS-01"
        assert report.scan_time == fixed_now
        assert report.days_back == 7
        assert report.all_users is False
        assert report.errors == []
        assert report.warnings == []

    def test_arguments_forwarded(self, fixed_clock):
        chrome = StubExtractor()
        orchestrator = _orchestrator({Browser.CHROME: chrome}, fixed_clock)
        orchestrator.scan([Browser.CHROME], days_back=90, all_users=True)
        assert chrome.calls == [(90, True)]

    def test_duplicate_browsers_scanned_once(self, fixed_clock):
        chrome = StubExtractor([_chatgpt()])
        orchestrator = _orchestrator({Browser.CHROME: chrome}, fixed_clock)

        report = orchestrator.scan([Browser.CHROME, Browser.CHROME], days_back=30)

        assert len(chrome.calls) == 1
        assert list(report.results) == ["Chrome"]

    def test_results_keep_request_order(self, fixed_clock):
        stubs = {b: StubExtractor() for b in (Browser.CHROME, Browser.FIREFOX, Browser.EDGE)}
        orchestrator = _orchestrator(stubs, fixed_clock)
        report = orchestrator.scan([Browser.FIREFOX, Browser.EDGE, Browser.CHROME], days_back=30)
        assert list(report.results) == ["Firefox", "Edge", "Chrome"]

    def test_invalid_days_back(self, fixed_clock):
        orchestrator = _orchestrator({}, fixed_clock)
        with pytest.raises(ValueError):
            orchestrator.scan([Browser.CHROME], days_back=0)


class TestAllUsersAdvisory:
    def test_warning_without_elevation(self, fixed_clock, caplog):
        orchestrator = _orchestrator({Browser.CHROME: StubExtractor()}, fixed_clock, elevated=False)

        with caplog.at_level(logging.WARNING, logger="prompttrail"):
            report = orchestrator.scan([Browser.CHROME], days_back=30, all_users=True)

        assert report.warnings == [ALL_USERS_ADVISORY]
        assert report.errors == []
        assert any(ALL_USERS_ADVISORY in r.getMessage() for r in caplog.records)

    def test_no_warning_when_elevated(self, fixed_clock):
        orchestrator = _orchestrator({Browser.CHROME: StubExtractor()}, fixed_clock, elevated=True)
        report = orchestrator.scan([Browser.CHROME], days_back=30, all_users=True)
        assert report.warnings == []

    def test_no_warning_for_current_user_scan(self, fixed_clock):
        orchestrator = _orchestrator({Browser.CHROME: StubExtractor()}, fixed_clock, elevated=False)
        report = orchestrator.scan([Browser.CHROME], days_back=30, all_users=False)
        assert report.warnings == []


class TestEndToEnd:
    """Real extractors against fake profile trees."""

    def test_chrome_and_firefox(self, fixed_clock, fixed_now, linux_locator,
                                chrome_path, firefox_path, chromium_history, firefox_places):
        chromium_history(chrome_path("alice"), [
            {"url": "https://chatgpt.com/c/abc", "title": "ChatGPT", "visited": fixed_now},
            {"url": "https://www.google.com/", "title": "Google", "visited": fixed_now},
        ])
        firefox_places(firefox_path("bob"), [
            {"url": "https://claude.ai/chat/1", "title": "Claude", "visited": fixed_now},
        ])

        orchestrator = ScanOrchestrator(
            locator=linux_locator,
            clock=fixed_clock,
            elevated=lambda: True,
            machine="WS-01",
        )
        report = orchestrator.scan(
            [Browser.CHROME, Browser.EDGE, Browser.FIREFOX], days_back=30, all_users=True
        )

        assert report.errors == []
        assert [f.tool for f in report.results["Chrome"]] == ["ChatGPT"]
        assert report.results["Edge"] == []
        assert [(f.tool, f.username) for f in report.results["Firefox"]] == [("Claude", "bob")]
        assert report.summary.tools == ["ChatGPT", "Claude"]
