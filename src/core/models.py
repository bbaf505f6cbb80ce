"""
Typed records shared by the scan pipeline.

ToolPattern, ProfileLocation and Finding are frozen: once a Finding leaves an
extractor nothing rewrites it. ScanReport is filled by the orchestrator during
a single pass and its summary is always derived from the findings it holds.
"""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional


@dataclass(frozen=True, slots=True)
class ToolPattern:
    """One catalog entry: tool name, category and compiled URL rule."""

    name: str
    category: str
    rule: re.Pattern

    def matches(self, url: str) -> bool:
        return bool(self.rule.search(url))


@dataclass(frozen=True, slots=True)
class UserContext:
    """A local account whose browser data may be scanned."""

    username: str
    home: Path
    local_app_data: Optional[Path] = None
    roaming_app_data: Optional[Path] = None


@dataclass(frozen=True, slots=True)
class ProfileLocation:
    """A discovered browser profile and the history database inside it."""

    username: str
    profile_name: str
    history_path: Path

    def exists(self) -> bool:
        """Re-check the history file; it may vanish between discovery and read."""
        try:
            return self.history_path.is_file() and self.history_path.stat().st_size > 0
        except OSError:
            return False


@dataclass(frozen=True, slots=True)
class Finding:
    """A history entry classified as belonging to an AI tool."""

    browser: str
    username: str
    profile: str
    tool: str
    category: str
    url: str
    title: str = ""
    visit_count: int = 0
    timestamp: Optional[datetime] = None


@dataclass(frozen=True, slots=True)
class ScanSummary:
    total_findings: int
    unique_tools: int
    tools: List[str]
    categories: Dict[str, int]
    browsers_scanned: int


@dataclass
class ScanReport:
    """
    Result of one orchestrator run.

    Attributes:
        machine: Host name of the scanned endpoint
        scan_time: When the scan started (UTC)
        days_back: Requested day-window
        results: Browser display name -> findings, in scan order
        errors: Report-level error strings ("<Browser>: <message>")
        warnings: Non-fatal advisories raised during the scan
    """

    machine: str
    scan_time: datetime
    days_back: int
    all_users: bool = False
    results: Dict[str, List[Finding]] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def findings(self) -> List[Finding]:
        """All findings across browsers, in browser order."""
        return [finding for findings in self.results.values() for finding in findings]

    @property
    def summary(self) -> ScanSummary:
        """Recomputed from the findings on every access."""
        tools = set()
        categories: Counter = Counter()
        total = 0
        for finding in self.findings:
            total += 1
            tools.add(finding.tool)
            categories[finding.category] += 1

        return ScanSummary(
            total_findings=total,
            unique_tools=len(tools),
            tools=sorted(tools),
            categories=dict(sorted(categories.items())),
            browsers_scanned=len(self.results),
        )
