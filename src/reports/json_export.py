"""JSON rendering of a ScanReport."""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict

from core.logging import get_logger
from core.models import Finding, ScanReport

from .dates import format_iso

LOGGER = get_logger("reports.json_export")


def finding_to_dict(finding: Finding) -> Dict[str, Any]:
    return {
        "url": finding.url,
        "title": finding.title,
        "tool": finding.tool,
        "category": finding.category,
        "timestamp": format_iso(finding.timestamp),
        "username": finding.username,
        "profile": finding.profile,
    }


def report_to_dict(report: ScanReport) -> Dict[str, Any]:
    """
    Build the exported document.

    Browsers appear in scan order; a failed browser is present with an empty
    finding list and its message in ``errors``.
    """
    return {
        "machine": report.machine,
        "scan_time": format_iso(report.scan_time),
        "days_back": report.days_back,
        "all_users": report.all_users,
        "summary": asdict(report.summary),
        "errors": list(report.errors),
        "warnings": list(report.warnings),
        "browsers": {
            browser: {"findings": [finding_to_dict(f) for f in findings]}
            for browser, findings in report.results.items()
        },
    }


def render_json(report: ScanReport, indent: int = 2) -> str:
    return json.dumps(report_to_dict(report), indent=indent, ensure_ascii=False)


def write_json(report: ScanReport, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_json(report), encoding="utf-8")
    LOGGER.info("Wrote JSON report: %s", path)
    return path
