"""CSV rendering of a ScanReport: one row per finding."""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import List

from core.logging import get_logger
from core.models import ScanReport

from .dates import format_iso

LOGGER = get_logger("reports.csv_export")

CSV_HEADERS: List[str] = [
    "Machine",
    "ScanTime",
    "Username",
    "Browser",
    "Profile",
    "Tool",
    "Category",
    "Url",
    "Title",
    "Timestamp",
]


def _write_rows(report: ScanReport, handle) -> None:
    writer = csv.writer(handle, lineterminator="\r\n")
    writer.writerow(CSV_HEADERS)
    scan_time = format_iso(report.scan_time)
    for finding in report.findings:
        writer.writerow(
            [
                report.machine,
                scan_time,
                finding.username,
                finding.browser,
                finding.profile,
                finding.tool,
                finding.category,
                finding.url,
                finding.title,
                format_iso(finding.timestamp) or "",
            ]
        )


def render_csv(report: ScanReport) -> str:
    """CSV text; header only when the report holds no findings."""
    buffer = io.StringIO()
    _write_rows(report, buffer)
    return buffer.getvalue()


def write_csv(report: ScanReport, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as handle:
        _write_rows(report, handle)
    LOGGER.info("Wrote CSV report: %s (%d rows)", path, len(report.findings))
    return path
