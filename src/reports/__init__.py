"""Reports module - renderers of a ScanReport.

This module provides:
- JSON export (json_export.py)
- CSV export (csv_export.py)
- Markdown export with Jinja2 templates (markdown_export.py, templates/)
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Iterable, List

from core.enums import ExportFormat
from core.logging import get_logger
from core.models import ScanReport

from .csv_export import render_csv, write_csv
from .json_export import render_json, write_json
from .markdown_export import render_markdown, write_markdown
from .paths import report_basename

LOGGER = get_logger("reports")

WRITERS: Dict[ExportFormat, Callable[[ScanReport, Path], Path]] = {
    ExportFormat.JSON: write_json,
    ExportFormat.CSV: write_csv,
    ExportFormat.MARKDOWN: write_markdown,
}


def write_report(report: ScanReport, output_dir: Path, formats: Iterable[ExportFormat]) -> List[Path]:
    """
    Write the report in each requested format.

    Files are named ``prompttrail_<machine>_<yyyymmdd_HHMMSS>.<ext>``.

    Returns:
        Written paths in request order (duplicates written once)
    """
    output_dir = Path(output_dir)
    base = report_basename(report.machine, report.scan_time)
    written: List[Path] = []
    for fmt in dict.fromkeys(ExportFormat(f) for f in formats):
        path = output_dir / f"{base}.{fmt.value}"
        written.append(WRITERS[fmt](report, path))
    return written


__all__ = [
    "WRITERS",
    "render_csv",
    "render_json",
    "render_markdown",
    "write_csv",
    "write_json",
    "write_markdown",
    "write_report",
]
