"""
Markdown rendering of a ScanReport.

The layout lives in ``templates/report.md.j2``; this module prepares the
view model (findings grouped by browser, then by category) and registers
the table-cell filters.
"""

from __future__ import annotations

from collections import OrderedDict
from pathlib import Path
from typing import Any, Dict, List

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from core.app_version import get_app_version
from core.logging import get_logger
from core.models import Finding, ScanReport

from .dates import format_datetime
from .paths import get_templates_dir

LOGGER = get_logger("reports.markdown_export")

TEMPLATE_NAME = "report.md.j2"
URL_DISPLAY_LIMIT = 50
URL_TRUNCATED_LENGTH = 47


def truncate_url(url: str, limit: int = URL_DISPLAY_LIMIT) -> str:
    """URLs longer than the limit keep their first 47 characters plus '...'."""
    if len(url) <= limit:
        return url
    return url[:URL_TRUNCATED_LENGTH] + "..."


def md_cell(value: Any) -> str:
    """Make a value safe for a Markdown table cell."""
    text = "" if value is None else str(value)
    return text.replace("\\", "\\\\").replace("|", "\\|").replace("\r", " ").replace("\n", " ")


def _group_by_category(findings: List[Finding]) -> Dict[str, List[Finding]]:
    grouped: Dict[str, List[Finding]] = OrderedDict()
    for finding in findings:
        grouped.setdefault(finding.category, []).append(finding)
    return grouped


def _build_environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(get_templates_dir()),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )
    env.filters["truncate_url"] = truncate_url
    env.filters["md_cell"] = md_cell
    env.filters["format_datetime"] = format_datetime
    return env


def render_markdown(report: ScanReport) -> str:
    template = _build_environment().get_template(TEMPLATE_NAME)
    browsers = [
        {"name": name, "categories": _group_by_category(findings), "count": len(findings)}
        for name, findings in report.results.items()
    ]
    return template.render(
        report=report,
        summary=report.summary,
        browsers=browsers,
        version=get_app_version(),
    )


def write_markdown(report: ScanReport, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_markdown(report), encoding="utf-8")
    LOGGER.info("Wrote Markdown report: %s", path)
    return path
