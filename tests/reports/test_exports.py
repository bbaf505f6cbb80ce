"""Tests for the JSON, CSV and Markdown report renderers."""

from __future__ import annotations

import csv
import io
import json
from datetime import datetime, timezone

import pytest

from core.enums import ExportFormat
from core.models import Finding, ScanReport
from reports import write_report
from reports.csv_export import CSV_HEADERS, render_csv, write_csv
from reports.json_export import render_json, write_json
from reports.markdown_export import render_markdown, truncate_url, md_cell

SCAN_TIME = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)
VISITED = datetime(2024, 2, 28, 9, 30, 0, tzinfo=timezone.utc)


def _finding(**overrides):
    values = dict(
        browser="Chrome",
        username="alice",
        profile="Default",
        tool="ChatGPT",
        category="Generative AI",
        url="https://chatgpt.com/c/abc",
        title="ChatGPT",
        visit_count=3,
        timestamp=VISITED,
    )
    values.update(overrides)
    return Finding(**values)


@pytest.fixture
def report():
    report = ScanReport(machine="WS-01", scan_time=SCAN_TIME, days_back=30, all_users=True)
    report.results["Chrome"] = [
        _finding(),
        _finding(tool="Cursor", category="Code AI", url="https://cursor.com/", title="Cursor", timestamp=None),
    ]
    report.results["Edge"] = []
    report.results["Firefox"] = [
        _finding(browser="Firefox", username="bob", profile="abcd.default", tool="Claude",
                 url="https://claude.ai/chat/1", title="Claude"),
    ]
    report.errors.append("Edge: database is locked")
    report.warnings.append("Scanning all users without administrator/root privileges")
    return report


@pytest.fixture
def empty_report():
    return ScanReport(machine="WS-01", scan_time=SCAN_TIME, days_back=7)


class TestJsonExport:
    def test_document_shape(self, report):
        data = json.loads(render_json(report))

        assert data["machine"] == "WS-01"
        assert data["scan_time"] == "2024-03-01T12:00:00+00:00"
        assert data["days_back"] == 30
        assert data["errors"] == ["Edge: database is locked"]
        assert len(data["warnings"]) == 1
        assert list(data["browsers"]) == ["Chrome", "Edge", "Firefox"]
        assert data["browsers"]["Edge"] == {"findings": []}

    def test_finding_fields(self, report):
        finding = json.loads(render_json(report))["browsers"]["Chrome"]["findings"][0]
        assert finding == {
            "url": "https://chatgpt.com/c/abc",
            "title": "ChatGPT",
            "tool": "ChatGPT",
            "category": "Generative AI",
            "timestamp": "2024-02-28T09:30:00+00:00",
            "username": "alice",
            "profile": "Default",
        }

    def test_missing_timestamp_is_null(self, report):
        cursor = json.loads(render_json(report))["browsers"]["Chrome"]["findings"][1]
        assert cursor["timestamp"] is None

    def test_summary_matches_findings(self, report):
        data = json.loads(render_json(report))
        summary = data["summary"]
        exported = {
            (f["tool"], f["category"], f["url"])
            for browser in data["browsers"].values()
            for f in browser["findings"]
        }

        assert summary["total_findings"] == 3
        assert summary["unique_tools"] == 3
        assert summary["tools"] == ["ChatGPT", "Claude", "Cursor"]
        assert summary["categories"] == {"Code AI": 1, "Generative AI": 2}
        assert summary["browsers_scanned"] == 3
        assert exported == {(f.tool, f.category, f.url) for f in report.findings}

    def test_user_tool_url_triples_round_trip(self, report):
        """Every finding comes back as the same {username, tool, url} triple."""
        data = json.loads(render_json(report))
        exported = sorted(
            (f["username"], f["tool"], f["url"])
            for browser in data["browsers"].values()
            for f in browser["findings"]
        )

        assert exported == sorted((f.username, f.tool, f.url) for f in report.findings)
        assert ("bob", "Claude", "https://claude.ai/chat/1") in exported

    def test_write_json(self, report, tmp_path):
        path = write_json(report, tmp_path / "out" / "scan.json")
        assert json.loads(path.read_text(encoding="utf-8"))["machine"] == "WS-01"


class TestCsvExport:
    def test_header_only_without_findings(self, empty_report):
        text = render_csv(empty_report)
        assert text == ",".join(CSV_HEADERS) + "\r\n"
        assert CSV_HEADERS == [
            "Machine", "ScanTime", "Username", "Browser", "Profile",
            "Tool", "Category", "Url", "Title", "Timestamp",
        ]

    def test_one_row_per_finding(self, report):
        rows = list(csv.DictReader(io.StringIO(render_csv(report))))

        assert len(rows) == 3
        assert rows[0] == {
            "Machine": "WS-01",
            "ScanTime": "2024-03-01T12:00:00+00:00",
            "Username": "alice",
            "Browser": "Chrome",
            "Profile": "Default",
            "Tool": "ChatGPT",
            "Category": "Generative AI",
            "Url": "https://chatgpt.com/c/abc",
            "Title": "ChatGPT",
            "Timestamp": "2024-02-28T09:30:00+00:00",
        }
        assert rows[1]["Timestamp"] == ""
        assert rows[2]["Browser"] == "Firefox"

    def test_user_tool_url_triples_round_trip(self, report):
        rows = csv.DictReader(io.StringIO(render_csv(report)))
        exported = sorted((row["Username"], row["Tool"], row["Url"]) for row in rows)
        assert exported == sorted((f.username, f.tool, f.url) for f in report.findings)

    def test_quotes_commas(self, empty_report):
        empty_report.results["Chrome"] = [_finding(title='Chat, "quoted"')]
        rows = list(csv.DictReader(io.StringIO(render_csv(empty_report))))
        assert rows[0]["Title"] == 'Chat, "quoted"'

    def test_write_csv(self, report, tmp_path):
        path = write_csv(report, tmp_path / "scan.csv")
        with path.open(encoding="utf-8", newline="") as handle:
            assert len(list(csv.reader(handle))) == 4


class TestMarkdownExport:
    def test_truncate_url(self):
        short = "https://chatgpt.com/"
        exact = "https://example.com/" + "a" * 30
        long_url = "https://chatgpt.com/c/" + "x" * 60

        assert truncate_url(short) == short
        assert len(exact) == 50 and truncate_url(exact) == exact
        assert truncate_url(long_url) == long_url[:47] + "..."
        assert len(truncate_url(long_url)) == 50

    def test_md_cell_escapes_pipes(self):
        assert md_cell("a|b") == "a\\|b"
        assert md_cell("line\nbreak") == "line break"
        assert md_cell(None) == ""

    def test_sections_and_tables(self, report):
        text = render_markdown(report)

        assert "## Chrome" in text
        assert "## Edge" in text
        assert "## Firefox" in text
        assert "### Generative AI" in text
        assert "### Code AI" in text
        assert "| User | Tool | URL | Timestamp |" in text
        assert "| alice | ChatGPT | https://chatgpt.com/c/abc | 2024-02-28 09:30 UTC |" in text
        assert "No AI tool activity found." in text
        assert "- Edge: database is locked" in text
        assert "- Total findings: 3" in text

    def test_long_url_truncated_in_table(self, empty_report):
        long_url = "https://claude.ai/chat/" + "0123456789" * 6
        empty_report.results["Chrome"] = [_finding(tool="Claude", url=long_url)]

        text = render_markdown(empty_report)

        assert long_url not in text
        assert long_url[:47] + "..." in text

    def test_pipe_in_url_escaped(self, empty_report):
        empty_report.results["Chrome"] = [_finding(url="https://chatgpt.com/?q=a|b")]
        assert "https://chatgpt.com/?q=a\\|b" in render_markdown(empty_report)

    def test_empty_report(self, empty_report):
        text = render_markdown(empty_report)
        assert "- Total findings: 0" in text
        assert "## Errors" not in text


class TestWriteReport:
    def test_file_names(self, report, tmp_path):
        paths = write_report(report, tmp_path, [ExportFormat.JSON, ExportFormat.CSV, ExportFormat.MARKDOWN])

        assert [p.name for p in paths] == [
            "prompttrail_WS-01_20240301_120000.json",
            "prompttrail_WS-01_20240301_120000.csv",
            "prompttrail_WS-01_20240301_120000.md",
        ]
        assert all(p.exists() for p in paths)

    def test_accepts_strings_and_dedupes(self, report, tmp_path):
        paths = write_report(report, tmp_path / "nested", ["json", "json"])
        assert len(paths) == 1
        assert paths[0].parent == tmp_path / "nested"

    def test_machine_name_sanitized(self, tmp_path):
        report = ScanReport(machine="bad/name:1", scan_time=SCAN_TIME, days_back=1)
        paths = write_report(report, tmp_path, ["csv"])
        assert paths[0].name == "prompttrail_bad_name_1_20240301_120000.csv"
