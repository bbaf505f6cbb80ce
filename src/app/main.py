"""
PromptTrail command line.

Thin layer over the scan orchestrator: resolves configuration, configures
logging, runs one scan, prints a plain summary and writes the requested
report files.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Sequence

from core.app_version import get_app_version
from core.config import QUERY_ENGINES, AppConfig, load_app_config, parse_browsers
from core.enums import ExportFormat
from core.logging import configure_logging, get_logger
from core.models import ScanReport
from core.orchestrator import ScanOrchestrator
from extractors._shared.sqlite_helpers import DatabaseReader, create_query_engine
from extractors.ai_patterns import patterns_by_category
from extractors.exceptions import ConfigurationError
from reports import write_report

LOGGER = get_logger("app.main")

EXIT_OK = 0
EXIT_USAGE = 2


def default_base_dir() -> Path:
    if getattr(sys, "frozen", False):
        # Running in a PyInstaller bundle
        return Path(sys._MEIPASS)
    checkout = Path(__file__).resolve().parents[2]
    if (checkout / "pyproject.toml").is_file():
        # Running from source
        return checkout
    # Installed into site-packages: config, logs and reports live in the working directory
    return Path.cwd()


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prompttrail",
        description="Scan local browser history for visits to AI tools.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Browsers:
  chrome, edge, firefox, safari (macOS only), or "all"

Example usage:
  # Last 30 days, current user, every browser
  prompttrail

  # Chrome and Edge for every local account, JSON and CSV reports
  prompttrail --browsers chrome,edge --all-users --format json --format csv
        """,
    )
    parser.add_argument("--browsers", help="Comma separated browsers to scan (default: from config)")
    parser.add_argument("--days", type=_positive_int, help="Day-window to scan (default: from config)")
    parser.add_argument("--all-users", action="store_true", default=None,
                        help="Scan every local account (needs administrator/root)")
    parser.add_argument("--format", dest="formats", action="append",
                        choices=[f.value for f in ExportFormat],
                        help="Report format to write; repeat for several")
    parser.add_argument("--output-dir", type=Path, help="Directory for report files")
    parser.add_argument("--engine", choices=QUERY_ENGINES,
                        help="SQLite query engine (default: from config)")
    parser.add_argument("--list-patterns", action="store_true",
                        help="Print the AI tool catalog and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("-V", "--version", action="version",
                        version=f"PromptTrail {get_app_version()}")
    return parser


def apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    """Fold command line flags into the loaded configuration."""
    scan = config.scan
    if args.browsers:
        browsers = parse_browsers(args.browsers)
        if not browsers:
            raise ConfigurationError("--browsers must name at least one browser")
        scan = replace(scan, browsers=browsers)
    if args.days is not None:
        scan = replace(scan, days_back=args.days)
    if args.all_users:
        scan = replace(scan, all_users=True)
    if args.engine:
        scan = replace(scan, query_engine=args.engine)

    output_dir = args.output_dir or config.output_dir
    return replace(config, scan=scan, output_dir=output_dir)


def print_patterns() -> None:
    for category, patterns in patterns_by_category().items():
        print(f"\n{category}")
        for pattern in patterns:
            print(f"  {pattern.name}")


def print_summary(report: ScanReport, written: Sequence[Path], export_error: Optional[str] = None) -> None:
    summary = report.summary
    print(f"Machine:          {report.machine}")
    print(f"Window:           last {report.days_back} day(s)")
    print(f"Browsers scanned: {summary.browsers_scanned}")
    print(f"Findings:         {summary.total_findings}")
    print(f"Unique tools:     {summary.unique_tools}")
    for browser, findings in report.results.items():
        print(f"  {browser:10} {len(findings):>6}")
    if summary.tools:
        print(f"Tools: {', '.join(summary.tools)}")
    for category, count in summary.categories.items():
        print(f"  {category:16} {count:>6}")
    for warning in report.warnings:
        print(f"Warning: {warning}")
    for error in report.errors:
        print(f"Error: {error}")
    for path in written:
        print(f"Report: {path}")
    if export_error:
        print(f"Export failed: {export_error}")


def main(argv: Optional[List[str]] = None, base_dir: Optional[Path] = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        # --help/--version exit 0, usage errors exit 2
        return int(exc.code or 0)

    if args.list_patterns:
        print_patterns()
        return EXIT_OK

    try:
        config = apply_overrides(load_app_config(base_dir or default_base_dir()), args)
        engine = create_query_engine(config.scan.query_engine, config.scan.sqlite_cli_path)
    except (ConfigurationError, ValueError) as exc:
        print(f"prompttrail: error: {exc}", file=sys.stderr)
        return EXIT_USAGE

    level = logging.DEBUG if args.verbose else getattr(logging, config.logging.level, logging.INFO)
    try:
        configure_logging(
            config.logs_dir,
            level=level,
            max_bytes=config.logging.log_max_mb * 1024 * 1024,
            backup_count=config.logging.log_backup_count,
        )
    except OSError as exc:
        print(f"prompttrail: error: cannot write logs to {config.logs_dir}: {exc}", file=sys.stderr)
        return EXIT_USAGE
    LOGGER.debug("Effective configuration: %s", config.to_json())

    orchestrator = ScanOrchestrator(reader=DatabaseReader(engine))
    report = orchestrator.scan(config.scan.browsers, config.scan.days_back, config.scan.all_users)

    written: List[Path] = []
    export_error: Optional[str] = None
    if args.formats:
        try:
            written = write_report(report, config.output_dir, [ExportFormat(f) for f in args.formats])
        except OSError as exc:
            LOGGER.error("Could not write reports to %s: %s", config.output_dir, exc)
            export_error = str(exc)

    print_summary(report, written, export_error)
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
