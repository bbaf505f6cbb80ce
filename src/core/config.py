from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from core.enums import Browser
from extractors.exceptions import ConfigurationError

QUERY_ENGINES = ("embedded", "cli")


@dataclass(slots=True)
class LoggingConfig:
    """Logging configuration from config.yml."""

    level: str = "INFO"
    log_max_mb: int = 10
    log_backup_count: int = 5


@dataclass(slots=True)
class ScanConfig:
    """Default scan parameters from config.yml (CLI flags override these)."""

    days_back: int = 30
    browsers: List[Browser] = field(default_factory=lambda: list(Browser.all_browsers()))
    all_users: bool = False
    query_engine: str = "embedded"
    sqlite_cli_path: Optional[Path] = None


@dataclass(slots=True)
class AppConfig:
    """Top-level configuration resolved from disk."""

    base_dir: Path
    logs_dir: Path
    output_dir: Path
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    scan: ScanConfig = field(default_factory=ScanConfig)

    def to_json(self) -> str:
        """Serialize the configuration into a JSON string for diagnostics."""
        data = {
            "logs_dir": str(self.logs_dir),
            "output_dir": str(self.output_dir),
            "logging": {
                "level": self.logging.level,
                "log_max_mb": self.logging.log_max_mb,
                "log_backup_count": self.logging.log_backup_count,
            },
            "scan": {
                "days_back": self.scan.days_back,
                "browsers": [str(b) for b in self.scan.browsers],
                "all_users": self.scan.all_users,
                "query_engine": self.scan.query_engine,
                "sqlite_cli_path": str(self.scan.sqlite_cli_path) if self.scan.sqlite_cli_path else None,
            },
        }
        return json.dumps(data, indent=2, sort_keys=True)


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        try:
            content = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Invalid YAML in {path}: {exc}") from exc
        if not isinstance(content, dict):
            raise ValueError(f"Config file {path} must contain a mapping at the top level.")
        return content


def parse_browsers(values: Any) -> List[Browser]:
    """Resolve a list (or comma separated string) of browser names; "all" expands."""
    if isinstance(values, str):
        values = [part for part in values.split(",") if part.strip()]
    browsers: List[Browser] = []
    for value in values or []:
        if str(value).strip().lower() == "all":
            return list(Browser.all_browsers())
        try:
            browser = Browser.parse(str(value))
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc
        if browser not in browsers:
            browsers.append(browser)
    return browsers


def _int_setting(section: str, key: str, value: Any, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise ConfigurationError(f"{section}.{key} must be an integer >= {minimum}, got {value!r}")
    return value


def _parse_logging_config(logging_cfg: Dict[str, Any]) -> LoggingConfig:
    defaults = LoggingConfig()
    return LoggingConfig(
        level=str(logging_cfg.get("level", defaults.level)).upper(),
        log_max_mb=_int_setting("logging", "log_max_mb", logging_cfg.get("log_max_mb", defaults.log_max_mb), 1),
        log_backup_count=_int_setting(
            "logging", "log_backup_count", logging_cfg.get("log_backup_count", defaults.log_backup_count), 0
        ),
    )


def _parse_scan_config(scan_cfg: Dict[str, Any]) -> ScanConfig:
    defaults = ScanConfig()

    days_back = scan_cfg.get("days_back", defaults.days_back)
    if isinstance(days_back, bool) or not isinstance(days_back, int) or days_back <= 0:
        raise ConfigurationError(f"scan.days_back must be a positive integer, got {days_back!r}")

    browsers = defaults.browsers
    if "browsers" in scan_cfg:
        browsers = parse_browsers(scan_cfg["browsers"])
        if not browsers:
            raise ConfigurationError("scan.browsers must name at least one browser")

    engine = str(scan_cfg.get("query_engine", defaults.query_engine)).lower()
    if engine not in QUERY_ENGINES:
        raise ConfigurationError(
            f"scan.query_engine must be one of {', '.join(QUERY_ENGINES)}, got {engine!r}"
        )

    cli_path = scan_cfg.get("sqlite_cli_path")

    return ScanConfig(
        days_back=days_back,
        browsers=browsers,
        all_users=bool(scan_cfg.get("all_users", defaults.all_users)),
        query_engine=engine,
        sqlite_cli_path=Path(cli_path) if cli_path else None,
    )


def load_app_config(base_dir: Path) -> AppConfig:
    """Load application configuration from disk, providing sensible defaults."""

    config_yaml = base_dir / "config" / "config.yml"
    config_overrides = _load_yaml(config_yaml)

    paths_cfg = config_overrides.get("paths", {}) or {}
    logs_dir = Path(paths_cfg["logs_dir"]) if paths_cfg.get("logs_dir") else base_dir / "logs"
    output_dir = Path(paths_cfg["output_dir"]) if paths_cfg.get("output_dir") else base_dir / "reports"

    logging_config = _parse_logging_config(config_overrides.get("logging", {}) or {})

    scan_config = _parse_scan_config(config_overrides.get("scan", {}) or {})

    return AppConfig(
        base_dir=base_dir,
        logs_dir=logs_dir,
        output_dir=output_dir,
        logging=logging_config,
        scan=scan_config,
    )
