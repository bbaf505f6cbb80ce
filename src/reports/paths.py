"""
Path resolution utilities for reports module.

Handles path resolution in both development and PyInstaller bundle environments.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional


def _get_meipass_base() -> Optional[Path]:
    """Get PyInstaller MEIPASS base directory if running frozen."""
    if getattr(sys, "frozen", False):
        meipass = getattr(sys, "_MEIPASS", None)
        if meipass:
            return Path(meipass) / "src" / "reports"
    return None


def get_reports_dir() -> Path:
    """Get the reports package root directory.

    Returns:
        Path to reports directory, handling PyInstaller bundles.
    """
    meipass_base = _get_meipass_base()
    if meipass_base:
        return meipass_base
    return Path(__file__).parent


def get_templates_dir() -> Path:
    """Get the templates directory.

    Returns:
        Path to templates directory, handling PyInstaller bundles.
    """
    return get_reports_dir() / "templates"


def report_basename(machine: str, scan_time) -> str:
    """``prompttrail_<machine>_<yyyymmdd_HHMMSS>`` without extension."""
    safe_machine = "".join(ch if ch.isalnum() or ch in "-_" else "_" for ch in machine) or "unknown"
    return f"prompttrail_{safe_machine}_{scan_time.strftime('%Y%m%d_%H%M%S')}"
