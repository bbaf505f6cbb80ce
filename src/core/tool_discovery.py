"""Locate the external tools the database reader can use."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Dict, Iterable, Optional

TOOL_CANDIDATES: Dict[str, Iterable[str]] = {
    "sqlite3": ("sqlite3", "sqlite3.exe"),
    "esentutl": ("esentutl.exe", "esentutl"),
}

INSTALL_HINTS: Dict[str, str] = {
    "sqlite3": (
        "Install the SQLite command-line shell (https://sqlite.org/download.html, "
        "'winget install SQLite.SQLite', 'brew install sqlite' or 'apt install sqlite3') "
        "or switch scan.query_engine to 'embedded'."
    ),
    "esentutl": "esentutl.exe ships with Windows under %SystemRoot%\\System32.",
}


def find_tool(name: str, override: Optional[Path] = None) -> Optional[Path]:
    """Locate a single tool by name; an existing override path wins."""
    if override and override.exists():
        return override
    candidates = TOOL_CANDIDATES.get(name, (name,))
    return _which(candidates)


def _which(candidates: Iterable[str]) -> Optional[Path]:
    for candidate in candidates:
        found = shutil.which(candidate)
        if found:
            return Path(found)
    return None
