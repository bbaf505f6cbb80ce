"""Global pytest configuration: fixed clock and on-the-fly history databases."""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, Union

import pytest

WEBKIT_EPOCH = datetime(1601, 1, 1, tzinfo=timezone.utc)
UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
COCOA_EPOCH = datetime(2001, 1, 1, tzinfo=timezone.utc)

FIXED_NOW = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)

When = Union[datetime, int, float, None]


def _micros_since(epoch: datetime, when: When) -> Any:
    if isinstance(when, datetime):
        return (when - epoch) // timedelta(microseconds=1)
    return when


def _seconds_since(epoch: datetime, when: When) -> Any:
    if isinstance(when, datetime):
        return (when - epoch).total_seconds()
    return when


def _create(path: Path, schema: str) -> sqlite3.Connection:
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path))
    conn.executescript(schema)
    return conn


CHROMIUM_SCHEMA = """
CREATE TABLE urls(
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    url LONGVARCHAR,
    title LONGVARCHAR,
    visit_count INTEGER DEFAULT 0 NOT NULL,
    typed_count INTEGER DEFAULT 0 NOT NULL,
    last_visit_time INTEGER NOT NULL,
    hidden INTEGER DEFAULT 0 NOT NULL
);
"""

FIREFOX_SCHEMA = """
CREATE TABLE moz_places(
    id INTEGER PRIMARY KEY,
    url LONGVARCHAR,
    title LONGVARCHAR,
    rev_host LONGVARCHAR,
    visit_count INTEGER DEFAULT 0,
    hidden INTEGER DEFAULT 0 NOT NULL,
    typed INTEGER DEFAULT 0 NOT NULL,
    frecency INTEGER DEFAULT -1 NOT NULL,
    last_visit_date INTEGER,
    guid TEXT
);
"""

SAFARI_SCHEMA = """
CREATE TABLE history_items(
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    url TEXT NOT NULL UNIQUE,
    domain_expansion TEXT NULL,
    visit_count INTEGER NOT NULL
);
CREATE TABLE history_visits(
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    history_item INTEGER NOT NULL REFERENCES history_items(id) ON DELETE CASCADE,
    visit_time REAL NOT NULL,
    title TEXT NULL,
    load_successful BOOLEAN NOT NULL DEFAULT 1
);
"""


def write_chromium_history(path: Path, visits: Iterable[Dict[str, Any]]) -> Path:
    """Create a Chromium ``History`` database; ``visited`` may be a datetime or raw value."""
    conn = _create(path, CHROMIUM_SCHEMA)
    with conn:
        for visit in visits:
            conn.execute(
                "INSERT INTO urls(url, title, visit_count, last_visit_time) VALUES (?, ?, ?, ?)",
                (
                    visit["url"],
                    visit.get("title", ""),
                    visit.get("visit_count", 1),
                    _micros_since(WEBKIT_EPOCH, visit.get("visited", FIXED_NOW)),
                ),
            )
    conn.close()
    return path


def write_firefox_places(path: Path, visits: Iterable[Dict[str, Any]]) -> Path:
    """Create a Firefox ``places.sqlite``; ``visited=None`` stores a NULL date."""
    conn = _create(path, FIREFOX_SCHEMA)
    with conn:
        for visit in visits:
            conn.execute(
                "INSERT INTO moz_places(url, title, visit_count, last_visit_date) VALUES (?, ?, ?, ?)",
                (
                    visit["url"],
                    visit.get("title"),
                    visit.get("visit_count", 1),
                    _micros_since(UNIX_EPOCH, visit.get("visited", FIXED_NOW)),
                ),
            )
    conn.close()
    return path


def write_safari_history(path: Path, visits: Iterable[Dict[str, Any]]) -> Path:
    """
    Create a Safari ``History.db``.

    Every visit dict names its ``url``; visits sharing a URL share one
    history item, whose visit_count is the number of visits.
    """
    visits = list(visits)
    conn = _create(path, SAFARI_SCHEMA)
    item_ids: Dict[str, int] = {}
    with conn:
        for visit in visits:
            url = visit["url"]
            if url not in item_ids:
                count = sum(1 for v in visits if v["url"] == url)
                cur = conn.execute(
                    "INSERT INTO history_items(url, visit_count) VALUES (?, ?)", (url, count)
                )
                item_ids[url] = int(cur.lastrowid)
            conn.execute(
                "INSERT INTO history_visits(history_item, visit_time, title) VALUES (?, ?, ?)",
                (
                    item_ids[url],
                    _seconds_since(COCOA_EPOCH, visit.get("visited", FIXED_NOW)),
                    visit.get("title"),
                ),
            )
    conn.close()
    return path


@pytest.fixture(autouse=True)
def reset_app_logger():
    """Drop handlers installed by configure_logging so streams do not outlive a test."""
    yield
    logger = logging.getLogger("prompttrail")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def chromium_history():
    return write_chromium_history


@pytest.fixture
def firefox_places():
    return write_firefox_places


@pytest.fixture
def safari_history():
    return write_safari_history


@pytest.fixture
def home_root(tmp_path: Path) -> Path:
    """A fake /home with no accounts yet."""
    root = tmp_path / "home"
    root.mkdir()
    return root


@pytest.fixture
def linux_layout(home_root: Path):
    from extractors._shared.path_utils import LinuxLayout

    return LinuxLayout(home_root=home_root, root_home=None)


@pytest.fixture
def linux_locator(linux_layout):
    from extractors._shared.profile_locator import ProfileLocator

    return ProfileLocator(linux_layout)


def chrome_history_path(home_root: Path, user: str, profile: str = "Default") -> Path:
    return home_root / user / ".config" / "google-chrome" / profile / "History"


@pytest.fixture
def chrome_path(home_root: Path):
    """Factory: path of a Chrome History file for (user, profile) under the fake /home."""
    def factory(user: str, profile: str = "Default") -> Path:
        return chrome_history_path(home_root, user, profile)
    return factory


@pytest.fixture
def firefox_path(home_root: Path):
    def factory(user: str, profile: str = "abcd1234.default-release") -> Path:
        return home_root / user / ".mozilla" / "firefox" / profile / "places.sqlite"
    return factory


@pytest.fixture
def edge_path(home_root: Path):
    def factory(user: str, profile: str = "Default") -> Path:
        return home_root / user / ".config" / "microsoft-edge" / profile / "History"
    return factory
