"""
Safe SQLite helpers for browser extractors.

Provides utilities for safely reading history databases of running browsers:
- Point-in-time copies (with -wal/-journal/-shm companions) into a private
  temporary directory, so the browser never has to be closed
- A locked-file copy fallback on Windows (esentutl)
- Pluggable query engines: the embedded ``sqlite3`` module or the external
  ``sqlite3`` command-line shell
- A result type instead of exceptions at the reader boundary

Design Principle:
    Source databases are NEVER opened directly. Every query runs against a
    temporary copy that is removed on every exit path.
"""

from __future__ import annotations

import json
import platform
import shutil
import sqlite3
import subprocess
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Protocol, Union

from core.enums import ReadStatus
from core.logging import get_logger
from core.tool_discovery import INSTALL_HINTS, find_tool
from extractors.exceptions import ConfigurationError, MissingToolError

LOGGER = get_logger("extractors.sqlite_helpers")

Row = Dict[str, str]

COMPANION_SUFFIXES = ("-wal", "-journal", "-shm")


class SQLiteReadError(Exception):
    """Raised when SQLite database cannot be read."""
    pass


@dataclass(slots=True)
class QueryResult:
    """
    Outcome of one history query.

    ``ok`` and ``empty`` are both successes; ``failed`` carries the reason
    (copy failure, missing engine, corrupt database) for diagnostics.
    """

    status: ReadStatus
    rows: List[Row] = field(default_factory=list)
    reason: str = ""

    @classmethod
    def from_rows(cls, rows: List[Row]) -> "QueryResult":
        if not rows:
            return cls(ReadStatus.EMPTY, [], "query returned no rows")
        return cls(ReadStatus.OK, rows)

    @classmethod
    def empty(cls, reason: str) -> "QueryResult":
        return cls(ReadStatus.EMPTY, [], reason)

    @classmethod
    def failed(cls, reason: str) -> "QueryResult":
        return cls(ReadStatus.FAILED, [], reason)


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


@contextmanager
def safe_sqlite_connect(
    db_path: Union[str, Path],
    timeout: float = 5.0,
) -> Iterator[sqlite3.Connection]:
    """
    Connect to a SQLite database copy with writes disabled.

    The connection is opened read-write at the file level so a copied WAL can
    be recovered, then locked down with ``PRAGMA query_only``. Only use this
    on private copies.

    Args:
        db_path: Path to the SQLite database file
        timeout: Connection timeout in seconds

    Yields:
        sqlite3.Connection with ``sqlite3.Row`` rows

    Raises:
        SQLiteReadError: If database cannot be opened
        FileNotFoundError: If database file doesn't exist

    Example:
        with safe_sqlite_connect("/tmp/copy/History") as conn:
            for row in safe_execute(conn, "SELECT url FROM urls"):
                print(row["url"])
    """
    db_path = Path(db_path)

    if not db_path.exists():
        raise FileNotFoundError(f"Database not found: {db_path}")

    conn: Optional[sqlite3.Connection] = None

    try:
        conn = sqlite3.connect(str(db_path), timeout=timeout)
        conn.row_factory = sqlite3.Row
        conn.text_factory = lambda raw: raw.decode("utf-8", errors="replace")
        conn.execute("PRAGMA query_only = ON")

        yield conn

    except sqlite3.Error as e:
        raise SQLiteReadError(f"Failed to open database {db_path}: {e}") from e

    finally:
        if conn:
            conn.close()


def safe_execute(conn: sqlite3.Connection, query: str) -> List[sqlite3.Row]:
    """
    Execute a query and fetch all rows.

    Raises:
        SQLiteReadError: If query execution fails
    """
    try:
        return conn.execute(query).fetchall()
    except sqlite3.Error as e:
        raise SQLiteReadError(f"Query execution failed: {e}") from e


def copy_sqlite_for_reading(
    db_path: Union[str, Path],
    include_wal: bool = True,
    dest_dir: Optional[Path] = None,
) -> Path:
    """
    Copy SQLite database and associated files for safe reading.

    Copies the main database file and optionally WAL/journal files to a
    temporary location. Browsers keep their history database open (and on
    Windows, locked) while running; the copy is what gets queried.

    Args:
        db_path: Path to the SQLite database
        include_wal: If True, also copy -wal, -journal, -shm files
        dest_dir: Destination directory (default: new system temp directory)

    Returns:
        Path to the copied database

    Raises:
        OSError: If the main database cannot be copied

    Note:
        Caller is responsible for cleaning up the copied files.
    """
    db_path = Path(db_path)

    if dest_dir is None:
        dest_dir = Path(tempfile.mkdtemp(prefix="prompttrail_"))
    else:
        dest_dir = Path(dest_dir)
        dest_dir.mkdir(parents=True, exist_ok=True)

    dest_db = dest_dir / db_path.name
    _copy_file(db_path, dest_db)

    if include_wal:
        for suffix in COMPANION_SUFFIXES:
            companion = db_path.parent / (db_path.name + suffix)
            if not companion.exists():
                continue
            try:
                _copy_file(companion, dest_dir / companion.name)
            except OSError as exc:
                # Without the WAL the copy is older, but still readable
                LOGGER.debug("Could not copy companion %s: %s", companion, exc)

    return dest_db


def _copy_file(src: Path, dest: Path) -> None:
    try:
        shutil.copy2(src, dest)
    except PermissionError:
        if platform.system() != "Windows":
            raise
        copy_locked_file(src, dest)


def copy_locked_file(src: Path, dest: Path) -> None:
    """
    Copy a file another process holds open exclusively (Windows).

    Uses ``esentutl /y <src> /d <dest> /o``, which reads through the sharing
    lock Chromium keeps on its History file.

    Raises:
        OSError: If esentutl is unavailable or the copy fails
    """
    exe = find_tool("esentutl")
    if exe is None:
        raise PermissionError(f"{src} is locked and esentutl.exe is not available")

    process = subprocess.run(
        [str(exe), "/y", str(src), "/d", str(dest), "/o"],
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        check=False,
    )
    if process.returncode != 0 or not dest.exists():
        output = (process.stdout or "").strip().splitlines()
        detail = output[-1] if output else f"exit code {process.returncode}"
        raise OSError(f"esentutl could not copy {src}: {detail}")
    LOGGER.debug("Copied locked file %s with esentutl", src)


# =============================================================================
# Query engines
# =============================================================================


class QueryEngine(Protocol):
    """Runs a read-only SQL statement against a database file."""

    name: str

    def execute(self, db_path: Path, sql: str) -> List[Row]:
        """
        Raises:
            SQLiteReadError: If the database or statement is unreadable
            MissingToolError: If the engine itself is unavailable
        """
        ...


class EmbeddedSqliteEngine:
    """Python's built-in sqlite3 module."""

    name = "embedded"

    def execute(self, db_path: Path, sql: str) -> List[Row]:
        with safe_sqlite_connect(db_path) as conn:
            rows = safe_execute(conn, sql)
            return [{key: _to_text(row[key]) for key in row.keys()} for row in rows]


class SqliteCliEngine:
    """
    The external ``sqlite3`` command-line shell (3.33+ for ``-json``).

    The executable is resolved lazily so a missing shell only fails the
    reads that need it.
    """

    name = "cli"

    def __init__(self, executable: Optional[Path] = None) -> None:
        self.executable = executable

    def resolve(self) -> Path:
        exe = find_tool("sqlite3", self.executable)
        if exe is None:
            raise MissingToolError("sqlite3", INSTALL_HINTS["sqlite3"])
        return exe

    def execute(self, db_path: Path, sql: str) -> List[Row]:
        exe = self.resolve()
        try:
            process = subprocess.run(
                [str(exe), "-readonly", "-json", str(db_path), sql],
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except OSError as exc:
            raise MissingToolError("sqlite3", f"{exe} could not be started: {exc}") from exc

        if process.returncode != 0:
            raise SQLiteReadError(
                f"sqlite3 exited with {process.returncode}: {(process.stderr or '').strip()}"
            )

        output = (process.stdout or "").strip()
        if not output:
            return []
        try:
            records = json.loads(output)
        except json.JSONDecodeError as exc:
            raise SQLiteReadError(f"Unparseable sqlite3 output: {exc}") from exc
        return [{key: _to_text(value) for key, value in record.items()} for record in records]


def create_query_engine(name: str = "embedded", cli_path: Optional[Path] = None) -> QueryEngine:
    """Build the query engine named in the scan configuration."""
    if name == "embedded":
        return EmbeddedSqliteEngine()
    if name == "cli":
        return SqliteCliEngine(cli_path)
    raise ConfigurationError(f"Unknown query engine: {name!r}")


# =============================================================================
# Database reader
# =============================================================================


class DatabaseReader:
    """
    Reads history databases through a temporary copy.

    ``query`` never raises: missing files, copy failures, engine problems and
    corrupt databases all come back as a QueryResult whose reason is logged.
    """

    def __init__(self, engine: Optional[QueryEngine] = None) -> None:
        self.engine = engine or EmbeddedSqliteEngine()
        self._missing_tool_reported = False

    def query(self, db_path: Union[str, Path], sql: str) -> QueryResult:
        db_path = Path(db_path)
        if not db_path.is_file():
            LOGGER.debug("History database vanished before read: %s", db_path)
            return QueryResult.empty(f"not found: {db_path}")

        temp_dir: Optional[Path] = None
        try:
            try:
                temp_dir = Path(tempfile.mkdtemp(prefix="prompttrail_"))
                copy = copy_sqlite_for_reading(db_path, dest_dir=temp_dir)
            except OSError as exc:
                LOGGER.debug("Could not copy %s: %s", db_path, exc)
                return QueryResult.failed(f"copy failed: {exc}")

            try:
                rows = self.engine.execute(copy, sql)
            except MissingToolError as exc:
                if not self._missing_tool_reported:
                    LOGGER.warning("%s", exc)
                    self._missing_tool_reported = True
                return QueryResult.failed(str(exc))
            except (SQLiteReadError, FileNotFoundError) as exc:
                LOGGER.debug("Could not query %s: %s", db_path, exc)
                return QueryResult.failed(str(exc))

            return QueryResult.from_rows(rows)
        finally:
            if temp_dir is not None:
                shutil.rmtree(temp_dir, ignore_errors=True)
