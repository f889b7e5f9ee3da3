from __future__ import annotations

import logging
import sqlite3
import threading
from collections.abc import Iterator
from contextlib import contextmanager

logger = logging.getLogger(__name__)


class Database:
    """SQLite database wrapper shared by request threads.

    One connection serves the whole process; every statement runs under a
    re-entrant lock so the threaded dev server never interleaves statements.
    """

    def __init__(self, path: str = ":memory:") -> None:
        self._path = path
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.RLock()

    @property
    def path(self) -> str:
        return self._path

    def connect(self) -> None:
        """Open connection and enable WAL mode."""
        self._conn = sqlite3.connect(self._path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.create_function("casefold", 1, _casefold, deterministic=True)
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute("PRAGMA foreign_keys=ON")
        logger.debug("Connected to database %s", self._path)

    def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    def execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        """Execute a single SQL statement."""
        with self._lock:
            return self.connection.execute(sql, params)

    def fetch_one(self, sql: str, params: tuple = ()) -> sqlite3.Row | None:
        """Execute a query and return the first row, or None."""
        with self._lock:
            return self.connection.execute(sql, params).fetchone()

    def fetch_all(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        """Execute a query and return all rows."""
        with self._lock:
            return self.connection.execute(sql, params).fetchall()

    def commit(self) -> None:
        """Commit the current transaction."""
        with self._lock:
            self.connection.commit()

    @contextmanager
    def transaction(self) -> Iterator[Database]:
        """Hold the lock for a group of statements; commit on success."""
        with self._lock:
            try:
                yield self
            except Exception:
                self.connection.rollback()
                raise
            self.connection.commit()

    @property
    def connection(self) -> sqlite3.Connection:
        """Return the underlying connection."""
        assert self._conn is not None, "Database not connected"
        return self._conn


def _casefold(value: str | None) -> str | None:
    """Unicode-aware lower-casing for case-insensitive matching in SQL."""
    return value.casefold() if isinstance(value, str) else value
