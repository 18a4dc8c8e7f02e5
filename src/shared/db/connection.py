"""SQLite connection pool with thread-local storage and WAL mode."""
from __future__ import annotations

import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from src.shared.constants import DB_BUSY_TIMEOUT_MS

UNICODE_LOWER_FUNCTION = "unicode_lower"


def _unicode_lower(value: str | None) -> str | None:
    return None if value is None else str(value).lower()


class ConnectionPool:
    """Thread-local SQLite connection pool with WAL mode.

    Each thread gets its own connection. Connections are configured with:
    - WAL journal mode for concurrent read/write
    - busy_timeout=30000 (30 seconds)
    - foreign_keys=ON
    - Row factory for dict-like access
    - ``unicode_lower(text)`` SQL function: Python's ``str.lower``, since
      SQLite's ``LOWER`` only folds ASCII
    """

    def __init__(self, db_path: str | Path, timeout: float = 30.0) -> None:
        self._db_path = Path(db_path)
        self._timeout = timeout
        self._local = threading.local()
        self._lock = threading.Lock()
        self._connections: list[sqlite3.Connection] = []

        self._db_path.parent.mkdir(parents=True, exist_ok=True)

    def get(self) -> sqlite3.Connection:
        """Get the connection bound to the current thread, opening it if needed."""
        conn = getattr(self._local, "connection", None)
        if conn is not None:
            return conn

        conn = sqlite3.connect(str(self._db_path), timeout=self._timeout)
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute(f"PRAGMA busy_timeout={DB_BUSY_TIMEOUT_MS}")
        conn.execute("PRAGMA foreign_keys=ON")
        conn.row_factory = sqlite3.Row
        conn.create_function(
            UNICODE_LOWER_FUNCTION, 1, _unicode_lower, deterministic=True
        )

        self._local.connection = conn

        with self._lock:
            self._connections.append(conn)

        return conn

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Yield the thread connection; commit on success, roll back on error.

        Used for writes spanning several statements (copying a gate with its
        conditions, deleting a gate with its associations).
        """
        conn = self.get()
        try:
            yield conn
        except BaseException:
            conn.rollback()
            raise
        else:
            conn.commit()

    def close(self) -> None:
        """Close all connections in the pool."""
        with self._lock:
            for conn in self._connections:
                try:
                    conn.close()
                except (sqlite3.Error, OSError):
                    pass
            self._connections.clear()
        self._local.connection = None

    @property
    def db_path(self) -> Path:
        """Return the database file path."""
        return self._db_path
