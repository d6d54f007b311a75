import logging
import sqlite3
from collections.abc import Sequence
from types import TracebackType
from typing import Any

logger = logging.getLogger(__name__)

SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS companies (
        handle TEXT PRIMARY KEY CHECK (handle = lower(handle)),
        name TEXT NOT NULL UNIQUE,
        num_employees INTEGER CHECK (num_employees >= 0),
        description TEXT NOT NULL,
        logo_url TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS jobs (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title TEXT NOT NULL,
        salary INTEGER CHECK (salary >= 0),
        equity TEXT CHECK (CAST(equity AS REAL) BETWEEN 0 AND 1),
        company_handle TEXT NOT NULL
            REFERENCES companies ON DELETE CASCADE
    )
    """,
)


def _casefold(value: str | None) -> str | None:
    """SQL casefold(): Unicode-aware lowercasing for case-insensitive matching."""
    return value.casefold() if isinstance(value, str) else value


class Database:
    """
    SQLite database holding companies and their jobs.
    Uses a single persistent connection in autocommit mode, so every statement
    is its own transaction. Supports context manager protocol for proper
    resource cleanup.
    """

    def __init__(self, db_path: str = "jobly.db") -> None:
        self.db_path = db_path
        self._conn: sqlite3.Connection | None = sqlite3.connect(db_path, isolation_level=None)
        self._conn.row_factory = sqlite3.Row
        self._conn.create_function("casefold", 1, _casefold, deterministic=True)
        self._conn.execute("PRAGMA foreign_keys = ON")
        self.init_db()

    @property
    def connection(self) -> sqlite3.Connection:
        """Return the persistent database connection."""
        if self._conn is None:
            raise RuntimeError("Database connection is closed")
        return self._conn

    def init_db(self) -> None:
        """Create the companies and jobs tables if they don't exist."""
        cursor = self.connection.cursor()
        for statement in SCHEMA:
            cursor.execute(statement)

        logger.info(f"Database initialized at {self.db_path}")

    def query(self, sql: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        """Run one parameterized statement and return every row as a dict."""
        cursor = self.connection.execute(sql, tuple(params))
        return [dict(row) for row in cursor.fetchall()]

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        """
        Executor entry point used by the entity managers.
        Rows are keyed by the column names (or aliases) of the statement.
        """
        logger.debug(f"Executing: {' '.join(sql.split())} with {list(params)}")
        return self.query(sql, params)

    def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "Database":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
