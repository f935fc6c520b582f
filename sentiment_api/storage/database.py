"""SQLite database wrapper shared by all repositories.

One Database is created at application startup and handed to request
handlers through dependency injection. The connection and schema are set up
lazily on first use.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from sentiment_api.domain.exceptions import StorageReadError, StorageWriteError

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS signals (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    source TEXT NOT NULL,
    symbol TEXT NOT NULL,
    date TEXT NOT NULL,
    sentiment TEXT NOT NULL,
    sentiment_score REAL,
    analyzed_count INTEGER,
    entry_price REAL NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_signals_source_symbol
    ON signals(source, symbol, date);

CREATE TABLE IF NOT EXISTS models_performance (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    symbol TEXT NOT NULL,
    date TEXT NOT NULL,
    sentiment TEXT NOT NULL,
    entry_price REAL NOT NULL,
    pl_30d REAL,
    pl_60d REAL
);
CREATE INDEX IF NOT EXISTS idx_performance_symbol
    ON models_performance(symbol, date);

CREATE TABLE IF NOT EXISTS signal_summaries (
    signal_type TEXT PRIMARY KEY,
    total_signals INTEGER NOT NULL,
    positive_ratio REAL NOT NULL,
    win_rate_percent REAL NOT NULL,
    positive_signals INTEGER NOT NULL,
    negative_signals INTEGER NOT NULL,
    last_updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS users (
    email TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    password_hash TEXT NOT NULL,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS sessions (
    id TEXT PRIMARY KEY,
    email TEXT NOT NULL,
    created_at TEXT NOT NULL,
    expires_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS stock_baskets (
    id TEXT PRIMARY KEY,
    user_email TEXT NOT NULL,
    name TEXT NOT NULL,
    source_weights TEXT NOT NULL,
    is_locked INTEGER NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_baskets_user
    ON stock_baskets(user_email, created_at);

CREATE TABLE IF NOT EXISTS basket_stocks (
    id TEXT PRIMARY KEY,
    basket_id TEXT NOT NULL,
    position INTEGER NOT NULL,
    symbol TEXT NOT NULL,
    name TEXT NOT NULL,
    sector TEXT NOT NULL,
    allocation REAL NOT NULL,
    is_locked INTEGER NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_basket_stocks_basket
    ON basket_stocks(basket_id, position);
"""


class Database:
    """Lazily connected SQLite database.

    The connection is shared across FastAPI's worker threads; a lock
    serializes access to it.
    """

    def __init__(self, db_path: Path):
        """Initialize the database.

        Args:
            db_path: Path to the SQLite file (parent directories are created)
        """
        self.db_path = db_path
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.RLock()

    def _ensure_connected(self) -> sqlite3.Connection:
        """Ensure database connection and schema exist."""
        if self._conn is not None:
            return self._conn

        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.executescript(SCHEMA)
        self._conn.commit()
        logger.info(f"Database ready at {self.db_path}")
        return self._conn

    def query(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        """Run a read query and return all rows.

        Raises:
            StorageReadError: on any SQLite error
        """
        with self._lock:
            try:
                conn = self._ensure_connected()
                return conn.execute(sql, params).fetchall()
            except sqlite3.Error as e:
                raise StorageReadError(f"Query failed: {e}", path=str(self.db_path)) from e

    def query_one(self, sql: str, params: tuple = ()) -> sqlite3.Row | None:
        """Run a read query and return the first row, if any."""
        rows = self.query(sql, params)
        return rows[0] if rows else None

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Yield the connection inside a transaction; commit on success, roll back on error.

        Raises:
            StorageWriteError: on any SQLite error
        """
        with self._lock:
            conn = self._ensure_connected()
            try:
                yield conn
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                raise StorageWriteError(f"Write failed: {e}", path=str(self.db_path)) from e
            except Exception:
                conn.rollback()
                raise

    def ping(self) -> bool:
        """Whether the database answers a trivial query."""
        try:
            self.query("SELECT 1")
            return True
        except StorageReadError:
            logger.warning("Database ping failed", exc_info=True)
            return False

    def close(self) -> None:
        """Close database connection."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def __enter__(self) -> Database:
        return self

    def __exit__(self, *args) -> None:
        self.close()
