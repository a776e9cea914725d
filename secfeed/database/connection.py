"""
SecFeed Database Connection Management
======================================

Small SQLite connection pool backing the key-value store.
"""

import sqlite3
import threading
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Optional, Generator
from queue import Queue, Empty

logger = logging.getLogger(__name__)


class DatabaseConnection:
    """SQLite connection manager with pooling."""

    def __init__(self, db_path: str = "data/secfeed.db", pool_size: int = 2):
        """Initialize database connection manager.

        Args:
            db_path: Path to SQLite database file
            pool_size: Maximum number of connections in pool
        """
        self.db_path = Path(db_path)
        self.pool_size = pool_size
        self.pool: Queue = Queue(maxsize=pool_size)
        self.lock = threading.Lock()
        self._total_connections = 0

        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _create_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(
            self.db_path,
            check_same_thread=False,
            timeout=30.0
        )
        conn.execute("PRAGMA journal_mode = WAL")
        conn.execute("PRAGMA synchronous = NORMAL")
        conn.row_factory = sqlite3.Row

        with self.lock:
            self._total_connections += 1

        logger.debug(f"Created database connection #{self._total_connections}")
        return conn

    @contextmanager
    def get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Borrow a connection for the duration of the ``with`` block.

        Usage:
            with db.get_connection() as conn:
                row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        """
        try:
            conn = self.pool.get_nowait()
        except Empty:
            conn = self._create_connection()

        try:
            yield conn
        except sqlite3.Error as e:
            logger.error(f"Database connection error: {e}")
            conn.rollback()
            raise
        finally:
            if self.pool.full():
                conn.close()
                with self.lock:
                    self._total_connections -= 1
            else:
                self.pool.put_nowait(conn)

    @contextmanager
    def transaction(self) -> Generator[sqlite3.Connection, None, None]:
        """Run statements in one transaction; commit on success, rollback on error."""
        with self.get_connection() as conn:
            try:
                yield conn
                conn.commit()
            except Exception as e:
                conn.rollback()
                logger.error(f"Transaction rolled back due to error: {e}")
                raise

    def execute_one(self, query: str, params: tuple = ()) -> Optional[sqlite3.Row]:
        """Execute a query and return single result."""
        with self.get_connection() as conn:
            return conn.execute(query, params).fetchone()

    def execute_update(self, query: str, params: tuple = ()) -> int:
        """Execute an INSERT/UPDATE/DELETE query and return affected rows."""
        with self.transaction() as conn:
            return conn.execute(query, params).rowcount

    def close_all_connections(self) -> None:
        """Close all connections in the pool."""
        logger.debug("Closing all database connections")

        while True:
            try:
                conn = self.pool.get_nowait()
            except Empty:
                break
            conn.close()

        with self.lock:
            self._total_connections = 0
