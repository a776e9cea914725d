"""
Key-Value Store
===============

String key-value storage on SQLite. Repositories keep their data under
separate keys and share nothing else.
"""

import sqlite3
from contextlib import contextmanager
from typing import Optional, Generator

from ..database.connection import DatabaseConnection
from ..database.schema import DatabaseSchema
from ..utils.logging import get_logger_for_component
from ..utils.exceptions import StoreError, ErrorCode


class KeyValueStore:
    """Scoped string key-value store."""

    def __init__(self, db_connection: DatabaseConnection):
        """Initialize the store and make sure its table exists.

        Args:
            db_connection: Database connection manager
        """
        self.db = db_connection
        self.logger = get_logger_for_component("kv_store")

        try:
            DatabaseSchema(self.db).create_tables()
        except sqlite3.Error as e:
            raise StoreError(
                f"Failed to prepare key-value store: {e}",
                error_code=ErrorCode.DATABASE_SCHEMA
            ) from e

    @contextmanager
    def scope(self) -> Generator[sqlite3.Connection, None, None]:
        """Acquire a connection for several operations in one transaction."""
        with self.db.transaction() as conn:
            yield conn

    def get(self, key: str) -> Optional[str]:
        """Return the value stored under key, or None.

        Raises:
            StoreError: If the read fails
        """
        try:
            row = self.db.execute_one(
                "SELECT value FROM kv_store WHERE key = ?", (key,)
            )
        except sqlite3.Error as e:
            raise StoreError(f"Failed to read key: {e}", key=key) from e

        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value.

        Raises:
            StoreError: If the write fails
        """
        try:
            self.db.execute_update(
                """
                INSERT INTO kv_store (key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, value),
            )
        except sqlite3.Error as e:
            raise StoreError(f"Failed to write key: {e}", key=key) from e

        self.logger.debug(f"Stored {len(value)} chars under '{key}'")

    def remove(self, key: str) -> bool:
        """Delete key. Returns True if a value was removed.

        Raises:
            StoreError: If the delete fails
        """
        try:
            removed = self.db.execute_update(
                "DELETE FROM kv_store WHERE key = ?", (key,)
            )
        except sqlite3.Error as e:
            raise StoreError(f"Failed to remove key: {e}", key=key) from e

        return removed > 0

    def close(self) -> None:
        """Release pooled connections."""
        self.db.close_all_connections()
