"""
SecFeed Database Schema
=======================

SQLite schema for the key-value store. A single table holds every scoped
value (persisted article cache, saved-article list).
"""

import sqlite3
import logging

from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

EXPECTED_TABLES = {"kv_store"}


class DatabaseSchema:
    """Schema manager for the SecFeed SQLite database."""

    def __init__(self, db: DatabaseConnection):
        self.db = db

    def create_tables(self) -> None:
        """Create all tables if they do not exist yet."""
        with self.db.transaction() as conn:
            self._create_kv_store_table(conn)
        logger.debug("Database schema created successfully")

    def _create_kv_store_table(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """
        )

    def verify_schema(self) -> bool:
        """Verify every expected table exists."""
        try:
            with self.db.get_connection() as conn:
                cursor = conn.execute(
                    """
                    SELECT name FROM sqlite_master
                    WHERE type='table' AND name NOT LIKE 'sqlite_%'
                """
                )
                tables = {row[0] for row in cursor.fetchall()}

            missing = EXPECTED_TABLES - tables
            if missing:
                logger.error(f"Missing tables: {sorted(missing)}")
                return False

            return True

        except sqlite3.Error as e:
            logger.error(f"Schema verification failed: {e}")
            return False
