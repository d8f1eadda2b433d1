"""SQLite persistence layer for SoloTerm.

Owns the database file, its schema, and connection handling. Record-level
operations live in the domain stores (``soloterm.characters``), which borrow
connections from here.

Storage location: ~/soloterm/soloterm.db (see ``StorageSettings``)
"""

from __future__ import annotations

import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Generator

from soloterm.core.config import get_settings
from soloterm.core.exceptions import PersistenceError
from soloterm.core.logging import get_logger

logger = get_logger(__name__)


def now_iso() -> str:
    """Timestamp in the format stored in ``created_at``/``updated_at``."""
    return datetime.now().isoformat(timespec="microseconds")


def parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value)


# =============================================================================
# Database Class
# =============================================================================


class Database:
    """SQLite database for SoloTerm persistence.

    Every ``connection()`` call opens its own connection and commits or
    rolls back when the block exits. Inside ``transaction()`` all
    ``connection()`` calls made by the same thread share the transaction's
    connection instead, so a multi-step mutation is all-or-nothing.
    """

    SCHEMA_VERSION = 2

    def __init__(
        self,
        db_path: str | Path | None = None,
        *,
        enable_wal: bool = True,
        busy_timeout_seconds: float = 5.0,
    ) -> None:
        """Initialize database.

        Args:
            db_path: Path to database file. If None, uses the configured location.
            enable_wal: Switch the file to write-ahead logging.
            busy_timeout_seconds: How long to wait for another writer.
        """
        if db_path is None:
            self.db_path = get_settings().storage.database_path
        else:
            self.db_path = Path(db_path)

        self.busy_timeout_seconds = busy_timeout_seconds
        self._local = threading.local()

        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        if enable_wal:
            self._enable_wal()

        self._init_schema()

        logger.info(f"Database initialized at {self.db_path}")

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path), timeout=self.busy_timeout_seconds)
        conn.row_factory = sqlite3.Row
        # Per-connection setting; must run outside a transaction
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def _enable_wal(self) -> None:
        conn = self._connect()
        try:
            conn.execute("PRAGMA journal_mode=WAL")
        finally:
            conn.close()

    @property
    def in_transaction(self) -> bool:
        """True if the calling thread is inside ``transaction()``."""
        return getattr(self._local, "connection", None) is not None

    @contextmanager
    def connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a database connection with proper cleanup.

        Joins the calling thread's open transaction if there is one.

        Raises:
            PersistenceError: If SQLite reports an error.
        """
        active = getattr(self._local, "connection", None)
        if active is not None:
            yield active
            return

        try:
            conn = self._connect()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Could not open database: {exc}", operation="connect") from exc

        try:
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise PersistenceError(f"Database error: {exc}", operation="execute") from exc
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    @contextmanager
    def transaction(self) -> Generator[sqlite3.Connection, None, None]:
        """Run a block inside one write transaction.

        The transaction starts with ``BEGIN IMMEDIATE``, so the write lock is
        held from the first read. Two transactions against the same file
        therefore never interleave their read-then-write sequences.
        Nested calls join the outer transaction.

        Raises:
            PersistenceError: If SQLite reports an error. Nothing is committed.
        """
        if self.in_transaction:
            yield self._local.connection
            return

        try:
            conn = self._connect()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Could not open database: {exc}", operation="connect") from exc

        self._local.connection = conn
        try:
            conn.execute("BEGIN IMMEDIATE")
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise PersistenceError(f"Transaction failed: {exc}", operation="transaction") from exc
        except Exception:
            conn.rollback()
            raise
        finally:
            self._local.connection = None
            conn.close()

    # =========================================================================
    # Schema
    # =========================================================================

    def _init_schema(self) -> None:
        """Initialize database schema."""
        with self.connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS characters (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    system TEXT NOT NULL,
                    role TEXT NOT NULL,
                    species TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS attributes (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    character_id INTEGER NOT NULL,
                    name TEXT NOT NULL,
                    value TEXT NOT NULL,
                    attribute_group INTEGER NOT NULL DEFAULT 0,
                    position_in_group INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    FOREIGN KEY (character_id) REFERENCES characters(id) ON DELETE CASCADE
                )
            """)

            # Attribute tables created before grouping existed
            self._ensure_column(cursor, "attributes", "attribute_group", "INTEGER NOT NULL DEFAULT 0")
            self._ensure_column(cursor, "attributes", "position_in_group", "INTEGER NOT NULL DEFAULT 0")

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_character_by_name
                ON characters(name)
            """)
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_attribute_by_character_id
                ON attributes(character_id)
            """)

            cursor.execute("""
                INSERT OR REPLACE INTO schema_version (version) VALUES (?)
            """, (self.SCHEMA_VERSION,))

    @staticmethod
    def _ensure_column(
        cursor: sqlite3.Cursor,
        table: str,
        column: str,
        definition: str,
    ) -> None:
        """Add ``column`` to ``table`` unless it is already there."""
        cursor.execute(f"PRAGMA table_info({table})")
        existing = {row["name"] for row in cursor.fetchall()}
        if column in existing:
            return
        cursor.execute(f"ALTER TABLE {table} ADD COLUMN {column} {definition}")
        logger.info(f"Added column {table}.{column}")

    def get_schema_version(self) -> int:
        with self.connection() as conn:
            row = conn.execute("SELECT MAX(version) FROM schema_version").fetchone()
            return row[0] or 0


# =============================================================================
# Singleton Instance
# =============================================================================


_database_instance: Database | None = None


def get_database() -> Database:
    """Get the global database instance.

    Returns:
        Database singleton built from the storage settings.
    """
    global _database_instance

    if _database_instance is None:
        storage = get_settings().storage
        _database_instance = Database(
            storage.database_path,
            enable_wal=storage.enable_wal,
            busy_timeout_seconds=storage.busy_timeout_seconds,
        )

    return _database_instance


def reset_database() -> None:
    """Forget the global database instance so the next call rebuilds it."""
    global _database_instance
    _database_instance = None
