"""
SQLite connection management for PDF Finder.

A DatabaseManager owns the single connection to the index file and
serializes every operation through a re-entrant lock, so the same handle can
be shared by the indexing pipeline, its worker threads and the search engine.
"""

import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional, Union

from ..core import get_config, get_logger, DatabaseError

logger = get_logger(__name__)

MEMORY_DATABASE = ":memory:"

PRAGMAS = [
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
    "PRAGMA cache_size=-64000",  # 64MB cache
    "PRAGMA temp_store=MEMORY",
    "PRAGMA busy_timeout=5000",
    "PRAGMA recursive_triggers=ON",
]


class DatabaseManager:
    """
    Owns the SQLite connection backing the document store.

    Only one store operation runs at a time: connection() and cursor() hold
    the manager lock for the lifetime of the context.
    """

    def __init__(self, db_path: Union[str, Path] = None):
        """
        Initialize database manager.

        Args:
            db_path: Path to SQLite database file. Defaults to config value.
        """
        if db_path is None:
            db_path = get_config().paths.database_path

        self.db_path = db_path if str(db_path) == MEMORY_DATABASE else Path(db_path)

        if isinstance(self.db_path, Path):
            try:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                logger.warning(f"Cannot create database directory {self.db_path.parent}: {e}")

        self._lock = threading.RLock()
        self._connection: Optional[sqlite3.Connection] = None

    def _create_connection(self) -> sqlite3.Connection:
        """Create a new database connection with optimal settings."""
        try:
            conn = sqlite3.connect(
                str(self.db_path),
                check_same_thread=False,
                timeout=30.0
            )

            conn.row_factory = sqlite3.Row

            for pragma in PRAGMAS:
                conn.execute(pragma)

            logger.debug(f"Opened database: {self.db_path}")
            return conn

        except (sqlite3.Error, OSError) as e:
            raise DatabaseError(
                f"Failed to connect to database: {e}",
                {"path": str(self.db_path)}
            )

    def _get_connection(self) -> sqlite3.Connection:
        if self._connection is None:
            self._connection = self._create_connection()
        return self._connection

    @contextmanager
    def connection(self) -> Generator[sqlite3.Connection, None, None]:
        """
        Context manager for read access to the shared connection.

        Yields:
            SQLite connection with Row factory enabled.

        Raises:
            DatabaseError: If the database is unreachable or a query fails.
        """
        with self._lock:
            conn = self._get_connection()
            try:
                yield conn
            except sqlite3.Error as e:
                raise DatabaseError(f"Database query failed: {e}") from e

    @contextmanager
    def cursor(self, commit: bool = True) -> Generator[sqlite3.Cursor, None, None]:
        """
        Context manager for a transactional cursor.

        Everything executed through the cursor is committed together on
        success and rolled back on any exception.

        Args:
            commit: Whether to commit on successful exit.

        Yields:
            SQLite cursor for query execution.

        Raises:
            DatabaseError: If a statement or the commit fails.
        """
        with self._lock:
            conn = self._get_connection()
            cursor = conn.cursor()

            try:
                yield cursor
                if commit:
                    conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                raise DatabaseError(f"Database write failed: {e}") from e
            except Exception:
                conn.rollback()
                raise
            finally:
                cursor.close()

    def close(self) -> None:
        """Close the underlying connection if it was opened."""
        with self._lock:
            if self._connection is not None:
                self._connection.close()
                self._connection = None

    def __enter__(self) -> "DatabaseManager":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
