"""
Database schema definitions for PDF Finder.

Defines the documents table, the indexed folders table, the FTS5 virtual
table for full-text search and the triggers keeping it in sync.
"""

import sqlite3

from ..core import get_config, get_logger, DatabaseError
from .connection import DatabaseManager

logger = get_logger(__name__)


DOCUMENTS_TABLE = """
CREATE TABLE IF NOT EXISTS pdfs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    path TEXT UNIQUE NOT NULL,
    title TEXT NOT NULL,
    content TEXT NOT NULL,
    size INTEGER NOT NULL,
    modified INTEGER NOT NULL,
    pages INTEGER,
    folder_path TEXT DEFAULT ''
)
"""

FOLDERS_TABLE = """
CREATE TABLE IF NOT EXISTS indexed_folders (
    path TEXT PRIMARY KEY NOT NULL,
    last_indexed INTEGER NOT NULL
)
"""

DOCUMENTS_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_pdfs_folder_path ON pdfs(folder_path)",
    "CREATE INDEX IF NOT EXISTS idx_pdfs_modified ON pdfs(modified)",
    "CREATE INDEX IF NOT EXISTS idx_pdfs_size ON pdfs(size)"
]


def _get_fts_table_sql(tokenizer: str = None) -> str:
    """Generate FTS5 table creation SQL with configured tokenizer."""
    if tokenizer is None:
        tokenizer = get_config().search.tokenizer

    return f"""
    CREATE VIRTUAL TABLE IF NOT EXISTS pdfs_fts USING fts5(
        path UNINDEXED,
        title,
        content,
        content='pdfs',
        content_rowid='id',
        tokenize='{tokenizer}'
    )
    """


FTS_TRIGGERS = [
    """
    CREATE TRIGGER IF NOT EXISTS pdfs_ai AFTER INSERT ON pdfs BEGIN
        INSERT INTO pdfs_fts(rowid, path, title, content)
        VALUES (new.id, new.path, new.title, new.content);
    END
    """,
    """
    CREATE TRIGGER IF NOT EXISTS pdfs_ad AFTER DELETE ON pdfs BEGIN
        INSERT INTO pdfs_fts(pdfs_fts, rowid, path, title, content)
        VALUES ('delete', old.id, old.path, old.title, old.content);
    END
    """,
    """
    CREATE TRIGGER IF NOT EXISTS pdfs_au AFTER UPDATE ON pdfs BEGIN
        INSERT INTO pdfs_fts(pdfs_fts, rowid, path, title, content)
        VALUES ('delete', old.id, old.path, old.title, old.content);
        INSERT INTO pdfs_fts(rowid, path, title, content)
        VALUES (new.id, new.path, new.title, new.content);
    END
    """
]


def _migrate_documents_table(cur: sqlite3.Cursor) -> None:
    """Add columns missing from databases created by older versions."""
    columns = {row["name"] for row in cur.execute("PRAGMA table_info(pdfs)")}

    if "folder_path" not in columns:
        logger.info("Migrating pdfs table: adding folder_path column")
        cur.execute("ALTER TABLE pdfs ADD COLUMN folder_path TEXT DEFAULT ''")


def init_schema(manager: DatabaseManager, tokenizer: str = None) -> None:
    """
    Initialize database schema if not exists.

    Creates the documents and folders tables, the FTS5 virtual table,
    indexes and synchronization triggers.

    Args:
        manager: Database handle to initialize.
        tokenizer: FTS5 tokenizer arguments. Defaults to config value.
    """
    logger.debug("Initializing database schema")

    with manager.cursor() as cur:
        cur.execute(FOLDERS_TABLE)
        cur.execute(DOCUMENTS_TABLE)

        _migrate_documents_table(cur)

        for index_sql in DOCUMENTS_INDEXES:
            cur.execute(index_sql)

        try:
            cur.execute(_get_fts_table_sql(tokenizer))
        except sqlite3.OperationalError as e:
            raise DatabaseError(f"Failed to create FTS table: {e}")

        for trigger_sql in FTS_TRIGGERS:
            cur.execute(trigger_sql)

    logger.debug("Schema initialization complete")


def optimize_index(manager: DatabaseManager) -> None:
    """Merge FTS5 index segments and refresh query planner statistics."""
    with manager.cursor() as cur:
        cur.execute("INSERT INTO pdfs_fts(pdfs_fts) VALUES('optimize')")
        cur.execute("ANALYZE")

    logger.debug("Optimized full-text index")


def get_statistics(manager: DatabaseManager) -> dict:
    """
    Get database statistics for the command line summary.

    Returns:
        Dictionary with document counts and size info.
    """
    with manager.connection() as conn:
        stats = {}

        row = conn.execute(
            "SELECT COUNT(*) as count, SUM(size) as total FROM pdfs"
        ).fetchone()
        stats["total_documents"] = row["count"]
        stats["total_size_mb"] = round((row["total"] or 0) / (1024 * 1024), 2)

        row = conn.execute(
            "SELECT COUNT(*) as count FROM pdfs WHERE content = ''"
        ).fetchone()
        stats["documents_without_text"] = row["count"]

        row = conn.execute(
            "SELECT COUNT(*) as count FROM indexed_folders"
        ).fetchone()
        stats["total_folders"] = row["count"]

    return stats
