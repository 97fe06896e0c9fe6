"""
Document repository for the pdfs and indexed_folders tables.

Provides upserts keyed by path, the known-files snapshot used for
incremental indexing, removals and folder bookkeeping.
"""

import os
import sqlite3
import time
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from ..core import get_logger
from .connection import DatabaseManager

logger = get_logger(__name__)


@dataclass
class Document:
    """Represents a single indexed PDF file."""
    path: str
    title: str
    content: str
    size: int
    modified: int
    pages: Optional[int] = None
    folder_path: str = ""
    id: Optional[int] = None


@dataclass
class IndexedFolder:
    """A root directory tracked by the index."""
    path: str
    last_indexed: int
    pdf_count: int


UPSERT_SQL = """
    INSERT INTO pdfs (path, title, content, size, modified, pages, folder_path)
    VALUES (?, ?, ?, ?, ?, ?, ?)
    ON CONFLICT(path) DO UPDATE SET
        title = excluded.title,
        content = excluded.content,
        size = excluded.size,
        modified = excluded.modified,
        pages = excluded.pages,
        folder_path = CASE
            WHEN COALESCE(pdfs.folder_path, '') = '' THEN excluded.folder_path
            ELSE pdfs.folder_path
        END
"""


class DocumentRepository:
    """
    Repository for document and folder persistence.

    Re-indexing a path updates its row in place, so the row id is stable
    and the full-text index is refreshed by the update trigger. A document
    keeps the folder that first indexed it when a nested or enclosing
    tracked folder re-indexes it.
    """

    def __init__(self, manager: DatabaseManager):
        """
        Args:
            manager: Shared database handle.
        """
        self.manager = manager

    @staticmethod
    def _params(document: Document, folder_path: str) -> tuple:
        return (
            document.path,
            document.title,
            document.content,
            document.size,
            document.modified,
            document.pages,
            folder_path
        )

    def insert_or_replace(self, document: Document, folder_path: str) -> int:
        """
        Insert a document, replacing any existing row with the same path.

        Args:
            document: Document to store.
            folder_path: Indexed folder owning the document if it is new.

        Returns:
            Row ID of the stored document.
        """
        with self.manager.cursor() as cur:
            cur.execute(UPSERT_SQL, self._params(document, folder_path))
            row = cur.execute(
                "SELECT id, folder_path FROM pdfs WHERE path = ?", (document.path,)
            ).fetchone()

        document.id = row["id"]
        document.folder_path = row["folder_path"]
        return document.id

    def insert_batch(self, documents: Iterable[Document], folder_path: str) -> int:
        """
        Insert or replace multiple documents in a single transaction.

        Either every document is stored or, on failure, none is.

        Args:
            documents: Documents to store.
            folder_path: Indexed folder owning the new documents.

        Returns:
            Number of documents written.

        Raises:
            DatabaseError: If any write fails; the batch is rolled back.
        """
        params = [self._params(doc, folder_path) for doc in documents]

        if not params:
            return 0

        with self.manager.cursor() as cur:
            cur.executemany(UPSERT_SQL, params)

        logger.debug(f"Committed batch of {len(params)} documents for {folder_path}")
        return len(params)

    def get_known_files(self, folder_path: str) -> Dict[str, Tuple[int, int]]:
        """
        Snapshot of the files stored under a folder.

        Covers documents owned by the folder and every stored path inside
        it, including those owned by a nested tracked folder.

        Args:
            folder_path: Indexed folder path.

        Returns:
            Mapping of path to (modified, size).
        """
        known = {}
        prefix = folder_path if folder_path.endswith(os.sep) else folder_path + os.sep

        with self.manager.connection() as conn:
            rows = conn.execute(
                "SELECT path, modified, size FROM pdfs "
                "WHERE folder_path = ? OR substr(path, 1, ?) = ?",
                (folder_path, len(prefix), prefix)
            ).fetchall()

        for row in rows:
            try:
                known[row["path"]] = (int(row["modified"]), int(row["size"]))
            except (TypeError, ValueError) as e:
                logger.warning(f"Skipping undecodable row for {row['path']}: {e}")

        return known

    def get_by_path(self, path: str) -> Optional[Document]:
        """
        Fetch a document by its path.

        Returns:
            Document object or None.
        """
        with self.manager.connection() as conn:
            row = conn.execute(
                "SELECT * FROM pdfs WHERE path = ?", (path,)
            ).fetchone()

        if row:
            return self._row_to_document(row)
        return None

    def remove_by_path(self, path: str) -> int:
        """
        Delete the document stored for a path.

        Returns:
            Number of rows deleted.
        """
        with self.manager.cursor() as cur:
            cur.execute("DELETE FROM pdfs WHERE path = ?", (path,))
            deleted = cur.rowcount

        if deleted > 0:
            logger.debug(f"Removed document: {path}")

        return deleted

    def remove_pdfs_for_folder(self, folder_path: str) -> int:
        """
        Delete every document owned by a folder, keeping the folder record.

        Returns:
            Number of rows deleted.
        """
        with self.manager.cursor() as cur:
            cur.execute("DELETE FROM pdfs WHERE folder_path = ?", (folder_path,))
            return cur.rowcount

    def remove_folder(self, folder_path: str) -> int:
        """
        Stop tracking a folder: delete its documents and its folder record.

        Returns:
            Number of documents deleted.
        """
        with self.manager.cursor() as cur:
            cur.execute("DELETE FROM pdfs WHERE folder_path = ?", (folder_path,))
            deleted = cur.rowcount
            cur.execute("DELETE FROM indexed_folders WHERE path = ?", (folder_path,))

        logger.info(f"Removed folder {folder_path} ({deleted} documents)")
        return deleted

    def clear_all(self) -> None:
        """Delete all documents and folder records."""
        with self.manager.cursor() as cur:
            cur.execute("DELETE FROM pdfs")
            cur.execute("DELETE FROM indexed_folders")

        logger.warning("Cleared all indexed documents and folders")

    def record_folder_indexed(self, folder_path: str, timestamp: int = None) -> None:
        """
        Upsert the last-indexed timestamp of a folder.

        Args:
            folder_path: Indexed folder path.
            timestamp: Seconds since epoch. Defaults to now.
        """
        if timestamp is None:
            timestamp = int(time.time())

        with self.manager.cursor() as cur:
            cur.execute(
                "INSERT OR REPLACE INTO indexed_folders (path, last_indexed) VALUES (?, ?)",
                (folder_path, timestamp)
            )

    def list_indexed_folders(self) -> List[IndexedFolder]:
        """
        List tracked folders, most recently indexed first.

        Returns:
            IndexedFolder objects annotated with their live document count.
        """
        with self.manager.connection() as conn:
            rows = conn.execute("""
                SELECT f.path, f.last_indexed, COUNT(p.id) AS pdf_count
                FROM indexed_folders f
                LEFT JOIN pdfs p ON p.folder_path = f.path
                GROUP BY f.path
                ORDER BY f.last_indexed DESC, f.path
            """).fetchall()

        folders = []
        for row in rows:
            try:
                folders.append(IndexedFolder(
                    path=row["path"],
                    last_indexed=int(row["last_indexed"]),
                    pdf_count=int(row["pdf_count"])
                ))
            except (TypeError, ValueError) as e:
                logger.warning(f"Skipping undecodable folder row: {e}")

        return folders

    def count(self) -> int:
        """
        Get total document count.

        Returns:
            Number of indexed documents.
        """
        with self.manager.connection() as conn:
            row = conn.execute("SELECT COUNT(*) as count FROM pdfs").fetchone()
            return row["count"]

    @staticmethod
    def _row_to_document(row: sqlite3.Row) -> Document:
        """Convert a database row to a Document object."""
        return Document(
            id=row["id"],
            path=row["path"],
            title=row["title"],
            content=row["content"],
            size=row["size"],
            modified=row["modified"],
            pages=row["pages"],
            folder_path=row["folder_path"] or ""
        )
