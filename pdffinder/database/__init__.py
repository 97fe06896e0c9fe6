"""
Database module for SQLite persistence with FTS5 full-text search.

Provides connection management, schema definitions, and persistence
operations for documents and indexed folders.
"""

from .connection import DatabaseManager
from .schema import init_schema, optimize_index, get_statistics
from .repository import DocumentRepository, Document, IndexedFolder

__all__ = [
    "DatabaseManager",
    "init_schema",
    "optimize_index",
    "get_statistics",
    "DocumentRepository",
    "Document",
    "IndexedFolder"
]
