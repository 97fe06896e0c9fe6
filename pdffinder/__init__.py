"""
PDF Finder package.

Indexes local PDF collections into SQLite with FTS5 full-text search and
answers ranked, filtered queries with highlighted snippets.
"""

__version__ = "1.0.0"
