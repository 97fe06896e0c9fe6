"""
Search module for FTS5 full-text search with BM25 ranking.

Provides query normalization, search execution, and result models
for PDF Finder.
"""

from .models import SearchResult, SearchFilters
from .query_parser import QueryParser
from .bm25_engine import BM25Engine

__all__ = [
    "SearchResult",
    "SearchFilters",
    "QueryParser",
    "BM25Engine"
]
