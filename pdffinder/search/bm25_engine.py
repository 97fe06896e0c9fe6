"""
BM25 search engine using SQLite FTS5.

Executes full-text searches with BM25 ranking over title and content,
applies size and date filters, and generates snippets with highlighted
matches.
"""

import time
from typing import List, Optional

from ..core import Config, get_config, get_logger, DatabaseError, SearchError
from ..database import DatabaseManager
from .models import SearchFilters, SearchResult

logger = get_logger(__name__)


class BM25Engine:
    """
    Full-text search engine using SQLite FTS5 with BM25 ranking.

    Expects queries already normalized by QueryParser.
    """

    def __init__(self, manager: DatabaseManager, config: Config = None):
        """
        Initialize the search engine with configuration.

        Args:
            manager: Shared database handle.
            config: Configuration holding ranking and snippet settings.
                    Defaults to get_config().
        """
        config = config or get_config()
        self.manager = manager

        self.title_weight = float(config.search.bm25_weights.title)
        self.content_weight = float(config.search.bm25_weights.content)
        self.snippet_tokens = int(config.search.snippet_tokens)
        self.highlight_open = config.search.highlight_open
        self.highlight_close = config.search.highlight_close
        self.ellipsis = config.search.ellipsis
        self.max_results = config.search.max_results

    def search(
        self,
        query: str,
        filters: Optional[SearchFilters] = None,
        limit: int = None
    ) -> List[SearchResult]:
        """
        Execute a full-text search.

        Args:
            query: FTS5 query string.
            filters: Optional size and date constraints.
            limit: Maximum results, capped at the configured maximum.

        Returns:
            Results ordered best match first.

        Raises:
            SearchError: If query execution fails.
        """
        query = " ".join(query.split()) if query else ""

        if not query:
            return []

        filters = filters or SearchFilters()
        limit = min(limit or self.max_results, self.max_results)

        start_time = time.time()

        sql, params = self._build_sql(query, filters, limit)

        try:
            with self.manager.connection() as conn:
                rows = conn.execute(sql, params).fetchall()
        except DatabaseError as e:
            logger.error(f"Search failed: {e.message}")
            raise SearchError(
                f"Search execution failed: {e.message}",
                query=query
            )

        results = []
        for row in rows:
            try:
                results.append(self._row_to_result(row))
            except (TypeError, ValueError, IndexError) as e:
                logger.warning(f"Skipping undecodable search result: {e}")

        execution_time = (time.time() - start_time) * 1000
        logger.debug(
            f"Search '{query}': {len(results)} results in {execution_time:.1f}ms"
        )

        return results

    def _build_sql(self, query: str, filters: SearchFilters, limit: int):
        """Assemble the ranked search statement and its parameters."""
        # path is UNINDEXED but still takes the first bm25 weight slot
        sql = """
            SELECT
                p.path,
                p.title,
                p.size,
                p.modified,
                p.pages,
                snippet(pdfs_fts, 2, ?, ?, ?, ?) AS snippet,
                bm25(pdfs_fts, 0.0, ?, ?) AS score
            FROM pdfs p
            INNER JOIN pdfs_fts ON p.id = pdfs_fts.rowid
            WHERE pdfs_fts MATCH ?
        """
        params = [
            self.highlight_open,
            self.highlight_close,
            self.ellipsis,
            self.snippet_tokens,
            self.title_weight,
            self.content_weight,
            query
        ]

        if filters.min_size is not None:
            sql += " AND p.size >= ?"
            params.append(filters.min_size)

        if filters.max_size is not None:
            sql += " AND p.size <= ?"
            params.append(filters.max_size)

        modified_from = filters.modified_from
        if modified_from is not None:
            sql += " AND p.modified >= ?"
            params.append(modified_from)

        modified_to = filters.modified_to
        if modified_to is not None:
            sql += " AND p.modified <= ?"
            params.append(modified_to)

        sql += " ORDER BY score LIMIT ?"
        params.append(limit)

        return sql, params

    @staticmethod
    def _row_to_result(row) -> SearchResult:
        return SearchResult(
            path=row["path"],
            title=row["title"],
            size=int(row["size"]),
            modified=int(row["modified"]),
            pages=row["pages"],
            snippet=row["snippet"] or None,
            score=float(row["score"])
        )
