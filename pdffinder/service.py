"""
Command surface consumed by a host shell (GUI, CLI).

Every call returns a CommandResult holding either a value or a
human-readable error message; no exception crosses this boundary.
"""

import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Generic, List, Optional, TypeVar, Union

from .core import Config, get_config, get_logger, PDFSearchError
from .database import DatabaseManager, DocumentRepository, IndexedFolder, get_statistics, init_schema
from .indexer import IndexBuilder
from .search import BM25Engine, QueryParser, SearchFilters, SearchResult

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass
class CommandResult(Generic[T]):
    """Outcome of a service call: a value on success, a message on failure."""
    value: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class IndexResult:
    """Summary of a folder indexing run."""
    count: int
    duration_ms: int


class PDFFinderService:
    """
    Facade wiring the store, the indexing pipeline and the search engine
    around one database handle.
    """

    def __init__(self, config: Config = None, db_path: Union[str, Path] = None):
        """
        Args:
            config: Configuration to use. Defaults to get_config().
            db_path: Database file overriding the configured path.
        """
        self.config = config or get_config()
        self.manager = DatabaseManager(db_path or self.config.paths.database_path)
        self._ready = False
        self._builder: Optional[IndexBuilder] = None

    def _ensure_ready(self) -> None:
        if not self._ready:
            init_schema(self.manager, self.config.search.tokenizer)
            self._ready = True

    @property
    def repository(self) -> DocumentRepository:
        return DocumentRepository(self.manager)

    def _run(self, action: str, func, *args) -> CommandResult:
        try:
            self._ensure_ready()
            return CommandResult(value=func(*args))
        except PDFSearchError as e:
            logger.error(f"{action} failed: {e.message}")
            return CommandResult(error=f"{action} failed: {e.message}")
        except Exception as e:
            logger.exception(f"{action} failed unexpectedly")
            return CommandResult(error=f"{action} failed: {e}")

    def index_folder(self, path: Union[str, Path]) -> CommandResult[IndexResult]:
        """Incrementally index a folder."""
        return self._run("Indexing", self._index_folder, path)

    def _index_folder(self, path: Union[str, Path]) -> IndexResult:
        start = time.time()

        if self._builder is None:
            self._builder = IndexBuilder(self.manager, config=self.config)

        stats = self._builder.index_folder(path)
        return IndexResult(
            count=stats.files_indexed,
            duration_ms=int((time.time() - start) * 1000)
        )

    def search(
        self,
        query: str,
        filters: SearchFilters = None
    ) -> CommandResult[List[SearchResult]]:
        """Normalize a raw query and run it against the index."""
        return self._run("Search", self._search, query, filters)

    def _search(self, query: str, filters: Optional[SearchFilters]) -> List[SearchResult]:
        parser = QueryParser(
            max_length=self.config.search.max_query_length,
            max_tokens=self.config.search.max_query_tokens
        )
        normalized = parser.normalize(query)
        return BM25Engine(self.manager, self.config).search(normalized, filters)

    def get_indexed_folders(self) -> CommandResult[List[IndexedFolder]]:
        """List tracked folders, most recently indexed first."""
        return self._run("Listing folders", self.repository.list_indexed_folders)

    def remove_indexed_folder(self, path: str) -> CommandResult[Any]:
        """Stop tracking a folder and drop its documents."""
        return self._run("Removing folder", self._remove_folder, path)

    def _remove_folder(self, path: str) -> None:
        self.repository.remove_folder(os.path.abspath(os.path.expanduser(path)))

    def get_count(self) -> CommandResult[int]:
        """Number of indexed documents."""
        return self._run("Counting documents", self.repository.count)

    def get_statistics(self) -> CommandResult[dict]:
        """Document, size and folder totals for the index."""
        return self._run("Reading statistics", get_statistics, self.manager)

    def clear(self) -> CommandResult[Any]:
        """Remove every document and folder from the index."""
        return self._run("Clearing index", self.repository.clear_all)

    def close(self) -> None:
        self.manager.close()

    def __enter__(self) -> "PDFFinderService":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
