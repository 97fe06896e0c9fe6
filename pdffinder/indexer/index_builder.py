"""
Folder indexing pipeline for PDF Finder.

Each run walks one folder through DISCOVER -> DIFF -> EXTRACT -> COMMIT ->
FINALIZE: files are diffed against the stored snapshot by size and
modification time, changed files are extracted in a bounded thread pool,
and the results are committed in a single transaction.
"""

import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Set, Tuple, Union

from ..core import Config, get_config, get_logger, DatabaseError
from ..database import DatabaseManager, Document, DocumentRepository, init_schema, optimize_index
from ..extraction import FileScanner, PDFExtractor
from ..utils import get_file_signature, title_from_path

logger = get_logger(__name__)


class Stage(Enum):
    """Stages of a folder indexing run, in execution order."""
    DISCOVER = "discover"
    DIFF = "diff"
    EXTRACT = "extract"
    COMMIT = "commit"
    FINALIZE = "finalize"


@dataclass
class IndexingStats:
    """Statistics from an indexing run."""
    folder: str = ""
    files_scanned: int = 0
    files_indexed: int = 0
    files_unchanged: int = 0
    files_removed: int = 0
    files_failed: int = 0
    duration_ms: int = 0
    errors: List[Tuple[str, str]] = field(default_factory=list)


@dataclass
class PendingFile:
    """A file scheduled for extraction, with the signature seen by the diff."""
    path: Path
    size: int
    modified: int


class ResultCollector:
    """
    Thread-safe accumulators written by extraction tasks.

    Read only after every task has returned.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self.documents: List[Document] = []
        self.errors: List[Tuple[str, str]] = []

    def add_document(self, document: Document) -> None:
        with self._lock:
            self.documents.append(document)

    def add_error(self, path: str, reason: str) -> None:
        with self._lock:
            self.errors.append((path, reason))


class IndexBuilder:
    """
    Orchestrates incremental indexing of folders.

    Holds the shared database handle; concurrent runs over the same folder
    must be serialized by the caller.
    """

    def __init__(
        self,
        manager: DatabaseManager,
        extractor: PDFExtractor = None,
        max_workers: int = None,
        progress_callback: Callable[[int, int, str], None] = None,
        config: Config = None
    ):
        """
        Initialize the index builder.

        Args:
            manager: Shared database handle.
            extractor: Extraction adapter. Defaults to a PDFExtractor built
                       from the same configuration.
            max_workers: Extraction thread count. Defaults to config value,
                         then to the number of CPUs.
            progress_callback: Optional callback(current, total, filename)
                              called as files finish extracting.
            config: Configuration to use. Defaults to get_config().
        """
        self.config = config or get_config()
        self.manager = manager
        self.repository = DocumentRepository(manager)
        self.extractor = extractor or PDFExtractor(config=self.config)
        self.progress_callback = progress_callback

        self.max_workers = (
            max_workers
            or self.config.indexing.max_workers
            or os.cpu_count()
            or 1
        )
        self.error_sample_size = self.config.indexing.error_sample_size

        init_schema(manager, self.config.search.tokenizer)

    def index_folder(self, folder: Union[str, Path]) -> IndexingStats:
        """
        Run one incremental indexing pass over a folder.

        Args:
            folder: Folder to index.

        Returns:
            IndexingStats; files_indexed is the number of newly processed files.

        Raises:
            IndexingError: If the folder is missing or unreadable.
            DatabaseError: If the store cannot be read or the commit fails.
        """
        start_time = time.time()
        folder_path = os.path.abspath(os.path.expanduser(str(folder)))
        stats = IndexingStats(folder=folder_path)

        logger.info(f"Indexing folder: {folder_path}")

        self._enter(Stage.DISCOVER, folder_path)
        discovered = self._discover(folder_path)
        stats.files_scanned = len(discovered)

        self._enter(Stage.DIFF, folder_path)
        pending, stale = self._diff(folder_path, discovered, stats)

        self._enter(Stage.EXTRACT, folder_path)
        collector = self._extract_all(pending, folder_path)

        self._enter(Stage.COMMIT, folder_path)
        self._commit(folder_path, collector, stale, stats)

        self._enter(Stage.FINALIZE, folder_path)
        self.repository.record_folder_indexed(folder_path)

        if stats.files_indexed or stats.files_removed:
            try:
                optimize_index(self.manager)
            except DatabaseError as e:
                logger.warning(f"Index optimization skipped: {e.message}")

        stats.duration_ms = int((time.time() - start_time) * 1000)
        self._log_summary(stats)

        return stats

    @staticmethod
    def _enter(stage: Stage, folder_path: str) -> None:
        logger.debug(f"[{stage.value}] {folder_path}")

    def _discover(self, folder_path: str) -> Dict[str, Path]:
        """Walk the folder and key every matching file by its path string."""
        scanner = FileScanner(folder_path, self.config.extraction.supported_extensions)
        return {str(path): path for path in scanner.scan()}

    def _diff(
        self,
        folder_path: str,
        discovered: Dict[str, Path],
        stats: IndexingStats
    ) -> Tuple[List[PendingFile], Set[str]]:
        """
        Compare discovered files with the stored snapshot.

        Returns:
            Tuple of (files needing extraction, stored paths gone from disk).
        """
        known = self.repository.get_known_files(folder_path)
        pending = []

        for path_str, path in discovered.items():
            try:
                size, modified = get_file_signature(path)
            except OSError as e:
                logger.warning(f"Cannot stat {path_str}: {e}")
                stats.files_failed += 1
                stats.errors.append((path_str, f"cannot stat file: {e}"))
                continue

            if known.get(path_str) == (modified, size):
                stats.files_unchanged += 1
                continue

            pending.append(PendingFile(path=path, size=size, modified=modified))

        stale = set(known) - set(discovered)

        logger.info(
            f"{len(pending)} files to process, {stats.files_unchanged} unchanged, "
            f"{len(stale)} to remove"
        )

        return pending, stale

    def _extract_all(self, pending: List[PendingFile], folder_path: str) -> ResultCollector:
        """
        Extract pending files in parallel.

        Leaving the executor context waits for every task, so the collector
        is complete when this returns.
        """
        collector = ResultCollector()

        if not pending:
            return collector

        total = len(pending)
        completed = [0]
        progress_lock = threading.Lock()

        def task(item: PendingFile) -> None:
            try:
                collector.add_document(self._extract_file(item, folder_path, collector))
            except Exception as e:
                logger.error(f"Unexpected error processing {item.path}: {e}")
                collector.add_error(str(item.path), f"{type(e).__name__}: {e}")
            finally:
                if self.progress_callback:
                    with progress_lock:
                        completed[0] += 1
                        current = completed[0]
                    self._report_progress(current, total, item.path.name)

        workers = min(self.max_workers, total)
        logger.debug(f"Extracting {total} files with {workers} workers")

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="extract") as executor:
            for item in pending:
                executor.submit(task, item)

        return collector

    def _report_progress(self, current: int, total: int, filename: str) -> None:
        """Call the progress callback; a failing callback never fails the run."""
        try:
            self.progress_callback(current, total, filename)
        except Exception as e:
            logger.warning(f"Progress callback failed at {current}/{total}: {type(e).__name__}: {e}")

    def _extract_file(
        self,
        item: PendingFile,
        folder_path: str,
        collector: ResultCollector
    ) -> Document:
        """Extract one file; failed extractions still yield an empty document."""
        result = self.extractor.extract_result(item.path)

        if not result.ok:
            collector.add_error(str(item.path), result.error)

        return Document(
            path=str(item.path),
            title=title_from_path(item.path),
            content=result.text,
            size=item.size,
            modified=item.modified,
            pages=result.pages,
            folder_path=folder_path
        )

    def _commit(
        self,
        folder_path: str,
        collector: ResultCollector,
        stale: Set[str],
        stats: IndexingStats
    ) -> None:
        """Write all extracted documents at once, then drop stale entries."""
        stats.files_indexed = self.repository.insert_batch(collector.documents, folder_path)
        stats.errors.extend(collector.errors)
        stats.files_failed += len(collector.errors)

        for path in sorted(stale):
            try:
                stats.files_removed += self.repository.remove_by_path(path)
            except DatabaseError as e:
                logger.warning(f"Failed to remove stale entry {path}: {e.message}")
                stats.errors.append((path, f"removal failed: {e.message}"))

    def _log_summary(self, stats: IndexingStats) -> None:
        logger.info(
            f"Indexed {stats.folder}: {stats.files_indexed} processed, "
            f"{stats.files_unchanged} unchanged, {stats.files_removed} removed, "
            f"{stats.files_failed} failed in {stats.duration_ms}ms"
        )

        if stats.errors:
            sample = stats.errors[:self.error_sample_size]
            details = "; ".join(f"{Path(path).name}: {reason}" for path, reason in sample)
            more = len(stats.errors) - len(sample)
            suffix = f" (and {more} more)" if more > 0 else ""
            logger.warning(f"{len(stats.errors)} errors during indexing: {details}{suffix}")

