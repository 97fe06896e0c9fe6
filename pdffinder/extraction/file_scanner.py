"""
File scanner for recursive PDF discovery.

Walks deeply nested directory structures with generator-based iteration,
following symbolic links while guarding against link cycles. Unreadable
subdirectories are logged and skipped.
"""

import os
from pathlib import Path
from typing import Dict, FrozenSet, Iterator, List, Union

from ..core import get_config, get_logger, IndexingError

logger = get_logger(__name__)


class FileScanner:
    """
    Recursively discovers PDF files in a directory tree.

    Uses generator-based iteration for memory efficiency when
    processing large collections.
    """

    def __init__(
        self,
        root_directory: Union[str, Path],
        extensions: List[str] = None
    ):
        """
        Initialize the file scanner.

        Args:
            root_directory: Directory to scan.
            extensions: File extensions to include (e.g., [".pdf"]),
                        matched case-insensitively.
        """
        if extensions is None:
            extensions = get_config().extraction.supported_extensions

        self.root_directory = Path(root_directory)
        self.extensions = {ext.lower() for ext in extensions}

    def _check_root(self) -> None:
        if not self.root_directory.exists():
            raise IndexingError(
                f"Folder does not exist: {self.root_directory}",
                folder=str(self.root_directory)
            )

        if not self.root_directory.is_dir():
            raise IndexingError(
                f"Not a folder: {self.root_directory}",
                folder=str(self.root_directory)
            )

        try:
            with os.scandir(self.root_directory):
                pass
        except OSError as e:
            raise IndexingError(
                f"Cannot read folder {self.root_directory}: {e}",
                folder=str(self.root_directory)
            )

    def scan(self) -> Iterator[Path]:
        """
        Scan directory and yield matching file paths.

        Symbolic links are followed. A directory whose real path is one of
        its own ancestors closes a cycle and is not descended into; the
        same target reached through sibling links is walked each time.

        Yields:
            Path objects for each matching regular file.

        Raises:
            IndexingError: If the root folder is missing or unreadable.
        """
        self._check_root()

        logger.info(f"Scanning directory: {self.root_directory}")

        file_count = 0
        top = os.fspath(self.root_directory)
        # dirpath -> real paths of the directories above it
        lineage: Dict[str, FrozenSet[str]] = {top: frozenset()}

        def on_error(error: OSError) -> None:
            logger.warning(f"Skipping unreadable directory {error.filename}: {error.strerror}")

        for dirpath, dirnames, filenames in os.walk(top, onerror=on_error, followlinks=True):
            ancestors = lineage.pop(dirpath, frozenset())
            real_dir = os.path.realpath(dirpath)
            if real_dir in ancestors:
                logger.debug(f"Skipping symlink cycle at {dirpath}")
                dirnames[:] = []
                continue

            chain = ancestors | {real_dir}
            for name in dirnames:
                lineage[os.path.join(dirpath, name)] = chain

            for filename in filenames:
                if os.path.splitext(filename)[1].lower() not in self.extensions:
                    continue

                filepath = Path(dirpath) / filename

                if not filepath.is_file():
                    continue

                file_count += 1

                if file_count % 1000 == 0:
                    logger.info(f"Discovered {file_count} files...")

                yield filepath

        logger.info(f"Scan complete: {file_count} files found")
