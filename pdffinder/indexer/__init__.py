"""
Indexer module for orchestrating the PDF indexing pipeline.

Coordinates file scanning, change detection, parallel text extraction,
and transactional database storage.
"""

from .index_builder import IndexBuilder, IndexingStats, Stage

__all__ = [
    "IndexBuilder",
    "IndexingStats",
    "Stage"
]
