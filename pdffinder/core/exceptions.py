"""
Custom exception hierarchy for PDF Finder.

Provides specific exception types for different failure modes:
configuration errors, extraction failures, database issues, search problems,
and run-level indexing failures.
"""


class PDFSearchError(Exception):
    """Base exception for all PDF Finder errors."""

    def __init__(self, message: str, details: dict = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(PDFSearchError):
    """Raised when configuration is invalid or missing."""
    pass


class ExtractionError(PDFSearchError):
    """Raised by a backend when PDF text extraction fails."""

    def __init__(self, message: str, filepath: str = None, details: dict = None):
        """
        Initialize extraction error.

        Args:
            message: Error description.
            filepath: Path to the problematic PDF file.
            details: Additional context.
        """
        super().__init__(message, details)
        self.filepath = filepath


class DatabaseError(PDFSearchError):
    """Raised when SQLite operations fail."""
    pass


class SearchError(PDFSearchError):
    """Raised when search query execution fails."""

    def __init__(self, message: str, query: str = None, details: dict = None):
        """
        Initialize search error.

        Args:
            message: Error description.
            query: The problematic search query.
            details: Additional context.
        """
        super().__init__(message, details)
        self.query = query


class IndexingError(PDFSearchError):
    """Raised when a folder indexing run fails as a whole."""

    def __init__(self, message: str, folder: str = None, details: dict = None):
        """
        Initialize indexing error.

        Args:
            message: Error description.
            folder: Folder whose run failed.
            details: Additional context.
        """
        super().__init__(message, details)
        self.folder = folder
