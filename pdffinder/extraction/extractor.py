"""
Crash-isolated PDF extraction with size bounds and backend fallback.

PDFs are untrusted input: a malformed file may make a decoder raise anything
from ExtractionError to RecursionError. Every backend call runs inside a
boundary that turns such faults into an empty result, so extraction of one
file never propagates an error to its caller.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

from ..core import Config, get_config, get_logger, ExtractionError
from ..utils import clean_text, estimate_page_count
from .pypdf_backend import PyPDFBackend
from .pdfplumber_backend import PDFPlumberBackend

logger = get_logger(__name__)


BACKENDS = {
    "pypdf": PyPDFBackend,
    "pdfplumber": PDFPlumberBackend
}

NO_BACKEND = "none"

MB = 1024 * 1024


@dataclass(frozen=True)
class SizeBounds:
    """Accepted file size range in bytes, inclusive."""
    min_bytes: int = 100
    max_bytes: int = 100 * MB

    @classmethod
    def from_config(cls, config: Config = None) -> "SizeBounds":
        config = config or get_config()
        return cls(
            min_bytes=config.extraction.min_file_size_bytes,
            max_bytes=config.extraction.max_file_size_mb * MB
        )


@dataclass
class ExtractionResult:
    """
    Outcome of extracting one file.

    Attributes:
        text: Cleaned text, empty on failure.
        pages: Estimated page count, 0 on failure or empty text.
        error: Reason the file was rejected or failed, None on success.
    """
    text: str = ""
    pages: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class PDFExtractor:
    """
    Unified PDF extraction with fault isolation.

    Tries the primary backend first and consults the fallback only when
    the primary fails. Each backend is called at most once per file.
    """

    def __init__(
        self,
        primary_backend: str = None,
        fallback_backend: str = None,
        bounds: SizeBounds = None,
        config: Config = None
    ):
        """
        Initialize the extractor with configured backends.

        Args:
            primary_backend: Name of primary backend ("pypdf" or "pdfplumber").
            fallback_backend: Name of fallback backend, or "none".
            bounds: Default size bounds. Defaults to config values.
            config: Configuration to read defaults from. Defaults to get_config().
        """
        config = config or get_config()

        primary_name = primary_backend or config.extraction.primary_backend
        fallback_name = fallback_backend or config.extraction.fallback_backend

        if primary_name not in BACKENDS:
            raise ExtractionError(f"Unknown backend: {primary_name}")

        if fallback_name != NO_BACKEND and fallback_name not in BACKENDS:
            raise ExtractionError(f"Unknown backend: {fallback_name}")

        self.primary = BACKENDS[primary_name]()
        self.fallback = None
        if fallback_name not in (NO_BACKEND, primary_name):
            self.fallback = BACKENDS[fallback_name]()

        self.bounds = bounds or SizeBounds.from_config(config)

        logger.debug(
            f"Initialized extractor: primary={primary_name}, fallback={fallback_name}"
        )

    def extract(
        self,
        filepath: Union[str, Path],
        bounds: SizeBounds = None
    ) -> Tuple[str, int]:
        """
        Extract cleaned text and an estimated page count.

        Never raises: rejected or failing files yield ("", 0).

        Args:
            filepath: Path to the PDF file.
            bounds: Size bounds overriding the extractor defaults.

        Returns:
            Tuple of (text, page estimate).
        """
        result = self.extract_result(filepath, bounds)
        return result.text, result.pages

    def extract_result(
        self,
        filepath: Union[str, Path],
        bounds: SizeBounds = None
    ) -> ExtractionResult:
        """
        Extract a file and report why it failed, if it did.

        Args:
            filepath: Path to the PDF file.
            bounds: Size bounds overriding the extractor defaults.

        Returns:
            ExtractionResult; never raises.
        """
        filepath = Path(filepath)
        bounds = bounds or self.bounds

        try:
            size = os.stat(filepath).st_size
        except OSError as e:
            return self._reject(filepath, f"cannot read file: {e}")

        if size < bounds.min_bytes:
            return self._reject(
                filepath, f"file too small ({size} bytes), likely corrupt"
            )

        if size > bounds.max_bytes:
            return self._reject(
                filepath, f"file too large ({size / MB:.1f} MB)"
            )

        raw, error = self._run_isolated(self.primary, filepath)

        if raw is None and self.fallback:
            logger.debug(f"Trying fallback backend for: {filepath.name}")
            raw, fallback_error = self._run_isolated(self.fallback, filepath)
            if raw is None:
                error = f"{error}; {fallback_error}"

        if raw is None:
            return self._reject(filepath, error)

        return ExtractionResult(
            text=clean_text(raw),
            pages=estimate_page_count(raw)
        )

    @staticmethod
    def _run_isolated(backend, filepath: Path) -> Tuple[Optional[str], Optional[str]]:
        """
        Run one backend, converting any fault into an error message.

        Returns:
            Tuple of (raw text or None, error message or None).
        """
        try:
            return backend.extract(filepath), None
        except ExtractionError as e:
            return None, e.message
        except Exception as e:
            logger.warning(
                f"{backend.name} crashed on {filepath.name} "
                f"(possibly malformed or unsupported PDF): {type(e).__name__}: {e}"
            )
            return None, f"{backend.name} crashed: {type(e).__name__}: {e}"

    @staticmethod
    def _reject(filepath: Path, reason: str) -> ExtractionResult:
        logger.warning(f"Could not extract text from {filepath}: {reason}")
        return ExtractionResult(error=reason)
