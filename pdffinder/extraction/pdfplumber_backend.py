"""
pdfplumber-based text extraction backend.

Better handling of complex layouts, tables, and multi-column documents.
Slower than pypdf, used as the fallback decoder.
"""

from pathlib import Path
from typing import Union

import pdfplumber

from ..core import get_logger, ExtractionError
from .pypdf_backend import PAGE_SEPARATOR

logger = get_logger(__name__)


class PDFPlumberBackend:
    """
    PDF text extraction using pdfplumber library.

    Provides more accurate extraction for complex layouts
    at the cost of slower processing.
    """

    name = "pdfplumber"

    def extract(self, filepath: Union[str, Path]) -> str:
        """
        Extract text from all pages of a PDF.

        Args:
            filepath: Path to the PDF file.

        Returns:
            Page texts joined with form feeds.

        Raises:
            ExtractionError: If the document cannot be opened.
        """
        filepath = Path(filepath)
        pages = []

        try:
            with pdfplumber.open(filepath) as pdf:
                logger.debug(f"Processing {len(pdf.pages)} pages: {filepath.name}")

                for page_num, page in enumerate(pdf.pages, start=1):
                    try:
                        pages.append(page.extract_text() or "")
                    except Exception as e:
                        logger.warning(
                            f"Failed to extract page {page_num} from {filepath.name}: {e}"
                        )
                        pages.append("")

        except Exception as e:
            raise ExtractionError(
                f"pdfplumber extraction failed: {e}",
                filepath=str(filepath)
            )

        return PAGE_SEPARATOR.join(pages)
