"""
pypdf-based text extraction backend.

Fast extraction suitable for most standard PDF files.
Handles encryption detection and empty password decryption.
"""

from pathlib import Path
from typing import Union

from pypdf import PdfReader

from ..core import get_logger, ExtractionError

logger = get_logger(__name__)

PAGE_SEPARATOR = "\f"


class PyPDFBackend:
    """
    PDF text extraction using the pypdf library.

    Provides fast extraction for standard PDFs with basic
    encryption handling.
    """

    name = "pypdf"

    def extract(self, filepath: Union[str, Path]) -> str:
        """
        Extract text from all pages of a PDF.

        Args:
            filepath: Path to the PDF file.

        Returns:
            Page texts joined with form feeds, one separator per page break.

        Raises:
            ExtractionError: If the document cannot be opened or decrypted.
        """
        filepath = Path(filepath)
        pages = []

        try:
            reader = PdfReader(filepath)

            if reader.is_encrypted:
                try:
                    reader.decrypt("")
                except Exception:
                    raise ExtractionError(
                        "PDF is encrypted and cannot be decrypted",
                        filepath=str(filepath)
                    )

            logger.debug(f"Processing {len(reader.pages)} pages: {filepath.name}")

            for page_num, page in enumerate(reader.pages, start=1):
                try:
                    pages.append(page.extract_text() or "")
                except Exception as e:
                    logger.warning(
                        f"Failed to extract page {page_num} from {filepath.name}: {e}"
                    )
                    pages.append("")

        except ExtractionError:
            raise
        except Exception as e:
            raise ExtractionError(
                f"pypdf extraction failed: {e}",
                filepath=str(filepath)
            )

        return PAGE_SEPARATOR.join(pages)
