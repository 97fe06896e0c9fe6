"""
PDF extraction module for PDF Finder.

Provides file discovery and crash-isolated text extraction with
multiple backends (pypdf and pdfplumber).
"""

from .file_scanner import FileScanner
from .pypdf_backend import PyPDFBackend
from .pdfplumber_backend import PDFPlumberBackend
from .extractor import PDFExtractor, SizeBounds, ExtractionResult

__all__ = [
    "FileScanner",
    "PyPDFBackend",
    "PDFPlumberBackend",
    "PDFExtractor",
    "SizeBounds",
    "ExtractionResult"
]
