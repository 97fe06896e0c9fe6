"""
Pytest fixtures and configuration for the test suite.

Provides temporary directories, generated PDFs, temporary configurations
and databases so tests are isolated and never touch the user's index.
"""

import json
import pytest
import tempfile
import shutil
from pathlib import Path
from typing import Callable, Generator, List

import sys
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))


def build_pdf(pages: List[str]) -> bytes:
    """
    Build a minimal PDF with one line of Helvetica text per page.

    Byte offsets in the xref table are computed so strict readers accept it.
    """
    page_ids = [4 + 2 * i for i in range(len(pages))]
    kids = " ".join(f"{pid} 0 R" for pid in page_ids)

    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        f"<< /Type /Pages /Kids [{kids}] /Count {len(pages)} >>".encode(),
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    for pid, text in zip(page_ids, pages):
        escaped = text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")
        stream = f"BT /F1 12 Tf 72 720 Td ({escaped}) Tj ET".encode("latin-1")
        objects.append(
            f"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
            f"/Contents {pid + 1} 0 R /Resources << /Font << /F1 3 0 R >> >> >>".encode()
        )
        objects.append(
            f"<< /Length {len(stream)} >>\nstream\n".encode() + stream + b"\nendstream"
        )

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += f"{number} 0 obj\n".encode() + body + b"\nendobj\n"

    xref_offset = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode()
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode()
    out += (
        f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\n"
        f"startxref\n{xref_offset}\n%%EOF\n"
    ).encode()

    return bytes(out)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Create a temporary directory for test files.

    Yields:
        Path to temporary directory, cleaned up after test.
    """
    tmp = tempfile.mkdtemp(prefix="pdf_finder_test_")
    yield Path(tmp)
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def temp_config(temp_dir: Path) -> Generator[Path, None, None]:
    """
    Create a temporary config.json for testing.

    Args:
        temp_dir: Temporary directory fixture.

    Yields:
        Path to temporary config file.
    """
    config_dir = temp_dir / "config"
    config_dir.mkdir()

    output_dir = temp_dir / "output"
    output_dir.mkdir()

    config_data = {
        "paths": {
            "database_path": str(output_dir / "test.db"),
            "logs_directory": str(output_dir / "logs")
        },
        "extraction": {
            "primary_backend": "pypdf",
            "fallback_backend": "pdfplumber",
            "min_file_size_bytes": 100,
            "max_file_size_mb": 100,
            "supported_extensions": [".pdf"]
        },
        "indexing": {
            "max_workers": 4,
            "error_sample_size": 3
        },
        "search": {
            "max_results": 100,
            "snippet_tokens": 64,
            "highlight_open": "<mark>",
            "highlight_close": "</mark>",
            "ellipsis": "...",
            "bm25_weights": {
                "title": 1.0,
                "content": 1.0
            },
            "tokenizer": "porter unicode61 remove_diacritics 1",
            "max_query_length": 1000,
            "max_query_tokens": 50
        },
        "logging": {
            "level": "DEBUG",
            "format": "%(levelname)s - %(message)s",
            "max_file_size_mb": 1,
            "backup_count": 1
        }
    }

    config_path = config_dir / "config.json"
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(config_data, f)

    yield config_path


@pytest.fixture
def reset_config_singleton():
    """
    Reset the config singleton between tests.

    This ensures each test gets a fresh config instance.
    """
    from pdffinder.core import config_loader
    config_loader._config_instance = None
    yield
    config_loader._config_instance = None


@pytest.fixture
def reset_logger_singleton():
    """
    Reset the logger initialization flag between tests.

    Handlers installed during the test are closed so no log file stays open
    in a removed temporary directory.
    """
    import logging
    from pdffinder.core import logger
    logger._logger_initialized = False
    yield
    package_logger = logging.getLogger(logger.PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)
    logger._logger_initialized = False


@pytest.fixture
def configured(temp_config, reset_config_singleton):
    """Load the temporary config into the singleton."""
    from pdffinder.core.config_loader import get_config
    return get_config(temp_config)


@pytest.fixture
def temp_database(temp_dir: Path) -> Path:
    """
    Create path for a temporary database.

    Args:
        temp_dir: Temporary directory fixture.

    Returns:
        Path where test database should be created.
    """
    return temp_dir / "test.db"


@pytest.fixture
def store(configured, temp_database: Path):
    """
    A DatabaseManager on a temporary file with the schema initialized.

    Closed after the test.
    """
    from pdffinder.database import DatabaseManager, init_schema

    manager = DatabaseManager(temp_database)
    init_schema(manager)
    yield manager
    manager.close()


@pytest.fixture
def repository(store):
    """Repository bound to the temporary store."""
    from pdffinder.database import DocumentRepository
    return DocumentRepository(store)


@pytest.fixture
def pdf_factory(temp_dir: Path) -> Callable[..., Path]:
    """
    Factory writing generated PDFs.

    Usage: pdf_factory("name.pdf", ["page one text", "page two text"], directory=None)
    """
    def _make(name: str, pages: List[str], directory: Path = None) -> Path:
        target_dir = directory or temp_dir
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / name
        path.write_bytes(build_pdf(pages))
        return path

    return _make


@pytest.fixture
def sample_pdf(pdf_factory) -> Path:
    """A single-page PDF containing 'Hello World'."""
    return pdf_factory("sample.pdf", ["Hello World"])


@pytest.fixture
def malformed_pdf(temp_dir: Path) -> Path:
    """A file with a PDF header and a truncated, garbage body."""
    path = temp_dir / "broken.pdf"
    path.write_bytes(b"%PDF-1.7\n1 0 obj\n<< /Type /Catalog /Pages 2 0 R" + b"\x00\xff" * 200)
    return path


@pytest.fixture
def sample_pdf_collection(temp_dir: Path, pdf_factory) -> Path:
    """
    Create multiple PDF files in a nested directory structure.

    Returns:
        Path to the folder containing the PDFs.
    """
    data_dir = temp_dir / "data"

    pdf_factory("root_doc.pdf", ["Aviation safety report"], data_dir)
    pdf_factory("doc1.pdf", ["Maritime navigation rules"], data_dir / "folder1")
    pdf_factory("DOC2.PDF", ["Railway signalling manual"], data_dir / "folder1")
    pdf_factory("doc3.pdf", ["Air traffic control", "Second page of control"], data_dir / "folder2" / "deep")

    # Non-PDF file, should be ignored
    (data_dir / "readme.txt").write_text("Not a PDF")

    return data_dir
