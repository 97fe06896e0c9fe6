"""
Tests for the exception hierarchy.
"""

import pytest

from pdffinder.core.exceptions import (
    PDFSearchError,
    ConfigurationError,
    ExtractionError,
    DatabaseError,
    SearchError,
    IndexingError,
)


class TestPDFSearchError:
    """Tests for the base exception."""

    def test_message_and_details(self):
        """Test that message and details are stored."""
        error = PDFSearchError("Something failed", {"key": "value"})

        assert error.message == "Something failed"
        assert error.details == {"key": "value"}
        assert str(error) == "Something failed"

    def test_details_default_to_empty_dict(self):
        """Test that details default to an empty dict."""
        error = PDFSearchError("Oops")

        assert error.details == {}


class TestExceptionHierarchy:
    """Tests that every error derives from PDFSearchError."""

    @pytest.mark.parametrize("cls", [
        ConfigurationError,
        ExtractionError,
        DatabaseError,
        SearchError,
        IndexingError,
    ])
    def test_subclasses_base(self, cls):
        """Test that callers can catch every error through the base class."""
        with pytest.raises(PDFSearchError):
            raise cls("failure")


class TestSpecificErrors:
    """Tests for the extra context carried by specific errors."""

    def test_extraction_error_filepath(self):
        """Test that ExtractionError keeps the file path."""
        error = ExtractionError("bad pdf", filepath="/docs/a.pdf")

        assert error.filepath == "/docs/a.pdf"
        assert error.message == "bad pdf"

    def test_search_error_query(self):
        """Test that SearchError keeps the failing query."""
        error = SearchError("syntax", query="hello AND")

        assert error.query == "hello AND"

    def test_indexing_error_folder(self):
        """Test that IndexingError keeps the folder."""
        error = IndexingError("missing", folder="/nowhere")

        assert error.folder == "/nowhere"
        assert error.details == {}
