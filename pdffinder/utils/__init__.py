"""
Utility module providing shared helper functions.

Contains file operations and text processing utilities used across
the application. Depends only on the standard library.
"""

from .file_utils import (
    get_file_signature,
    title_from_path
)
from .text_utils import (
    clean_text,
    estimate_page_count,
    truncate_text
)

__all__ = [
    "get_file_signature",
    "title_from_path",
    "clean_text",
    "estimate_page_count",
    "truncate_text"
]
