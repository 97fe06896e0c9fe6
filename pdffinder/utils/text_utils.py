"""
Text utility functions for PDF Finder.

Provides cleaning of extracted text, page-count estimation and
truncation helpers.
"""

import math
import re
import unicodedata


CHARS_PER_PAGE = 3000
PAGE_BREAK_MARKER = "\n\n\n"
MIN_PAGE_BREAK_MARKERS = 5
PAGE_BREAK_RATIO = 0.8

_WHITESPACE_RUN = re.compile(r"\s+")

_DROPPED_CATEGORIES = {"Cc", "Cf"}


def clean_text(text: str) -> str:
    """
    Normalize extracted text for indexing.

    Normalizes unicode, drops control (Cc) and format (Cf) characters such
    as NUL or zero-width spaces, and collapses every whitespace run
    (newlines, tabs and form feeds included) to one space. Private-use and
    unassigned code points are kept.

    Args:
        text: Raw text from PDF extraction.

    Returns:
        Cleaned single-line text.
    """
    if not text:
        return ""

    text = unicodedata.normalize("NFKC", text)

    text = "".join(
        char for char in text
        if unicodedata.category(char) not in _DROPPED_CATEGORIES
        or char.isspace()
    )

    return _WHITESPACE_RUN.sub(" ", text).strip()


def estimate_page_count(text: str) -> int:
    """
    Estimate the number of pages of raw extracted text.

    Form feeds are trusted first, then runs of blank lines, then a
    characters-per-page heuristic.

    Args:
        text: Raw text, before whitespace collapsing.

    Returns:
        Estimated page count, 0 for empty text.
    """
    if not text:
        return 0

    form_feeds = text.count("\f")
    if form_feeds > 0:
        return form_feeds + 1

    breaks = text.count(PAGE_BREAK_MARKER)
    if breaks > MIN_PAGE_BREAK_MARKERS:
        estimate = round(breaks * PAGE_BREAK_RATIO) + 1
        if estimate > 1:
            return estimate

    return max(1, math.ceil(len(text) / CHARS_PER_PAGE))


def truncate_text(text: str, max_length: int, suffix: str = "...") -> str:
    """
    Truncate text to maximum length with ellipsis.

    Args:
        text: Text to truncate.
        max_length: Maximum length including suffix.
        suffix: String to append when truncated.

    Returns:
        Truncated text or original if within limit.
    """
    if not text or len(text) <= max_length:
        return text

    truncate_at = max_length - len(suffix)
    if truncate_at <= 0:
        return suffix[:max_length]

    # Try to break at word boundary
    truncated = text[:truncate_at]
    last_space = truncated.rfind(" ")

    if last_space > truncate_at * 0.7:
        truncated = truncated[:last_space]

    return truncated + suffix
