"""
Data models for search functionality.

Defines dataclasses for search filters and results used
throughout the search module.
"""

from dataclasses import asdict, dataclass
from datetime import date, datetime, timezone
from typing import Optional, Union

from ..core import get_logger

logger = get_logger(__name__)

SECONDS_PER_DAY = 86400

DateLike = Union[str, date, None]


def date_to_timestamp(value: DateLike) -> Optional[int]:
    """
    Convert a calendar date to the epoch timestamp of its UTC midnight.

    Args:
        value: A date, or a string in YYYY-MM-DD format.

    Returns:
        Seconds since epoch, or None if the value is empty or unparseable.
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        value = value.date()

    if not isinstance(value, date):
        try:
            value = datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
        except ValueError:
            logger.warning(f"Ignoring invalid date filter: {value!r}")
            return None

    midnight = datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    return int(midnight.timestamp())


@dataclass
class SearchFilters:
    """
    Optional constraints applied to matching documents.

    Attributes:
        min_size: Minimum file size in bytes, inclusive.
        max_size: Maximum file size in bytes, inclusive.
        date_from: Earliest modification date, inclusive.
        date_to: Latest modification date, extended to the end of that day.
    """
    min_size: Optional[int] = None
    max_size: Optional[int] = None
    date_from: DateLike = None
    date_to: DateLike = None

    @property
    def modified_from(self) -> Optional[int]:
        return date_to_timestamp(self.date_from)

    @property
    def modified_to(self) -> Optional[int]:
        timestamp = date_to_timestamp(self.date_to)
        if timestamp is None:
            return None
        return timestamp + SECONDS_PER_DAY


@dataclass
class SearchResult:
    """
    Represents a single search result.

    Attributes:
        path: Absolute path to the PDF file.
        title: Document title.
        size: File size in bytes.
        modified: Modification time, seconds since epoch.
        pages: Estimated page count.
        snippet: Content excerpt with highlighted matches.
        score: BM25 relevance score (lower is better in SQLite FTS5).
    """
    path: str
    title: str
    size: int
    modified: int
    pages: Optional[int] = None
    snippet: Optional[str] = None
    score: float = 0.0

    @property
    def display_score(self) -> float:
        """
        Convert internal score to display-friendly value.

        FTS5 BM25 returns negative scores where more negative = better match.
        This converts to positive where higher = better.
        """
        return abs(self.score)

    def to_dict(self) -> dict:
        """Serialize the result for a host shell."""
        data = asdict(self)
        data.pop("score")
        return data
