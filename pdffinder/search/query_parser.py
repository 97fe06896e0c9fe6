"""
Query normalizer for FTS5 full-text search.

Bounds raw user input and rewrites it into FTS5 boolean syntax. Explicit
AND/OR/NOT operators are honored; otherwise multiple terms are joined with
OR so casual multi-word queries match any of their words.
"""

import re
from typing import List

from ..core import get_config, get_logger

logger = get_logger(__name__)


OPERATORS = ("AND", "OR", "NOT")

# Quoted phrases or runs of non-whitespace
_TOKEN_PATTERN = re.compile(r'"[^"]*"|\S+')

# Bare terms FTS5 accepts as-is, with an optional prefix wildcard
_PLAIN_TERM = re.compile(r"^\w+\*?$")


class QueryParser:
    """
    Normalizes raw search queries into FTS5 MATCH expressions.

    Malformed input is degraded rather than rejected: syntax characters are
    quoted away and dangling operators dropped, so the store never sees an
    expression it cannot parse.
    """

    def __init__(self, max_length: int = None, max_tokens: int = None):
        """
        Args:
            max_length: Maximum raw query length in characters.
            max_tokens: Maximum number of tokens kept.
        """
        config = get_config()
        self.max_length = max_length or config.search.max_query_length
        self.max_tokens = max_tokens or config.search.max_query_tokens

    def normalize(self, query: str) -> str:
        """
        Rewrite a raw query for the store.

        Args:
            query: Raw user input.

        Returns:
            FTS5 query string, empty if nothing searchable remains.
        """
        if not query:
            return ""

        if len(query) > self.max_length:
            logger.debug(f"Truncating query from {len(query)} to {self.max_length} characters")
            query = query[:self.max_length]

        tokens = self._tokenize(query)

        if len(tokens) > self.max_tokens:
            logger.debug(f"Truncating query from {len(tokens)} to {self.max_tokens} tokens")
            tokens = tokens[:self.max_tokens]

        tokens = [self._normalize_token(token) for token in tokens]
        tokens = self._drop_dangling_operators(tokens)

        if any(token in OPERATORS for token in tokens):
            return " ".join(tokens)

        if len(tokens) > 1:
            return " OR ".join(tokens)

        return " ".join(tokens)

    @staticmethod
    def _tokenize(query: str) -> List[str]:
        return _TOKEN_PATTERN.findall(query)

    @staticmethod
    def _normalize_token(token: str) -> str:
        """Uppercase operators and make every other token FTS5-safe."""
        upper = token.upper()
        if upper in OPERATORS:
            return upper

        if _PLAIN_TERM.match(token):
            return token

        if len(token) > 1 and token.startswith('"') and token.endswith('"'):
            return token

        return '"' + token.replace('"', '""') + '"'

    @staticmethod
    def _drop_dangling_operators(tokens: List[str]) -> List[str]:
        """
        Remove operators with no term on one side.

        Of two adjacent operators the later one is kept.
        """
        result: List[str] = []

        for token in tokens:
            if token in OPERATORS:
                if not result:
                    continue
                if result[-1] in OPERATORS:
                    result[-1] = token
                    continue
            result.append(token)

        while result and result[-1] in OPERATORS:
            result.pop()

        return result

