"""
Query parser for keyword and tag search.

Turns raw command line arguments into search terms. Arguments may hold
several terms separated by whitespace or, for tags, by commas as well.
"""

import re
from typing import Iterable, List

from ..core import get_logger
from .models import SearchQuery

logger = get_logger(__name__)

_KEYWORD_SPLIT = re.compile(r"\s+")
_TAG_SPLIT = re.compile(r"[,\s]+")


class QueryParser:
    """
    Normalizes user input into SearchQuery objects.

    Empty terms are dropped and duplicates removed, keeping first occurrence.
    """

    def __init__(self, case_sensitive: bool = True):
        """
        Initialize the parser.

        Args:
            case_sensitive: Case mode given to every parsed query.
        """
        self.case_sensitive = case_sensitive

    def parse_keywords(self, arguments: Iterable[str]) -> SearchQuery:
        """
        Parse filename keywords.

        Args:
            arguments: Raw arguments, e.g. ["2019", "Bevacqua"].

        Returns:
            SearchQuery with one term per keyword.
        """
        return SearchQuery(
            terms=self._split(arguments, _KEYWORD_SPLIT),
            case_sensitive=self.case_sensitive
        )

    def parse_tags(self, arguments: Iterable[str]) -> SearchQuery:
        """
        Parse tag names.

        Args:
            arguments: Raw arguments, e.g. ["new,unread"] or ["new", "unread"].

        Returns:
            SearchQuery with one term per tag.
        """
        return SearchQuery(
            terms=self._split(arguments, _TAG_SPLIT),
            case_sensitive=self.case_sensitive
        )

    def _split(self, arguments: Iterable[str], pattern: re.Pattern) -> List[str]:
        """Split every argument and collect distinct non-empty terms."""
        terms: List[str] = []

        for argument in arguments or []:
            for term in pattern.split(argument or ""):
                if term and term not in terms:
                    terms.append(term)

        logger.debug(f"Parsed terms: {terms}")
        return terms


if __name__ == "__main__":
    parser = QueryParser()

    print("=== Keywords ===")
    for args in (["2019", "Bevacqua"], ["2019 flood"], ["  "]):
        print(f"  {args} -> {parser.parse_keywords(args).terms}")

    print("\n=== Tags ===")
    for args in (["new,unread"], ["new", "read"], ["climate, floods"]):
        print(f"  {args} -> {parser.parse_tags(args).terms}")
