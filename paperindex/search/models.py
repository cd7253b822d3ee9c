"""
Data models for search functionality.

Defines the query object passed from the command line to the query engine.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class SearchQuery:
    """
    Represents a keyword or tag query.

    Attributes:
        terms: Substrings that must all occur.
        case_sensitive: Whether matching respects case.
    """
    terms: List[str] = field(default_factory=list)
    case_sensitive: bool = True

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to match against."""
        return not self.terms


if __name__ == "__main__":
    query = SearchQuery(terms=["2019", "Bevacqua"])
    print(f"Query: {query}")
    print(f"Empty: {query.is_empty}")
