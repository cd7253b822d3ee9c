"""
Search module for the paper index.

Provides keyword search over filenames, tag search and tag counts, and
single-record lookup, all read from the queryable index.
"""

from .models import SearchQuery
from .query_parser import QueryParser
from .query_engine import QueryEngine

__all__ = [
    "SearchQuery",
    "QueryParser",
    "QueryEngine"
]
