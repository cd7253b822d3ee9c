"""
Indexer module for synchronizing the record store with the PDF directory.

Coordinates file scanning, filename parsing, and store writes for full
rebuilds and incremental updates.
"""

from .index_builder import IndexBuilder, IndexingStats, parse_confirmation

__all__ = [
    "IndexBuilder",
    "IndexingStats",
    "parse_confirmation"
]
