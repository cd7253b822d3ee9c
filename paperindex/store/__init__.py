"""
Record store module for the paper index.

Holds the bibliographic record model, the YAML/JSON document layout, and
the repository that keeps the structured and queryable index files in sync.
"""

from .models import BibliographicRecord, Notes, DEFAULT_TAGS
from .repository import RecordStore, pick_single_match

__all__ = [
    "BibliographicRecord",
    "Notes",
    "DEFAULT_TAGS",
    "RecordStore",
    "pick_single_match"
]
