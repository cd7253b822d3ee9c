"""
Data models for the record store.

Defines the bibliographic record kept for every PDF in the library and the
free-form notes attached to it.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from ..utils import join_authors, join_tags


DEFAULT_TAGS = ("new", "unread")


@dataclass
class Notes:
    """
    Reading notes attached to a paper.

    Attributes:
        key_question: The question the paper addresses.
        key_results: Main findings.
        key_impact: Why the paper matters.
        key_points: Free list of remarks.
    """
    key_question: str = ""
    key_results: str = ""
    key_impact: str = ""
    key_points: List[str] = field(default_factory=list)


@dataclass
class BibliographicRecord:
    """
    One entry of the index, keyed by PDF filename.

    Attributes:
        filename: Base name of the PDF, unique within the store.
        title: Topic token derived from the filename.
        authors: Ordered author tokens derived from the filename.
        venue: Journal or venue token derived from the filename.
        year: Leading filename token, kept verbatim.
        issue: Optional issue, filled in by hand.
        pages: Optional page range, filled in by hand.
        tags: Distinct tags in display order.
        notes: Reading notes.
    """
    filename: str
    title: str = ""
    authors: List[str] = field(default_factory=list)
    venue: str = ""
    year: str = ""
    issue: Optional[str] = None
    pages: Optional[str] = None
    tags: List[str] = field(default_factory=lambda: list(DEFAULT_TAGS))
    notes: Notes = field(default_factory=Notes)

    @property
    def authors_text(self) -> str:
        """Authors as stored: comma-and-space separated."""
        return join_authors(self.authors)

    @property
    def tags_text(self) -> str:
        """Tags as stored: comma-and-space separated."""
        return join_tags(self.tags)
