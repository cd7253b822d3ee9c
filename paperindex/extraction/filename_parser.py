"""
Filename parser for bibliographic metadata.

Library PDFs follow the naming convention::

    <year>_<author>[_<author>...]_<venue>_<topic>.pdf

e.g. ``2019_Bevacqua_etal_SciAdv_CompoundFloodingStormSurgeEuropeClimateChange.pdf``.
The year is the first underscore-delimited token, the topic the last, the
venue the one before it, and everything in between are authors. Tokens that
contain an underscore themselves cannot be represented.
"""

import os
from typing import Iterable, Optional, Tuple

from ..store.models import BibliographicRecord

SEPARATOR = "_"


class FilenameParser:
    """
    Decodes structured filenames into bibliographic records.

    Parsing never fails: names with fewer tokens than the convention
    expects leave the unresolved fields empty.
    """

    def __init__(self, default_tags: Iterable[str] = None):
        """
        Initialize the parser.

        Args:
            default_tags: Tags given to every new record. Defaults to
                          ("new", "unread").
        """
        self.default_tags = list(default_tags) if default_tags is not None else None

    def parse(self, filename: str) -> BibliographicRecord:
        """
        Parse a PDF base name into a fresh record.

        Args:
            filename: File base name including its extension.

        Returns:
            BibliographicRecord with year, authors, venue and title filled in.
        """
        stem, _ = os.path.splitext(filename)

        year, remainder = _take_first(stem)
        title, remainder = _take_last(remainder)
        venue, remainder = _take_last(remainder)
        authors = [token for token in remainder.split(SEPARATOR) if token] if remainder else []

        record = BibliographicRecord(
            filename=filename,
            title=title,
            authors=authors,
            venue=venue,
            year=year,
        )

        if self.default_tags is not None:
            record.tags = list(self.default_tags)

        return record


def compose_filename(record: BibliographicRecord, extension: str = ".pdf") -> str:
    """
    Rebuild the conventional filename from a record's derived fields.

    Args:
        record: Record with year, authors, venue and title.
        extension: Extension to append, including the dot.

    Returns:
        Filename following the library naming convention.
    """
    tokens = [record.year, *record.authors, record.venue, record.title]
    return SEPARATOR.join(token for token in tokens if token) + extension


def _take_first(text: str) -> Tuple[str, str]:
    """Split off the leading token; returns (token, rest)."""
    head, _, rest = text.partition(SEPARATOR)
    return head, rest


def _take_last(text: str) -> Tuple[str, str]:
    """Split off the trailing token; returns (token, rest)."""
    if not text:
        return "", ""
    rest, _, tail = text.rpartition(SEPARATOR)
    return tail, rest


_default_parser: Optional[FilenameParser] = None


def parse_filename(filename: str) -> BibliographicRecord:
    """Parse a filename with the default tag set."""
    global _default_parser

    if _default_parser is None:
        _default_parser = FilenameParser()

    return _default_parser.parse(filename)


if __name__ == "__main__":
    import sys

    names = sys.argv[1:] or [
        "2019_Bevacqua_etal_SciAdv_CompoundFloodingStormSurgeEuropeClimateChange.pdf",
        "2021_Smith_Jones_Nature_Drought.pdf",
        "2020_Notes.pdf",
    ]

    for name in names:
        record = parse_filename(name)
        print(name)
        print(f"  year:    {record.year}")
        print(f"  authors: {record.authors_text}")
        print(f"  venue:   {record.venue}")
        print(f"  title:   {record.title}")
