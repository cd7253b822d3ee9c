"""
Query engine over the queryable index.

All matching is plain substring containment, conjunctive across terms:

- keyword search looks at the PDF filename,
- tag search looks at the stored tag field (so "read" also matches "unread").

Results are ordered by filename, descending, which lists recent years first
under the ``<year>_...`` naming convention.
"""

from collections import Counter
from typing import Dict, List, Optional, Sequence, Union

from ..core import get_config, get_logger, IndexNotFoundError, UserInputError
from ..core.config_loader import Config
from ..store import BibliographicRecord, RecordStore, pick_single_match
from ..utils import contains_all
from .models import SearchQuery

logger = get_logger(__name__)

QueryInput = Union[SearchQuery, Sequence[str]]


class QueryEngine:
    """
    Read-only search over the records of the queryable index.

    The index file is read once per engine and cached; create a new engine
    to observe later index changes.
    """

    def __init__(
        self,
        config: Config = None,
        store: RecordStore = None,
        case_sensitive: Optional[bool] = None
    ):
        """
        Initialize the query engine.

        Args:
            config: Configuration. Defaults to the global config.
            store: Record store to read from. Built from config when omitted.
            case_sensitive: Default case mode for plain term lists.
                            If None, uses config value.
        """
        self.config = config or get_config()
        self.store = store or RecordStore(config=self.config)

        if case_sensitive is None:
            self.case_sensitive = self.config.search.case_sensitive
        else:
            self.case_sensitive = case_sensitive

        self._records: Optional[List[BibliographicRecord]] = None

    def records(self) -> List[BibliographicRecord]:
        """
        Get all records of the queryable index, in stored order.

        Raises:
            IndexNotFoundError: If the index is missing or empty.
        """
        if self._records is None:
            records = self.store.load_queryable()

            if not records:
                raise IndexNotFoundError(
                    f"Index is empty: {self.store.queryable_path}",
                    path=str(self.store.queryable_path)
                )

            self._records = records
            logger.debug(f"Loaded {len(records)} records")

        return self._records

    def find(self, keywords: QueryInput) -> List[BibliographicRecord]:
        """
        Find records whose filename contains every keyword.

        Args:
            keywords: SearchQuery or list of keyword strings.

        Returns:
            Matching records, filename descending.

        Raises:
            UserInputError: If no keyword is given.
            IndexNotFoundError: If the index is missing or empty.
        """
        query = self._as_query(keywords)

        if query.is_empty:
            raise UserInputError("Give at least one keyword to search for")

        matches = [
            record for record in self.records()
            if contains_all(record.filename, query.terms, query.case_sensitive)
        ]

        logger.info(f"find {query.terms}: {len(matches)} matches")
        return _sorted_by_filename(matches)

    def review_one(self, filename: str) -> BibliographicRecord:
        """
        Get the single record a filename fragment refers to.

        An exact filename wins over records that merely contain it.

        Args:
            filename: Full filename or a fragment of it.

        Returns:
            The matching record.

        Raises:
            UserInputError: If filename is empty.
            RecordNotFoundError: If nothing matches.
            AmbiguousMatchError: If several records match.
            IndexNotFoundError: If the index is missing or empty.
        """
        if not filename:
            raise UserInputError("Give a filename to look up")

        by_name = {}
        for record in self.records():
            if filename in record.filename:
                by_name.setdefault(record.filename, record)

        name = pick_single_match(filename, list(by_name))
        return by_name[name]

    def tags_of(self) -> Dict[str, int]:
        """
        Count how many records carry each tag.

        Returns:
            Mapping tag -> record count, ordered by tag name.
        """
        counts: Counter = Counter()

        for record in self.records():
            counts.update(set(record.tags))

        return {tag: counts[tag] for tag in sorted(counts)}

    def list_tags(self, tags: QueryInput) -> List[BibliographicRecord]:
        """
        Find records whose tag field contains every given tag.

        Args:
            tags: SearchQuery or list of tag strings.

        Returns:
            Matching records, filename descending.

        Raises:
            UserInputError: If no tag is given.
        """
        query = self._as_query(tags)

        if query.is_empty:
            raise UserInputError("Give at least one tag to search for")

        matches = [
            record for record in self.records()
            if contains_all(record.tags_text, query.terms, query.case_sensitive)
        ]

        logger.info(f"tags {query.terms}: {len(matches)} matches")
        return _sorted_by_filename(matches)

    def _as_query(self, terms: QueryInput) -> SearchQuery:
        if isinstance(terms, SearchQuery):
            return terms
        return SearchQuery(
            terms=[term for term in (terms or []) if term],
            case_sensitive=self.case_sensitive
        )


def _sorted_by_filename(records: List[BibliographicRecord]) -> List[BibliographicRecord]:
    return sorted(records, key=lambda record: record.filename, reverse=True)


if __name__ == "__main__":
    import sys

    engine = QueryEngine()

    if len(sys.argv) > 1:
        for record in engine.find(sys.argv[1:]):
            print(record.filename)
    else:
        for tag, count in engine.tags_of().items():
            print(f"{tag:<20} {count}")
