"""
Record store for the paper index.

The structured YAML file is authoritative and hand-edited; the JSON file is
derived from it and never edited. Writes go in one direction only: records
are appended to the YAML file, and the JSON file is regenerated from the YAML
file as a whole.

There is no locking. Two processes updating the index at the same time can
interleave their appends.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Set, Union

import yaml

from ..core import (
    get_config,
    get_logger,
    AmbiguousMatchError,
    IndexNotFoundError,
    RecordNotFoundError,
    StoreFormatError
)
from ..core.config_loader import Config
from ..utils import append_text, atomic_write_text, get_mtime
from .models import BibliographicRecord
from .schema import (
    FILENAME_KEY,
    ROOT_KEY,
    dump_entries,
    dump_queryable,
    dump_structured,
    entry_to_record,
    load_structured
)

logger = get_logger(__name__)


def pick_single_match(query: str, names: Sequence[str], kind: str = "paper") -> str:
    """
    Resolve a lookup to exactly one name.

    A name equal to the query wins outright. Otherwise exactly one name must
    contain the query.

    Args:
        query: Filename or fragment the user typed.
        names: Candidate names that contain the query.
        kind: Word used in error messages.

    Returns:
        The selected name.

    Raises:
        RecordNotFoundError: If names is empty.
        AmbiguousMatchError: If several names match and none equals query.
    """
    if query in names:
        return query

    unique = list(dict.fromkeys(names))

    if not unique:
        raise RecordNotFoundError(f"No {kind} matches '{query}'", query=query)

    if len(unique) > 1:
        raise AmbiguousMatchError(
            f"'{query}' matches {len(unique)} {kind}s: {', '.join(unique)}",
            query=query,
            candidates=unique
        )

    return unique[0]


class RecordStore:
    """
    Reads and writes the two persisted forms of the index.

    Provides append-only updates of the structured form, full rewrites for
    rebuilds, regeneration of the queryable form, and line lookup for the
    editor integration.
    """

    def __init__(
        self,
        structured_path: Union[str, Path] = None,
        queryable_path: Union[str, Path] = None,
        config: Config = None
    ):
        """
        Initialize the record store.

        Args:
            structured_path: YAML store path. Defaults to config value.
            queryable_path: JSON store path. Defaults to config value.
            config: Configuration to read defaults from.
        """
        if structured_path is None or queryable_path is None:
            config = config or get_config()

        self.structured_path = Path(structured_path or config.paths.structured_index)
        self.queryable_path = Path(queryable_path or config.paths.queryable_index)

    def exists(self) -> bool:
        """Check whether the structured store has been created."""
        return self.structured_path.is_file()

    def load_document(self) -> Dict[str, Any]:
        """
        Read the structured store.

        Returns:
            Parsed document with an ``Index`` list.

        Raises:
            IndexNotFoundError: If the structured store does not exist.
            StoreFormatError: If it cannot be parsed.
        """
        if not self.exists():
            raise IndexNotFoundError(
                f"Index not found: {self.structured_path} (run 'index build' first)",
                path=str(self.structured_path)
            )

        text = self.structured_path.read_text(encoding="utf-8")

        try:
            return load_structured(text)
        except (yaml.YAMLError, ValueError) as e:
            raise StoreFormatError(
                f"Cannot parse index {self.structured_path}: {e}",
                path=str(self.structured_path)
            )

    def load_records(self) -> List[BibliographicRecord]:
        """Read all records from the structured store, in stored order."""
        return _to_records(self.load_document()[ROOT_KEY], self.structured_path)

    def filenames(self) -> Set[str]:
        """Get the filenames already present in the structured store."""
        if not self.exists():
            return set()
        return {record.filename for record in self.load_records()}

    def write_all(self, records: List[BibliographicRecord]) -> None:
        """
        Replace the structured store with exactly these records.

        Args:
            records: Records in the order they should be stored.
        """
        atomic_write_text(self.structured_path, dump_structured(records))
        logger.info(f"Wrote {len(records)} records to {self.structured_path}")

    def append(self, records: List[BibliographicRecord]) -> int:
        """
        Append records to the end of the structured store.

        Earlier entries are left byte-for-byte untouched. A missing store is
        created.

        Args:
            records: Fresh records to add.

        Returns:
            Number of records appended.
        """
        if not records:
            return 0

        if not self.exists():
            self.write_all(records)
            return len(records)

        text = self.structured_path.read_text(encoding="utf-8")
        document = self.load_document()

        header_lines = [line.rstrip() for line in text.splitlines()]
        if not document[ROOT_KEY] and ROOT_KEY + ":" not in header_lines:
            # "Index: []" cannot be extended by appending items
            self.write_all(records)
            return len(records)

        prefix = "" if text.endswith("\n") else "\n"
        append_text(self.structured_path, prefix + dump_entries(records))

        logger.info(f"Appended {len(records)} records to {self.structured_path}")
        return len(records)

    def regenerate_queryable(self) -> int:
        """
        Rebuild the queryable store from the structured store.

        The previous queryable file is replaced in full.

        Returns:
            Number of records written.

        Raises:
            IndexNotFoundError: If the structured store does not exist.
            StoreFormatError: If the structured store cannot be parsed.
        """
        document = self.load_document()
        atomic_write_text(self.queryable_path, dump_queryable(document))

        count = len(document[ROOT_KEY])
        logger.info(f"Regenerated {self.queryable_path} with {count} records")
        return count

    def queryable_mtime(self) -> Optional[float]:
        """Get the modification time of the queryable store, or None if absent."""
        if not self.queryable_path.is_file():
            return None
        return get_mtime(self.queryable_path)

    def load_queryable(self) -> List[BibliographicRecord]:
        """
        Read all records from the queryable store.

        Raises:
            IndexNotFoundError: If the queryable store does not exist.
            StoreFormatError: If it is not valid JSON of the expected shape.
        """
        if not self.queryable_path.is_file():
            raise IndexNotFoundError(
                f"Index not found: {self.queryable_path} (run 'index build' first)",
                path=str(self.queryable_path)
            )

        try:
            with open(self.queryable_path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except json.JSONDecodeError as e:
            raise StoreFormatError(
                f"Cannot parse index {self.queryable_path}: {e}",
                path=str(self.queryable_path)
            )

        entries = document.get(ROOT_KEY) if isinstance(document, dict) else None
        if entries is None:
            entries = []
        if not isinstance(entries, list):
            raise StoreFormatError(
                f"'{ROOT_KEY}' in {self.queryable_path} must be a list",
                path=str(self.queryable_path)
            )

        return _to_records(entries, self.queryable_path)

    def locate(self, filename: str) -> int:
        """
        Find the line of a record in the structured store.

        Only ``PDF_file`` lines are considered, so a filename quoted inside a
        title or note is never mistaken for the record itself.

        Args:
            filename: Filename or fragment of it.

        Returns:
            1-based line number of the record's PDF_file line.

        Raises:
            IndexNotFoundError: If the structured store does not exist.
            RecordNotFoundError: If no record matches.
            AmbiguousMatchError: If several records match.
        """
        if not self.exists():
            raise IndexNotFoundError(
                f"Index not found: {self.structured_path} (run 'index build' first)",
                path=str(self.structured_path)
            )

        marker = FILENAME_KEY + ":"
        lines_by_name: Dict[str, int] = {}

        with open(self.structured_path, "r", encoding="utf-8") as f:
            for line_number, line in enumerate(f, start=1):
                stripped = line.strip()
                if not stripped.startswith(marker):
                    continue

                value = stripped[len(marker):].strip().strip("'\"")
                if filename not in value:
                    continue

                lines_by_name.setdefault(value, line_number)

        name = pick_single_match(filename, list(lines_by_name))
        return lines_by_name[name]


def _to_records(entries: List[Any], path: Path) -> List[BibliographicRecord]:
    """Convert stored entries, reporting the first malformed one by position."""
    records = []

    for number, entry in enumerate(entries, start=1):
        try:
            records.append(entry_to_record(entry))
        except ValueError as e:
            raise StoreFormatError(
                f"Malformed entry {number} in {path}: {e}",
                path=str(path)
            )

    return records


if __name__ == "__main__":
    store = RecordStore()

    print(f"Structured: {store.structured_path} (exists: {store.exists()})")
    print(f"Queryable:  {store.queryable_path}")

    if store.exists():
        records = store.load_records()
        print(f"Records:    {len(records)}")
