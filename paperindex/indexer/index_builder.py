"""
Index synchronization between the PDF directory and the record store.

Two entry points share nothing but the store:

- ``build`` discards the index and recreates it from every PDF on disk.
  It asks for confirmation first because tags and notes are lost.
- ``update`` appends records for PDFs modified since the queryable index was
  last written and not yet present in the structured index.

Both regenerate the queryable index at the end. A crash between the two
writes leaves the queryable index stale until the next run.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from ..core import get_config, get_logger, UserInputError
from ..core.config_loader import Config
from ..extraction import FileScanner, FilenameParser
from ..store import BibliographicRecord, RecordStore

logger = get_logger(__name__)

AFFIRMATIVE_ANSWERS = ("y", "yes")
NEGATIVE_ANSWERS = ("n", "no")

BUILD_PROMPT = (
    "Rebuilding the index discards all tags and notes. Continue? [y/n] "
)


@dataclass
class IndexingStats:
    """Statistics from an indexing run."""
    mode: str = "update"
    files_scanned: int = 0
    files_indexed: int = 0
    files_skipped: int = 0
    records_total: int = 0
    cancelled: bool = False
    indexed: List[str] = field(default_factory=list)


def parse_confirmation(answer: Optional[str]) -> bool:
    """
    Interpret an answer to a yes/no prompt.

    Args:
        answer: Raw text typed by the user.

    Returns:
        True for yes, False for no.

    Raises:
        UserInputError: For anything that is neither yes nor no.
    """
    normalized = (answer or "").strip().lower()

    if normalized in AFFIRMATIVE_ANSWERS:
        return True
    if normalized in NEGATIVE_ANSWERS:
        return False

    raise UserInputError(
        f"Invalid answer '{(answer or '').strip()}': expected y or n",
        {"answer": answer}
    )


class IndexBuilder:
    """
    Keeps the record store in line with the PDFs on disk.

    Records are only ever created here, by parsing filenames that have no
    record yet. Existing records are never rewritten by update, and records
    of deleted files are kept.
    """

    def __init__(
        self,
        config: Config = None,
        store: RecordStore = None,
        scanner: FileScanner = None,
        parser: FilenameParser = None,
        progress_callback: Callable[[int, int, str], None] = None
    ):
        """
        Initialize the index builder.

        Args:
            config: Configuration. Defaults to the global config.
            store: Record store. Built from config when omitted.
            scanner: PDF scanner. Built from config when omitted.
            parser: Filename parser. Built from config when omitted.
            progress_callback: Optional callback(current, total, filename)
                              called for every file that gets a record.
        """
        self.config = config or get_config()
        self.store = store or RecordStore(config=self.config)
        self.scanner = scanner or FileScanner(config=self.config)
        self.parser = parser or FilenameParser(self.config.records.default_tags)
        self.progress_callback = progress_callback

    def build(self, confirm: Callable[[str], str]) -> IndexingStats:
        """
        Recreate the index from every PDF in the managed directory.

        Nothing is written unless confirm returns an affirmative answer.

        Args:
            confirm: Called with the prompt text, returns the user's answer.

        Returns:
            IndexingStats; ``cancelled`` is set when the user declined.

        Raises:
            PDFDirectoryNotFoundError: If the managed directory is missing.
            UserInputError: If the answer is neither yes nor no.
        """
        stats = IndexingStats(mode="build")

        self.scanner.ensure_exists()

        if not parse_confirmation(confirm(BUILD_PROMPT)):
            logger.info("Index build cancelled by user")
            stats.cancelled = True
            return stats

        logger.info(f"Rebuilding index from {self.scanner.root_directory}")

        pdf_files = list(self.scanner.scan())
        stats.files_scanned = len(pdf_files)

        records = self._parse_files(pdf_files, stats)

        self.store.write_all(records)
        stats.records_total = self.store.regenerate_queryable()

        logger.info(f"Index build complete: {stats.files_indexed} records")
        return stats

    def update(self) -> IndexingStats:
        """
        Append records for PDFs that are new since the last synchronization.

        A file is new when its modification time is strictly later than the
        queryable index's and its name has no record yet.

        Returns:
            IndexingStats with the number of appended records.

        Raises:
            PDFDirectoryNotFoundError: If the managed directory is missing.
            IndexNotFoundError: If no structured index exists yet.
            StoreFormatError: If the structured index cannot be parsed.
        """
        stats = IndexingStats(mode="update")

        self.scanner.ensure_exists()
        known = {record.filename for record in self.store.load_records()}

        watermark = self.store.queryable_mtime()
        if watermark is None:
            logger.info("No queryable index yet, considering every PDF")
            watermark = float("-inf")

        candidates = list(self.scanner.scan_newer_than(watermark))
        stats.files_scanned = len(candidates)

        new_files: List[Path] = []
        for filepath in candidates:
            if filepath.name in known:
                logger.debug(f"Already indexed: {filepath.name}")
                stats.files_skipped += 1
                continue
            new_files.append(filepath)

        records = self._parse_files(new_files, stats)

        self.store.append(records)
        stats.records_total = self.store.regenerate_queryable()

        logger.info(f"Index update complete: {stats.files_indexed} new records")
        return stats

    def _parse_files(self, pdf_files: List[Path], stats: IndexingStats) -> List[BibliographicRecord]:
        """Parse filenames into records, reporting progress."""
        records: List[BibliographicRecord] = []
        total = len(pdf_files)

        for i, filepath in enumerate(pdf_files):
            if self.progress_callback:
                self.progress_callback(i + 1, total, filepath.name)

            records.append(self.parser.parse(filepath.name))
            stats.indexed.append(filepath.name)

        stats.files_indexed = len(records)
        return records


def progress_printer(current: int, total: int, filename: str) -> None:
    """Simple progress callback that prints to console."""
    percent = (current / total) * 100 if total > 0 else 0
    print(f"\r[{percent:5.1f}%] {current}/{total} - {filename[:50]:<50}", end="", flush=True)


if __name__ == "__main__":
    import sys

    builder = IndexBuilder(progress_callback=progress_printer)

    if "--reset" in sys.argv:
        stats = builder.build(input)
    else:
        stats = builder.update()

    print("\n" + "-" * 60)
    print(f"Mode:           {stats.mode}")
    print(f"Cancelled:      {stats.cancelled}")
    print(f"Files indexed:  {stats.files_indexed}")
    print(f"Records total:  {stats.records_total}")
