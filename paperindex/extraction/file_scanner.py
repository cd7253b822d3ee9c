"""
File scanner for PDF discovery in the library directory.

Only the top level of the managed directory is scanned; subdirectories are
not part of the library. Files are yielded in name order so that a full
rebuild produces the same index for the same directory content. Files whose
names are not valid UTF-8 are skipped with a warning, since the index files
are written as UTF-8.
"""

from pathlib import Path
from typing import Iterator, List, Union

from ..core import get_config, get_logger, PDFDirectoryNotFoundError
from ..core.config_loader import Config
from ..utils import get_mtime

logger = get_logger(__name__)


class FileScanner:
    """
    Discovers library PDFs in a single directory.

    Uses generator-based iteration so callers can filter while scanning.
    """

    def __init__(
        self,
        root_directory: Union[str, Path] = None,
        extensions: List[str] = None,
        config: Config = None
    ):
        """
        Initialize the file scanner.

        Args:
            root_directory: Directory to scan. Defaults to config value.
            extensions: List of file extensions to include (e.g., [".pdf"]).
            config: Configuration to read defaults from.
        """
        config = config or get_config()

        self.root_directory = Path(root_directory or config.paths.pdf_directory)
        self.extensions = extensions or config.scanning.supported_extensions

        self.extensions = [ext.lower() for ext in self.extensions]

    def ensure_exists(self) -> None:
        """
        Check that the managed directory exists.

        Raises:
            PDFDirectoryNotFoundError: If it is missing or not a directory.
        """
        if not self.root_directory.is_dir():
            raise PDFDirectoryNotFoundError(
                f"PDF directory does not exist: {self.root_directory}",
                directory=str(self.root_directory)
            )

    def scan(self) -> Iterator[Path]:
        """
        Scan directory and yield matching file paths.

        Yields:
            Path objects for each matching file, sorted by name.

        Raises:
            PDFDirectoryNotFoundError: If the directory does not exist.
        """
        self.ensure_exists()

        logger.info(f"Scanning directory: {self.root_directory}")

        file_count = 0
        skipped_ext = 0
        skipped_name = 0

        for filepath in sorted(self.root_directory.iterdir(), key=lambda p: p.name):
            if not filepath.is_file():
                continue

            if filepath.suffix.lower() not in self.extensions:
                skipped_ext += 1
                continue

            if not _is_utf8_name(filepath.name):
                logger.warning(f"Skipping file with a name that is not valid UTF-8: {filepath.name!r}")
                skipped_name += 1
                continue

            file_count += 1
            yield filepath

        logger.info(
            f"Scan complete: {file_count} files found, "
            f"{skipped_ext} skipped (wrong extension), "
            f"{skipped_name} skipped (undecodable name)"
        )

    def scan_newer_than(self, watermark: float) -> Iterator[Path]:
        """
        Yield files modified strictly after a point in time.

        Args:
            watermark: POSIX timestamp of the last synchronization.

        Yields:
            Paths whose modification time is greater than watermark.
        """
        for filepath in self.scan():
            try:
                if get_mtime(filepath) > watermark:
                    yield filepath
                else:
                    logger.debug(f"Unchanged since last sync: {filepath.name}")
            except OSError as e:
                logger.warning(f"Cannot access file {filepath}: {e}")


def _is_utf8_name(name: str) -> bool:
    # Undecodable bytes come back from the filesystem as lone surrogates.
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


if __name__ == "__main__":
    import sys

    if len(sys.argv) > 1:
        test_dir = Path(sys.argv[1])
    else:
        test_dir = Path(".")

    scanner = FileScanner(root_directory=test_dir, extensions=[".pdf"])

    print(f"Scanning: {test_dir}")
    print("-" * 50)

    for i, filepath in enumerate(scanner.scan()):
        print(f"  {filepath.name}")
        if i >= 9:
            print("  ... (showing first 10 only)")
            break
