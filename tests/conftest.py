"""
Pytest fixtures and configuration for the test suite.

Provides temporary library directories, sample PDFs, and configurations
pointing at them, so tests never touch a real library.
"""

import json
import logging
import os
import pytest
import tempfile
import shutil
from pathlib import Path
from typing import Generator, Iterable

import sys
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))


SAMPLE_FILENAMES = [
    "2019_Bevacqua_etal_SciAdv_CompoundFloodingStormSurgeEuropeClimateChange.pdf",
    "2021_Smith_Jones_Nature_DroughtPropagation.pdf",
    "2017_Bevacqua_etal_HESS_MultivariateStatisticalModelling.pdf",
]


def write_pdf(directory: Path, name: str, mtime: float = None) -> Path:
    """Create a minimal PDF file, optionally with a fixed modification time."""
    path = directory / name
    path.write_bytes(b"%PDF-1.4\n%%EOF\n")
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


def write_pdfs(directory: Path, names: Iterable[str], mtime: float = None) -> None:
    """Create several minimal PDF files."""
    for name in names:
        write_pdf(directory, name, mtime)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Create a temporary directory for test files.

    Yields:
        Path to temporary directory, cleaned up after test.
    """
    tmp = tempfile.mkdtemp(prefix="paperindex_test_")
    yield Path(tmp)
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def library_dir(temp_dir: Path) -> Path:
    """Create an empty library directory."""
    library = temp_dir / "library"
    library.mkdir()
    return library


@pytest.fixture
def temp_config(temp_dir: Path, library_dir: Path) -> Generator[Path, None, None]:
    """
    Create a temporary config.json for testing.

    Args:
        temp_dir: Temporary directory fixture.
        library_dir: Library directory fixture.

    Yields:
        Path to temporary config file.
    """
    config_dir = temp_dir / "config"
    config_dir.mkdir()

    index_dir = temp_dir / "index"
    logs_dir = temp_dir / "logs"

    config_data = {
        "paths": {
            "pdf_directory": str(library_dir),
            "structured_index": str(index_dir / "index.yaml"),
            "queryable_index": str(index_dir / "index.json"),
            "logs_directory": str(logs_dir)
        },
        "scanning": {
            "supported_extensions": [".pdf"]
        },
        "records": {
            "default_tags": ["new", "unread"]
        },
        "search": {
            "case_sensitive": True
        },
        "commands": {
            "viewer": "viewer {path}",
            "reveal": "reveal {dir}",
            "editor": "editor +{line} {path}",
            "mail": "mailer --attach {path}"
        },
        "logging": {
            "level": "DEBUG",
            "format": "%(levelname)s - %(message)s",
            "max_file_size_mb": 1,
            "backup_count": 1
        }
    }

    config_path = config_dir / "config.json"
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(config_data, f)

    yield config_path


@pytest.fixture
def config(temp_config: Path):
    """Load the temporary config, ignoring the caller's environment."""
    from paperindex.core.config_loader import Config
    return Config.from_file(temp_config, environ={})


@pytest.fixture
def sample_library(library_dir: Path) -> Path:
    """
    Create a library with a few conventionally named PDFs.

    Returns:
        Path to the library directory.
    """
    write_pdfs(library_dir, SAMPLE_FILENAMES, mtime=1_000_000)

    # Files that are not part of the library
    (library_dir / "readme.txt").write_text("Not a PDF")
    (library_dir / "archive").mkdir()
    write_pdf(library_dir / "archive", "2000_Old_Paper_J_Topic.pdf")

    return library_dir


@pytest.fixture
def store(config):
    """Create a record store on the temporary index paths."""
    from paperindex.store import RecordStore
    return RecordStore(config=config)


@pytest.fixture
def built_index(config, sample_library, store):
    """Build an index of the sample library without prompting."""
    from paperindex.indexer import IndexBuilder
    IndexBuilder(config=config, store=store).build(lambda prompt: "y")
    return store


@pytest.fixture
def reset_config_singleton():
    """
    Reset the config singleton between tests.

    This ensures each test gets a fresh config instance.
    """
    from paperindex.core import config_loader
    config_loader._config_instance = None
    yield
    config_loader._config_instance = None


@pytest.fixture
def reset_logger_singleton():
    """
    Reset the logger initialization flag between tests.
    """
    from paperindex.core import logger
    logger._logger_initialized = False
    yield
    root_logger = logging.getLogger()
    for handler in logger._handlers:
        root_logger.removeHandler(handler)
        handler.close()
    logger._handlers.clear()
    logger._logger_initialized = False


@pytest.fixture
def pdf_factory():
    """Return a helper that creates PDF files: pdf_factory(directory, name, mtime=None)."""
    return write_pdf


@pytest.fixture
def undecodable_pdf(library_dir: Path) -> Path:
    """Create a PDF whose name is Latin-1 encoded, not valid UTF-8."""
    name = os.fsdecode(b"2022_M\xfcller_etal_Nature_Topic.pdf")
    try:
        return write_pdf(library_dir, name)
    except (OSError, UnicodeError):
        pytest.skip("filesystem rejects names that are not valid UTF-8")
