"""
File utility functions for the paper index.

Provides common file operations: modification times for change detection,
atomic replacement and durable appends for the index files, and directory
management.
"""

import os
import tempfile
from pathlib import Path
from typing import Union


def get_mtime(filepath: Union[str, Path]) -> float:
    """
    Get the last modification time of a file.

    Args:
        filepath: Path to the file.

    Returns:
        Modification time as a POSIX timestamp.
    """
    return Path(filepath).stat().st_mtime


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Create directory tree if it doesn't exist.

    Args:
        path: Directory path to create.

    Returns:
        Path object of the directory.
    """
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def atomic_write_text(filepath: Union[str, Path], text: str) -> None:
    """
    Replace a file's content in one step.

    The text is written to a temporary file in the same directory and moved
    over the target, so readers see either the old or the new content.

    Args:
        filepath: Destination file.
        text: Complete new content.
    """
    filepath = Path(filepath)
    ensure_directory(filepath.parent)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{filepath.name}.", dir=filepath.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, filepath)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def append_text(filepath: Union[str, Path], text: str) -> None:
    """
    Append text to the end of a file and flush it to disk.

    Existing content is never rewritten.

    Args:
        filepath: File to extend. Created if missing.
        text: Text to append.
    """
    filepath = Path(filepath)
    ensure_directory(filepath.parent)

    with open(filepath, "a", encoding="utf-8", newline="\n") as f:
        f.write(text)
        f.flush()
        os.fsync(f.fileno())


if __name__ == "__main__":
    with tempfile.TemporaryDirectory() as tmp:
        target = Path(tmp) / "index.yaml"

        atomic_write_text(target, "Index:\n")
        append_text(target, "- Paper: {}\n")

        print(target.read_text(encoding="utf-8"))
        print(f"Modified: {get_mtime(target)}")
