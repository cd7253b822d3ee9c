"""
Utility module providing shared helper functions.

Contains file operations and text processing utilities used across
the application. Depends only on the standard library.
"""

from .file_utils import (
    get_mtime,
    ensure_directory,
    atomic_write_text,
    append_text
)
from .text_utils import (
    split_tags,
    join_tags,
    split_authors,
    join_authors,
    contains_all
)

__all__ = [
    "get_mtime",
    "ensure_directory",
    "atomic_write_text",
    "append_text",
    "split_tags",
    "join_tags",
    "split_authors",
    "join_authors",
    "contains_all"
]
