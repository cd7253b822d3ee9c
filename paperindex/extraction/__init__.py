"""
Extraction module for the paper index.

Provides PDF discovery in the library directory and decoding of
bibliographic metadata from structured filenames.
"""

from .file_scanner import FileScanner
from .filename_parser import FilenameParser, parse_filename, compose_filename

__all__ = [
    "FileScanner",
    "FilenameParser",
    "parse_filename",
    "compose_filename"
]
