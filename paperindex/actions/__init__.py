"""
Actions module for working with individual papers.

Launches external viewers, file managers, editors and mail clients on
resolved library files, and formats records for review.
"""

from .launcher import Launcher, build_command
from .annotation import PaperActions, format_record

__all__ = [
    "Launcher",
    "build_command",
    "PaperActions",
    "format_record"
]
