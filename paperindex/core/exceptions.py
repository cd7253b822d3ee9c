"""
Custom exception hierarchy for the paper index.

Every error carries a ``kind`` label so the command line can tell the user
which category of failure occurred: bad input, failed lookup, inconsistent
library state, or an external tool that could not be started.
"""

from typing import List


class PaperIndexError(Exception):
    """Base exception for all paper index errors."""

    kind = "error"

    def __init__(self, message: str, details: dict = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(PaperIndexError):
    """Raised when configuration is invalid or missing."""

    kind = "configuration error"


class UserInputError(PaperIndexError):
    """Raised for missing or invalid arguments and unrecognized answers."""

    kind = "input error"


class RecordLookupError(PaperIndexError):
    """Base class for failures resolving a filename or tag to records."""

    kind = "lookup error"

    def __init__(self, message: str, query: str = None, details: dict = None):
        """
        Initialize lookup error.

        Args:
            message: Error description.
            query: The filename fragment or tag that was looked up.
            details: Additional context.
        """
        super().__init__(message, details)
        self.query = query


class RecordNotFoundError(RecordLookupError):
    """Raised when no record matches a lookup."""
    pass


class AmbiguousMatchError(RecordLookupError):
    """Raised when a single-record lookup matches several records."""

    def __init__(self, message: str, query: str = None, candidates: List[str] = None):
        super().__init__(message, query, {"candidates": list(candidates or [])})
        self.candidates = list(candidates or [])


class ConsistencyError(PaperIndexError):
    """Raised when the library on disk is not in a usable state."""

    kind = "consistency error"


class PDFDirectoryNotFoundError(ConsistencyError):
    """Raised when the managed PDF directory does not exist."""

    def __init__(self, message: str, directory: str = None, details: dict = None):
        super().__init__(message, details)
        self.directory = directory


class IndexNotFoundError(ConsistencyError):
    """Raised when an index file is missing or holds no records."""

    def __init__(self, message: str, path: str = None, details: dict = None):
        super().__init__(message, details)
        self.path = path


class StoreFormatError(ConsistencyError):
    """Raised when the structured store cannot be parsed."""

    def __init__(self, message: str, path: str = None, details: dict = None):
        super().__init__(message, details)
        self.path = path


class LaunchError(PaperIndexError):
    """Raised when an external viewer, editor or mailer cannot be started."""

    kind = "launch error"

    def __init__(self, message: str, command: List[str] = None, details: dict = None):
        super().__init__(message, details)
        self.command = list(command or [])


if __name__ == "__main__":
    try:
        raise ConfigurationError("Config file not found", {"path": "/config/config.json"})
    except PaperIndexError as e:
        print(f"Caught: {e.kind}: {e.message}")
        print(f"Details: {e.details}")

    try:
        raise AmbiguousMatchError("Several papers match", query="2019", candidates=["a.pdf", "b.pdf"])
    except RecordLookupError as e:
        print(f"Lookup failed for: {e.query} -> {e.details['candidates']}")
