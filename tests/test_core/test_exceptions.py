"""
Tests for custom exception classes.

Tests exception creation, message formatting, details handling and the
category labels shown to users.
"""

import pytest

from paperindex.core.exceptions import (
    PaperIndexError,
    ConfigurationError,
    UserInputError,
    RecordLookupError,
    RecordNotFoundError,
    AmbiguousMatchError,
    ConsistencyError,
    PDFDirectoryNotFoundError,
    IndexNotFoundError,
    StoreFormatError,
    LaunchError
)


class TestPaperIndexError:
    """Tests for base PaperIndexError."""

    def test_basic_creation(self):
        """Test creating exception with just a message."""
        error = PaperIndexError("Something went wrong")

        assert error.message == "Something went wrong"
        assert error.details == {}
        assert str(error) == "Something went wrong"

    def test_creation_with_details(self):
        """Test creating exception with details dict."""
        error = PaperIndexError("File error", {"filename": "test.pdf"})

        assert error.details["filename"] == "test.pdf"


class TestErrorKinds:
    """Every failure category has its own label."""

    @pytest.mark.parametrize("error, kind", [
        (ConfigurationError("x"), "configuration error"),
        (UserInputError("x"), "input error"),
        (RecordNotFoundError("x"), "lookup error"),
        (AmbiguousMatchError("x"), "lookup error"),
        (PDFDirectoryNotFoundError("x"), "consistency error"),
        (IndexNotFoundError("x"), "consistency error"),
        (StoreFormatError("x"), "consistency error"),
        (LaunchError("x"), "launch error"),
    ])
    def test_kind_label(self, error, kind):
        """Test that each error reports its category."""
        assert error.kind == kind

    def test_all_caught_as_base(self):
        """Test that every error can be caught as PaperIndexError."""
        for error_class in (ConfigurationError, UserInputError, RecordNotFoundError,
                            IndexNotFoundError, LaunchError):
            with pytest.raises(PaperIndexError):
                raise error_class("Test error")


class TestLookupErrors:
    """Tests for lookup failures."""

    def test_not_found_keeps_query(self):
        """Test RecordNotFoundError with query parameter."""
        error = RecordNotFoundError("No paper matches", query="Bevacqua")

        assert isinstance(error, RecordLookupError)
        assert error.query == "Bevacqua"

    def test_ambiguous_lists_candidates(self):
        """Test AmbiguousMatchError carries candidates."""
        error = AmbiguousMatchError("Several", query="2019", candidates=["a.pdf", "b.pdf"])

        assert error.candidates == ["a.pdf", "b.pdf"]
        assert error.details["candidates"] == ["a.pdf", "b.pdf"]


class TestConsistencyErrors:
    """Tests for library state errors."""

    def test_directory_error_keeps_directory(self):
        """Test PDFDirectoryNotFoundError with directory."""
        error = PDFDirectoryNotFoundError("missing", directory="/papers")

        assert isinstance(error, ConsistencyError)
        assert error.directory == "/papers"

    def test_index_error_keeps_path(self):
        """Test IndexNotFoundError with path."""
        error = IndexNotFoundError("missing", path="/papers/index.json")

        assert error.path == "/papers/index.json"


class TestLaunchError:
    """Tests for LaunchError."""

    def test_keeps_command(self):
        """Test LaunchError with command."""
        error = LaunchError("cannot start", command=["viewer", "a.pdf"])

        assert error.command == ["viewer", "a.pdf"]
