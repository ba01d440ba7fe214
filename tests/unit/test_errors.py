"""Tests for error handling paths."""

import asyncio
import tempfile
from pathlib import Path

import pytest

from typelink.core.exceptions import (
    CircularReferenceError,
    ConfigLoadError,
    DeclarationNotFoundError,
    DocumentParseError,
    FetchError,
    SignatureParseError,
    TypelinkError,
)
from typelink.documents import DocumentParsingService
from typelink.signatures import SignatureParser


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as td:
        yield Path(td)


class TestFetchErrors:
    """Tests for document loading error handling."""

    def test_missing_file(self, temp_dir: Path) -> None:
        """Test that a missing file raises FetchError."""
        service = DocumentParsingService()
        with pytest.raises(FetchError) as exc_info:
            asyncio.run(service.fetch_and_parse(str(temp_dir / "missing.html")))

        assert "Failed to read file" in str(exc_info.value)

    def test_encoding_error(self, temp_dir: Path) -> None:
        """Test that undecodable files raise FetchError."""
        file_path = temp_dir / "bad_encoding.html"
        # Write invalid UTF-8 bytes
        file_path.write_bytes(b"\xff\xfe <html> \x80\x81")

        with pytest.raises(FetchError):
            asyncio.run(DocumentParsingService().fetch_and_parse(str(file_path)))

    def test_empty_file(self, temp_dir: Path) -> None:
        """Test that empty files raise DocumentParseError."""
        file_path = temp_dir / "empty.html"
        file_path.write_text("")

        with pytest.raises(DocumentParseError) as exc_info:
            asyncio.run(DocumentParsingService().fetch_and_parse(str(file_path)))

        assert "empty.html" in str(exc_info.value)


class TestParserErrors:
    """Tests for signature parser error handling."""

    def test_parse_returns_none_instead_of_raising(self) -> None:
        """Test that malformed signatures never raise from parse."""
        assert SignatureParser().parse("QList<int> @") is None

    def test_internal_error_message(self) -> None:
        """Test that the internal error names the offending character."""
        with pytest.raises(SignatureParseError, match="unexpected character '@'"):
            SignatureParser()._parse("int @")


class TestErrorMessages:
    """Tests for exception attributes and messages."""

    def test_circular_reference_chain(self) -> None:
        """Test that the discovery path is part of the message."""
        error = CircularReferenceError("A", ("A", "B"))
        assert error.full_name == "A"
        assert error.path == ("A", "B")
        assert str(error) == "circular reference detected for A: A -> B -> A"

    def test_config_error_lists_issues(self) -> None:
        """Test that issues are appended to the message."""
        error = ConfigLoadError("Invalid type configuration", issues=["mappings: too short"])
        assert error.issues == ["mappings: too short"]
        assert str(error) == "Invalid type configuration:\n  mappings: too short"

    def test_config_error_without_issues(self) -> None:
        """Test the plain message form."""
        error = ConfigLoadError("Cannot read type configuration")
        assert error.issues == []
        assert str(error) == "Cannot read type configuration"


class TestExceptionHierarchy:
    """Tests for exception class hierarchy."""

    @pytest.mark.parametrize(
        "error",
        [
            SignatureParseError("test"),
            ConfigLoadError("test"),
            FetchError("test"),
            DocumentParseError("test"),
            CircularReferenceError("A", ()),
            DeclarationNotFoundError("test"),
        ],
    )
    def test_is_typelink_error(self, error: Exception) -> None:
        """Test that every library error inherits from TypelinkError."""
        assert isinstance(error, TypelinkError)
        assert isinstance(error, Exception)
