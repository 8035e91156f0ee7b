"""Tests for extraction exceptions."""

from __future__ import annotations

from app.services.extractors.exceptions import (
    ExtractionError,
    FetchError,
    FetchErrorKind,
    InvalidNoteUrlError,
    ParseError,
    TagExtractionError,
)


class TestExceptionHierarchy:
    """Test that all exceptions inherit from ExtractionError."""

    def test_fetch_error_inherits_from_extraction_error(self) -> None:
        assert issubclass(FetchError, ExtractionError)

    def test_parse_error_inherits_from_extraction_error(self) -> None:
        assert issubclass(ParseError, ExtractionError)

    def test_invalid_url_error_inherits_from_extraction_error(self) -> None:
        assert issubclass(InvalidNoteUrlError, ExtractionError)

    def test_tag_error_inherits_from_extraction_error(self) -> None:
        assert issubclass(TagExtractionError, ExtractionError)

    def test_extraction_error_inherits_from_exception(self) -> None:
        assert issubclass(ExtractionError, Exception)


class TestFetchError:
    """Test that FetchError carries its kind and attempt count."""

    def test_defaults(self) -> None:
        error = FetchError("boom")

        assert str(error) == "boom"
        assert error.kind is FetchErrorKind.UNKNOWN
        assert error.attempts == 0

    def test_kind_and_attempts(self) -> None:
        error = FetchError("gone", FetchErrorKind.NOT_FOUND, attempts=3)

        assert error.kind is FetchErrorKind.NOT_FOUND
        assert error.attempts == 3

    def test_kind_values(self) -> None:
        assert {kind.value for kind in FetchErrorKind} == {
            "timeout",
            "connection_refused",
            "not_found",
            "forbidden",
            "unknown",
        }
