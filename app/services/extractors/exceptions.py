"""Exception hierarchy for note extraction."""

from __future__ import annotations

import enum


class ExtractionError(Exception):
    """Base exception for all extraction errors."""

    pass


class FetchErrorKind(str, enum.Enum):
    """Why fetching the source page failed."""

    TIMEOUT = "timeout"
    CONNECTION_REFUSED = "connection_refused"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    UNKNOWN = "unknown"


class FetchError(ExtractionError):
    """Raised when every fetch attempt failed.

    The message embeds the attempt count and the last underlying error.
    """

    def __init__(
        self,
        message: str,
        kind: FetchErrorKind = FetchErrorKind.UNKNOWN,
        attempts: int = 0,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.attempts = attempts


class ParseError(ExtractionError):
    """Raised when an embedded state candidate is not valid JSON.

    Internal to the state locator; never leaves the pipeline.
    """

    pass


class InvalidNoteUrlError(ExtractionError):
    """Raised when the submitted URL cannot be used."""

    pass


class TagExtractionError(ExtractionError):
    """Raised when the tag-extraction service cannot produce tags."""

    pass
