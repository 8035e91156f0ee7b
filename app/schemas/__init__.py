"""Pydantic schemas package."""

from app.schemas.common import ErrorResponse, HealthResponse  # noqa: F401
from app.schemas.notes import (  # noqa: F401
    ParsedNoteSchema,
    ParseNoteRequest,
    ParseNoteResponse,
)
