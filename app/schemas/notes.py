"""Pydantic v2 schemas for the note parsing endpoint."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


# -----------------------------------------------------------------------------
# Request Schemas
# -----------------------------------------------------------------------------


class ParseNoteRequest(BaseModel):
    """Request body for POST /api/v1/notes/parse."""

    url: str = Field(
        ...,
        min_length=1,
        max_length=4096,
        description="Note URL, or pasted share text containing one",
    )


# -----------------------------------------------------------------------------
# Response Schemas
# -----------------------------------------------------------------------------


class ParsedNoteSchema(BaseModel):
    """Structured trip data recovered from a note."""

    title: str = Field(..., description="Note title or a placeholder")
    content: str = Field(..., description="Note body text or a placeholder")
    places: list[str] = Field(
        default_factory=list, description="Unique place names, at most 10"
    )
    tags: list[str] = Field(default_factory=list, description="Place tags")


class ParseNoteResponse(BaseModel):
    """Response for POST /api/v1/notes/parse."""

    success: bool = Field(..., description="False when nothing usable was found")
    outcome: Literal["success", "partial_success", "failure"] = Field(
        ..., description="Quality gate classification"
    )
    message: str = Field(..., description="Human-readable result description")
    data: ParsedNoteSchema | None = Field(
        default=None, description="Extracted note, absent on failure"
    )
    url: str = Field(..., description="URL that was fetched")
    extraction_method: str | None = Field(
        default=None, description="Stage that produced the content"
    )
    attempts: int = Field(default=0, ge=0, description="Fetch attempts used")
    warnings: list[str] = Field(default_factory=list)
    error: str | None = Field(default=None, description="Raw error text, if any")
