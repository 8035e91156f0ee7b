"""Note parsing REST endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from app.core.config import settings
from app.schemas.notes import ParsedNoteSchema, ParseNoteRequest, ParseNoteResponse
from app.services.extractors import InvalidNoteUrlError, Outcome
from app.services.note_service import NoteParseService, normalize_note_url

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/notes", tags=["notes"])


def get_note_service() -> NoteParseService:
    """Build a service per request; the pipeline holds no shared state."""
    return NoteParseService()


@router.post("/parse", response_model=ParseNoteResponse)
async def parse_note(
    request: ParseNoteRequest,
    service: NoteParseService = Depends(get_note_service),
) -> ParseNoteResponse:
    """Extract title, content, places and tags from a note page.

    Args:
        request: Contains the note URL (or share text holding one).

    Returns:
        ParseNoteResponse with the quality-gate outcome. Failures to find
        content are reported with ``success=false``, not an HTTP error.

    Raises:
        HTTPException: 400 if the URL is invalid, 502 if the page could not
            be fetched.
    """
    try:
        url = normalize_note_url(request.url, settings.get_allowed_source_hosts())
    except InvalidNoteUrlError as e:
        logger.warning("Invalid note URL submitted: %s", e)
        raise HTTPException(
            status_code=400,
            detail={
                "error": {
                    "code": "INVALID_URL",
                    "message": str(e),
                }
            },
        )

    parsed = await service.parse(url)

    if parsed.error_type and parsed.error_type.startswith("fetch_"):
        raise HTTPException(
            status_code=502,
            detail={
                "error": {
                    "code": parsed.error_type.upper(),
                    "message": parsed.error_message or parsed.message,
                }
            },
        )

    result = parsed.result
    data = None
    if result is not None and parsed.outcome is not Outcome.FAILURE:
        data = ParsedNoteSchema(
            title=result.title,
            content=result.content,
            places=result.places,
            tags=parsed.tags,
        )

    return ParseNoteResponse(
        success=parsed.success,
        outcome=parsed.outcome.value,
        message=parsed.message,
        data=data,
        url=url,
        extraction_method=(result.extraction_method or None) if result else None,
        attempts=result.attempts if result else 0,
        warnings=result.warnings if result else [],
        error=parsed.error_message,
    )
