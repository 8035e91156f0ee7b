"""Parse a note URL into structured trip data."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from urllib.parse import urlparse

from app.core.config import settings
from app.services.extractors import (
    ExtractionConfig,
    ExtractionResult,
    FetchError,
    InvalidNoteUrlError,
    NoteExtractionPipeline,
    Outcome,
    TagExtractionError,
)
from app.services.tagging import TagExtractionConfig, TagExtractor

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Failed to extract the note, please enter it manually."

# First link in pasted share text; stops at whitespace or CJK text
_SHARE_LINK = re.compile(r"https?://[^\s\u4e00-\u9fff，。]+", re.I)


@dataclass
class NoteParseResult:
    """What a note parse produced, success or not."""

    outcome: Outcome
    message: str
    result: ExtractionResult | None = None
    tags: list[str] = field(default_factory=list)
    error_type: str | None = None
    error_message: str | None = None

    @property
    def success(self) -> bool:
        return self.outcome is not Outcome.FAILURE


def normalize_note_url(raw: str, allowed_hosts: list[str] | None = None) -> str:
    """Turn user input (a URL or pasted share text) into a fetchable URL.

    Raises:
        InvalidNoteUrlError: If no usable http(s) URL can be found
    """
    text = (raw or "").strip()
    if not text:
        raise InvalidNoteUrlError("URL must not be empty")

    match = _SHARE_LINK.search(text)
    if match:
        url = match.group(0).rstrip(".,;!?)\"'")
    elif " " in text:
        raise InvalidNoteUrlError("No link found in the submitted text")
    else:
        url = f"https://{text}"

    parsed = urlparse(url)
    host = (parsed.hostname or "").lower()
    if parsed.scheme not in ("http", "https") or "." not in host:
        raise InvalidNoteUrlError(f"Invalid note URL: {text[:200]}")

    if allowed_hosts and not any(
        host == allowed or host.endswith(f".{allowed}") for allowed in allowed_hosts
    ):
        raise InvalidNoteUrlError(f"Links from {host} are not supported")

    return url


class NoteParseService:
    """Run the extraction pipeline, quality gate and tag enrichment.

    Never raises for extraction problems: fetch failures and unexpected
    errors come back as a failed NoteParseResult with the error attached.
    """

    def __init__(
        self,
        config: ExtractionConfig | None = None,
        tag_extractor: TagExtractor | None = None,
        pipeline: NoteExtractionPipeline | None = None,
    ) -> None:
        self.config = config or build_extraction_config()
        self.pipeline = pipeline or NoteExtractionPipeline(self.config)
        self.tag_extractor = tag_extractor or TagExtractor(build_tag_config())

    async def parse(self, url: str) -> NoteParseResult:
        """Extract title, content, places and tags from a note URL."""
        try:
            async with self.pipeline as pipeline:
                result = await pipeline.extract(url)
        except FetchError as exc:
            logger.warning(
                "Note fetch failed: %s [%s] after %d attempts - %s",
                url,
                exc.kind.value,
                exc.attempts,
                exc,
            )
            return NoteParseResult(
                outcome=Outcome.FAILURE,
                message=f"Could not fetch the note page. {GENERIC_FAILURE_MESSAGE}",
                error_type=f"fetch_{exc.kind.value}",
                error_message=str(exc),
            )
        except Exception as exc:
            logger.exception("Unexpected error while parsing %s", url)
            return NoteParseResult(
                outcome=Outcome.FAILURE,
                message=GENERIC_FAILURE_MESSAGE,
                error_type="extraction_error",
                error_message=str(exc),
            )

        verdict = self.pipeline.quality_gate.classify(
            result.title, result.content, login_wall=result.login_wall
        )
        if verdict.outcome is Outcome.FAILURE:
            return NoteParseResult(
                outcome=verdict.outcome,
                message=verdict.message,
                result=result,
                error_type="empty_content",
            )

        if verdict.outcome is Outcome.SUCCESS:
            result.tags = await self._extract_tags(result)

        return NoteParseResult(
            outcome=verdict.outcome,
            message=verdict.message,
            result=result,
            tags=result.tags,
        )

    async def _extract_tags(self, result: ExtractionResult) -> list[str]:
        """Tags from the tag service, or the place list when it fails."""
        try:
            return await self.tag_extractor.extract(result.content)
        except TagExtractionError as e:
            logger.info("Tag extraction unavailable, using places as tags: %s", e)
            result.warnings.append(f"tag extraction failed: {e}")
        except Exception as e:
            logger.warning(
                "Tag extraction crashed, using places as tags: %s", e, exc_info=True
            )
            result.warnings.append(f"tag extraction failed: {e}")
        return list(result.places)


def build_extraction_config() -> ExtractionConfig:
    """Pipeline configuration from application settings."""
    return ExtractionConfig(
        timeout_seconds=settings.note_fetch_timeout,
        max_retries=settings.note_fetch_max_retries,
        retry_delay_seconds=settings.note_fetch_retry_delay,
        user_agent=settings.note_fetch_user_agent,
        proxy=settings.note_fetch_proxy,
        min_content_length=settings.note_min_content_length,
        min_fragment_length=settings.note_min_fragment_length,
        last_resort_threshold=settings.note_last_resort_threshold,
        last_resort_slice=(
            settings.note_last_resort_slice_start,
            settings.note_last_resort_slice_end,
        ),
        max_places=settings.note_max_places,
        use_trafilatura=settings.note_use_trafilatura,
    )


def build_tag_config() -> TagExtractionConfig:
    """Tag-extraction configuration from application settings."""
    return TagExtractionConfig(
        api_key=settings.openai_api_key,
        api_base=settings.openai_api_base,
        model=settings.openai_model,
        proxy=settings.openai_proxy_url,
        timeout_seconds=settings.tag_extraction_timeout,
        max_tags=settings.tag_max_count,
        max_input_chars=settings.tag_max_input_chars,
    )
