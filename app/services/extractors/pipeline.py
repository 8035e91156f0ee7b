"""Extraction pipeline orchestrating note extraction from URLs."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, TypeVar

from app.services.extractors.base import ExtractionConfig, ExtractionResult, NormalizedNote
from app.services.extractors.dom_fallback import DomFallbackExtractor
from app.services.extractors.fetcher import NoteFetcher
from app.services.extractors.field_normalizer import FieldNormalizer
from app.services.extractors.note_resolver import NoteResolver
from app.services.extractors.places import PlaceExtractor
from app.services.extractors.quality import QualityGate
from app.services.extractors.state_locator import StateLocator
from app.services.extractors.text import has_login_prompt

logger = logging.getLogger(__name__)

T = TypeVar("T")


class NoteExtractionPipeline:
    """Orchestrates note extraction from a URL.

    Stages run strictly in sequence:
    1. Fetch the page (bounded retry)
    2. Locate embedded state JSON and resolve the note object inside it
    3. Normalize title/content/places from the note object
    4. Fall back to DOM extraction when content is missing or too short
    5. Fill places from the gazetteer when the note named none

    Failures inside stages 2-5 are logged and treated as "try the next
    fallback"; only FetchError escapes.
    """

    def __init__(
        self,
        config: ExtractionConfig | None = None,
        fetcher: NoteFetcher | None = None,
    ) -> None:
        self.config = config or ExtractionConfig()
        self.fetcher = fetcher or NoteFetcher(self.config)
        self.state_locator = StateLocator()
        self.note_resolver = NoteResolver()
        self.field_normalizer = FieldNormalizer(self.config)
        self.dom_extractor = DomFallbackExtractor(self.config)
        self.place_extractor = PlaceExtractor(max_places=self.config.max_places)
        self.quality_gate = QualityGate(self.config)

    async def extract(self, url: str) -> ExtractionResult:
        """Fetch ``url`` and extract the note.

        Raises:
            FetchError: If the page could not be fetched
        """
        start_time = time.perf_counter()
        fetched = await self.fetcher.fetch(url)
        result = self.extract_from_html(fetched.html)
        result.attempts = fetched.attempts
        result.extraction_time_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "Extracted note from %s via %s (%d content chars, %d places)",
            url,
            result.extraction_method or "nothing",
            len(result.content),
            len(result.places),
        )
        return result

    def extract_from_html(self, html: str) -> ExtractionResult:
        """Run every extraction stage over already-fetched HTML."""
        warnings: list[str] = []
        note = NormalizedNote()
        method = ""

        state = self._stage("state locator", self.state_locator.locate, html, warnings)
        if state is None:
            warnings.append("no embedded state found")
        else:
            candidate = self._stage("note resolver", self.note_resolver.resolve, state, warnings)
            if candidate is None:
                warnings.append("embedded state holds no note object")
            else:
                normalized = self._stage(
                    "field normalizer", self.field_normalizer.normalize, candidate, warnings
                )
                if normalized is not None:
                    note = normalized
                    method = "embedded-state"

        if not self.quality_gate.is_content_valid(note.content):
            dom = self._stage("DOM fallback", self.dom_extractor.extract_from_html, html, warnings)
            if dom is not None:
                note.title = note.title or dom.title
                note.content = dom.content
                method = dom.method

        if len(note.content) < self.config.min_content_length:
            note.content = ""
            method = ""

        if not note.places:
            note.places = (
                self._stage(
                    "place extractor",
                    lambda value: self.place_extractor.extract_places(*value),
                    (html, note.content),
                    warnings,
                )
                or []
            )

        login_wall = not note.content and has_login_prompt(html)
        if login_wall:
            warnings.append("page shows a login prompt")

        return ExtractionResult(
            title=note.title or self.config.placeholder_title,
            content=note.content or self.config.placeholder_content,
            places=note.places,
            extraction_method=method,
            login_wall=login_wall,
            warnings=warnings,
        )

    async def close(self) -> None:
        """Release the fetcher's HTTP client, if one is open."""
        await self.fetcher.close()

    async def __aenter__(self) -> NoteExtractionPipeline:
        """Async context manager entry; fetches share one HTTP client."""
        await self.fetcher.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - ensures cleanup."""
        await self.close()

    @staticmethod
    def _stage(
        name: str,
        func: Callable[[Any], T],
        value: Any,
        warnings: list[str],
    ) -> T | None:
        """Run one stage, converting an unexpected error into "no result"."""
        try:
            return func(value)
        except Exception as e:
            logger.warning("%s failed, falling back: %s", name, e, exc_info=True)
            warnings.append(f"{name} failed: {e}")
            return None
