"""Note extraction module for social-media note pages.

This module provides a multi-strategy extraction pipeline:
1. Embedded state JSON (window.__INITIAL_STATE__ and friends), repaired
   and searched for the note object
2. DOM pattern fallback over known content containers
3. Whole-page text as a last resort
4. Gazetteer place detection and a quality gate over the result

Usage:
    from app.services.extractors import NoteExtractionPipeline

    pipeline = NoteExtractionPipeline()
    result = await pipeline.extract("https://www.xiaohongshu.com/explore/...")
    verdict = pipeline.quality_gate.classify(result.title, result.content)
"""

from app.services.extractors.base import (
    PLACEHOLDER_CONTENT,
    PLACEHOLDER_TITLE,
    ExtractionConfig,
    ExtractionResult,
    FetchResult,
    NormalizedNote,
    Outcome,
    QualityVerdict,
)
from app.services.extractors.dom_fallback import DomFallbackExtractor
from app.services.extractors.exceptions import (
    ExtractionError,
    FetchError,
    FetchErrorKind,
    InvalidNoteUrlError,
    ParseError,
    TagExtractionError,
)
from app.services.extractors.fetcher import NoteFetcher
from app.services.extractors.field_normalizer import FieldNormalizer
from app.services.extractors.note_resolver import NoteResolver
from app.services.extractors.pipeline import NoteExtractionPipeline
from app.services.extractors.places import PlaceExtractor
from app.services.extractors.quality import QualityGate
from app.services.extractors.state_locator import StateLocator

__all__ = [
    # Base types
    "ExtractionConfig",
    "ExtractionResult",
    "FetchResult",
    "NormalizedNote",
    "Outcome",
    "QualityVerdict",
    "PLACEHOLDER_TITLE",
    "PLACEHOLDER_CONTENT",
    # Stages
    "NoteFetcher",
    "StateLocator",
    "NoteResolver",
    "FieldNormalizer",
    "DomFallbackExtractor",
    "PlaceExtractor",
    "QualityGate",
    "NoteExtractionPipeline",
    # Exceptions
    "ExtractionError",
    "FetchError",
    "FetchErrorKind",
    "ParseError",
    "InvalidNoteUrlError",
    "TagExtractionError",
]
