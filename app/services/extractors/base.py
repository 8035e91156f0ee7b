"""Base types for note extraction."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional, TypeVar

T = TypeVar("T")
R = TypeVar("R")

# Placeholders returned instead of empty fields
PLACEHOLDER_TITLE = "未获取到标题"
PLACEHOLDER_CONTENT = "无法获取笔记正文"


@dataclass(frozen=True)
class ExtractionConfig:
    """Configuration for the note extraction pipeline."""

    timeout_seconds: int = 15
    max_retries: int = 3  # Total fetch attempts
    retry_delay_seconds: float = 1.0  # Delay before attempt k is (k-1) * this
    user_agent: str | None = None  # None rotates through browser UAs
    proxy: str | None = None
    min_content_length: int = 10  # Shorter content is noise
    min_fragment_length: int = 20  # DOM fragments must be longer than this
    last_resort_threshold: int = 5000  # Slice whole-page text above this size
    last_resort_slice: tuple[float, float] = (0.2, 0.8)
    max_places: int = 10
    use_trafilatura: bool = True
    placeholder_title: str = PLACEHOLDER_TITLE
    placeholder_content: str = PLACEHOLDER_CONTENT


@dataclass(frozen=True)
class FetchResult:
    """Raw page fetched from the source site."""

    html: str
    attempts: int
    url: str = ""


@dataclass
class NormalizedNote:
    """Fields pulled out of a resolved note object."""

    title: str = ""
    content: str = ""
    places: list[str] = field(default_factory=list)


@dataclass
class DomExtraction:
    """Title/content recovered directly from page markup."""

    title: str = ""
    content: str = ""
    method: str = ""


@dataclass
class ExtractionResult:
    """Final output of the extraction pipeline.

    ``title`` and ``content`` are always populated, with placeholders when
    nothing usable was found.
    """

    title: str
    content: str
    places: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    extraction_method: str = ""  # Which stage produced the content
    extraction_time_ms: float = 0.0
    attempts: int = 0  # Fetch attempts used
    login_wall: bool = False  # Page showed login prompts
    warnings: list[str] = field(default_factory=list)


class Outcome(str, enum.Enum):
    """Quality gate classification."""

    SUCCESS = "success"
    PARTIAL_SUCCESS = "partial_success"
    FAILURE = "failure"


@dataclass(frozen=True)
class QualityVerdict:
    """Quality gate decision with its caller-facing message."""

    outcome: Outcome
    message: str
    title_valid: bool
    content_valid: bool


def first_successful(
    strategies: Iterable[Callable[[T], Optional[R]]],
    value: T,
) -> Optional[R]:
    """Apply strategies in order and return the first non-empty result.

    Later strategies are not evaluated once one succeeds.
    """
    for strategy in strategies:
        result = strategy(value)
        if result:
            return result
    return None

