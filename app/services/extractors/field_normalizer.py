"""Pull title, content and places out of a resolved note object."""

from __future__ import annotations

import logging
import re
from typing import Any

from app.services.extractors.base import ExtractionConfig, NormalizedNote
from app.services.extractors.text import clean_html, strip_branding, tidy_lines

logger = logging.getLogger(__name__)

TITLE_FIELDS = ("title", "name", "noteTitle", "displayTitle")

CONTENT_FIELDS = (
    "content",
    "desc",
    "rawContent",
    "text",
    "note",
    "description",
    "noteContent",
    "body",
    "detail",
    "summary",
    "abstract",
    "markdown",
    "html",
)

# Accessors for a single location entry, in priority order
LOCATION_NAME_FIELDS = ("name", "location", "title", "address")
POI_NAME_FIELDS = ("name", "title")

_MARKUP = re.compile(r"<[a-zA-Z/!][^>]*>")


class FieldNormalizer:
    """Normalize the loosely shaped fields of a note object."""

    def __init__(self, config: ExtractionConfig | None = None) -> None:
        self.config = config or ExtractionConfig()

    def normalize(self, candidate: dict) -> NormalizedNote:
        """Extract cleaned title, content and places.

        Content shorter than ``min_content_length`` after cleanup is
        returned empty so that later stages treat it as missing.
        """
        title = self.extract_title(candidate)
        content = self.extract_content(candidate)
        if len(content) < self.config.min_content_length:
            if content:
                logger.debug("Discarding %d-char note content as noise", len(content))
            content = ""
        places = self.extract_places(candidate)
        return NormalizedNote(title=title, content=content, places=places)

    def extract_title(self, candidate: dict) -> str:
        for key in TITLE_FIELDS:
            value = candidate.get(key)
            if isinstance(value, str) and value.strip():
                title = strip_branding(value)
                if title:
                    return title
        return ""

    def extract_content(self, candidate: dict) -> str:
        """Flatten the first present content field into text."""
        for key in CONTENT_FIELDS:
            value = candidate.get(key)
            if not value:
                continue
            text = flatten_content(value)
            if _MARKUP.search(text):
                text = clean_html(text, separator="\n")
            return tidy_lines(text)
        return ""

    def extract_places(self, candidate: dict) -> list[str]:
        """Collect location names from the note's location fields."""
        names: list[str] = []
        locations = candidate.get("locations")
        if isinstance(locations, list):
            names = [_pick_name(item, LOCATION_NAME_FIELDS) for item in locations]
        elif candidate.get("location"):
            names = [_pick_name(candidate["location"], LOCATION_NAME_FIELDS)]
        elif isinstance(candidate.get("poiList"), list):
            names = [_pick_name(item, POI_NAME_FIELDS) for item in candidate["poiList"]]

        tag_list = candidate.get("tagList")
        if not any(names) and isinstance(tag_list, list):
            names = [
                _pick_name(tag, POI_NAME_FIELDS)
                for tag in tag_list
                if isinstance(tag, dict) and tag.get("type") == "location"
            ]

        return _unique([name for name in names if name], self.config.max_places)


def flatten_content(value: Any) -> str:
    """Best textual representation of a content value.

    Strings pass through; arrays are flattened element-wise and joined with
    newlines; objects contribute ``text``, ``value`` or their ``blocks``.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        parts = (_element_text(item) for item in value)
        return "\n".join(part for part in parts if part)
    if isinstance(value, dict):
        for key in ("text", "value"):
            if isinstance(value.get(key), str) and value[key]:
                return value[key]
        if isinstance(value.get("blocks"), list):
            return flatten_content(value["blocks"])
    return ""


def _element_text(item: Any) -> str:
    if isinstance(item, str):
        return item.strip()
    if isinstance(item, dict):
        for key in ("text", "content"):
            if isinstance(item.get(key), str):
                return item[key].strip()
        if item.get("type") == "text" and isinstance(item.get("value"), str):
            return item["value"].strip()
    return ""


def _pick_name(item: Any, fields: tuple[str, ...]) -> str:
    if isinstance(item, str):
        return item.strip()
    if isinstance(item, dict):
        for key in fields:
            value = item.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return ""


def _unique(values: list[str], limit: int) -> list[str]:
    return list(dict.fromkeys(values))[:limit]
