"""Tag extraction for parsed note content.

Usage:
    from app.services.tagging import TagExtractor, TagExtractionConfig

    extractor = TagExtractor(TagExtractionConfig(api_key="..."))
    tags = await extractor.extract(content)
"""

from app.services.tagging.tag_extractor import (
    TagExtractionConfig,
    TagExtractor,
    parse_tags,
)

__all__ = [
    "TagExtractionConfig",
    "TagExtractor",
    "parse_tags",
]
