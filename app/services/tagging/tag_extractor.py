"""Extract place tags from note content with a chat-completions model."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass

import httpx

from app.services.extractors.exceptions import TagExtractionError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "请你从以下小红书笔记正文中，提取所有提到的景点名称（如\"杭州西湖\"\"灵隐寺\"），要求：\n\n"
    "1. 不重复；\n"
    "2. 只保留景点/地点名称；\n"
    "3. 输出格式为纯JSON数组字符串（仅数组，无任何多余文字、空格、换行），"
    "例如：[\"杭州西湖\",\"灵隐寺\",\"西溪湿地\"]"
)

MAX_TAG_LENGTH = 50

_CODE_FENCE = re.compile(r"```(?:json)?\s*", re.I)
_LIST_MARKER = re.compile(r"^(?:[-*•]|\d+[.)、])\s*")
_EDGE_QUOTES = re.compile(r"^[\"'“”‘’]+|[\"'“”‘’]+$")


@dataclass(frozen=True)
class TagExtractionConfig:
    """Configuration for the tag-extraction service."""

    api_key: str | None = None
    api_base: str = "https://api.openai.com/v1"
    model: str = "gpt-3.5-turbo"
    proxy: str | None = None
    timeout_seconds: int = 60
    max_tags: int = 20
    max_input_chars: int = 2000


class TagExtractor:
    """Ask an OpenAI-compatible endpoint for the places a note mentions.

    Every failure surfaces as TagExtractionError so callers can fall back to
    the gazetteer places.
    """

    def __init__(self, config: TagExtractionConfig | None = None) -> None:
        self.config = config or TagExtractionConfig()

    @property
    def endpoint(self) -> str:
        base = self.config.api_base.rstrip("/")
        if base.endswith("/chat/completions"):
            return base
        return f"{base}/chat/completions"

    async def extract(self, content: str) -> list[str]:
        """Return tags for ``content``.

        Raises:
            TagExtractionError: If no API key is configured, the request
                fails, or the answer holds no usable tags
        """
        if not self.config.api_key:
            raise TagExtractionError("Tag extraction is not configured (missing API key)")
        if not content or not content.strip():
            raise TagExtractionError("No content to extract tags from")

        text = content.strip()
        if len(text) > self.config.max_input_chars:
            text = text[: self.config.max_input_chars] + "..."

        payload = {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": text},
            ],
            "temperature": 0,
            "max_tokens": 200,
        }

        logger.debug("Requesting tags for %d chars of content", len(text))
        try:
            async with httpx.AsyncClient(
                timeout=self.config.timeout_seconds,
                proxy=self.config.proxy,
            ) as client:
                response = await client.post(
                    self.endpoint,
                    json=payload,
                    headers={"Authorization": f"Bearer {self.config.api_key}"},
                )
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException as e:
            raise TagExtractionError(f"Tag extraction timed out: {e}") from e
        except httpx.HTTPStatusError as e:
            raise TagExtractionError(
                f"Tag extraction returned HTTP {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise TagExtractionError(f"Tag extraction request failed: {e}") from e

        try:
            answer = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise TagExtractionError("Unexpected tag extraction response shape") from e

        if answer is None:
            answer = ""
        if not isinstance(answer, str):
            raise TagExtractionError(
                f"Tag extraction answer is {type(answer).__name__}, expected text"
            )

        tags = parse_tags(answer, self.config.max_tags)
        if not tags:
            raise TagExtractionError("Tag extraction returned no tags")
        logger.info("Extracted %d tags", len(tags))
        return tags


def parse_tags(answer: str, max_tags: int = 20) -> list[str]:
    """Parse a model answer into a clean tag list.

    A JSON array is preferred; otherwise every non-empty line is a tag with
    list markers and surrounding quotes removed.
    """
    cleaned = _CODE_FENCE.sub("", answer).replace("`", "").strip()
    normalized = cleaned.replace("“", '"').replace("”", '"').replace("‘", "'").replace("’", "'")

    candidates: list[str] = []
    try:
        parsed = json.loads(normalized)
    except json.JSONDecodeError:
        parsed = None

    if isinstance(parsed, list):
        candidates = [item for item in parsed if isinstance(item, str)]
    else:
        for line in cleaned.splitlines():
            line = _LIST_MARKER.sub("", line.strip())
            candidates.append(_EDGE_QUOTES.sub("", line).strip())

    tags = [tag.strip() for tag in candidates if tag and tag.strip()]
    tags = [tag for tag in tags if len(tag) < MAX_TAG_LENGTH]
    return list(dict.fromkeys(tags))[:max_tags]
