"""Extract note title and body straight from page markup.

Used when the page carries no usable embedded state. Content containers are
matched with an ordered list of CSS selectors; the first fragment that survives
cleaning and validation wins. When no container qualifies the page's meta
description, trafilatura's readable-text extraction and finally the whole
document text are tried in that order.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Optional

import trafilatura
from bs4 import BeautifulSoup

from app.services.extractors.base import DomExtraction, ExtractionConfig, first_successful
from app.services.extractors.text import (
    clean_fragment,
    clean_html,
    collapse_whitespace,
    filter_unrelated_lines,
    is_interface_chrome,
    is_meaningful_text,
    is_valid_fragment,
    strip_branding,
    tidy_lines,
)

logger = logging.getLogger(__name__)


# Likely content containers, most specific first. Class selectors match a
# substring of the class attribute.
CONTENT_SELECTORS: tuple[str, ...] = (
    '[class*="note-content" i]',
    '[class*="noteContent" i]',
    '[class*="note-text" i]',
    '[class*="content-wrapper" i]',
    '[class*="detail-desc" i]',
    '[class*="desc" i]',
    '[class*="rich-text" i]',
    '[class*="text-content" i]',
    '[class*="post-content" i]',
    '[class*="article-content" i]',
    "[data-note-content]",
    "[data-content]",
    '[id="note-content" i]',
    '[id="detail-desc" i]',
    '[id="content" i]',
    "article",
)

_TITLE_TAG = re.compile(r"<title[^>]*>(.*?)</title>", re.I | re.S)

ContentStrategy = Callable[[str], Optional[tuple[str, str]]]


class DomFallbackExtractor:
    """Recover title and content from raw HTML."""

    def __init__(
        self,
        config: ExtractionConfig | None = None,
        selectors: tuple[str, ...] = CONTENT_SELECTORS,
    ) -> None:
        self.config = config or ExtractionConfig()
        self.selectors = selectors

    def extract_from_html(self, html: str) -> DomExtraction:
        """Extract title and content; either may come back empty."""
        title = self.extract_title(html)
        found = self.extract_content(html)
        content, method = found if found else ("", "")
        return DomExtraction(title=title, content=content, method=method)

    # ------------------------------------------------------------------
    # Title
    # ------------------------------------------------------------------

    def extract_title(self, html: str) -> str:
        """``<title>`` without branding, else the og:title / twitter:title meta."""
        match = _TITLE_TAG.search(html or "")
        if match:
            title = strip_branding(clean_fragment(match.group(1)), generic=True)
            if title and not is_interface_chrome(title):
                return title

        for key in ("og:title", "twitter:title"):
            title = strip_branding(self._meta(html, key))
            if title and not is_interface_chrome(title):
                return title
        return ""

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    def extract_content(self, html: str) -> tuple[str, str] | None:
        """Return ``(content, method)`` from the first strategy that works."""
        if not html:
            return None
        strategies: list[ContentStrategy] = [
            self._from_containers,
            self._from_meta_description,
        ]
        if self.config.use_trafilatura:
            strategies.append(self._from_trafilatura)
        strategies.append(self._from_whole_document)
        return first_successful(strategies, html)

    def _from_containers(self, html: str) -> tuple[str, str] | None:
        soup = BeautifulSoup(html, "html.parser")
        for index, selector in enumerate(self.selectors, start=1):
            for element in soup.select(selector):
                # Whole subtree, nested children included
                text = clean_fragment(element.decode_contents())
                if is_valid_fragment(text, self.config.min_fragment_length):
                    logger.debug("DOM content matched selector %d (%d chars)", index, len(text))
                    return text, f"dom-selector-{index}"
        return None

    def _from_meta_description(self, html: str) -> tuple[str, str] | None:
        for key in ("og:description", "description"):
            text = collapse_whitespace(self._meta(html, key))
            if is_valid_fragment(text, self.config.min_fragment_length):
                return text, "meta-description"
        return None

    def _from_trafilatura(self, html: str) -> tuple[str, str] | None:
        try:
            text = trafilatura.extract(
                html,
                include_comments=False,
                include_tables=False,
                favor_precision=True,
            )
        except Exception as e:
            logger.warning("trafilatura extraction failed: %s", e)
            return None
        text = tidy_lines(text or "")
        if is_valid_fragment(text, self.config.min_fragment_length):
            return text, "trafilatura"
        return None

    def _from_whole_document(self, html: str) -> tuple[str, str] | None:
        """Last resort: all visible text, middle slice for long pages."""
        visible = clean_html(html, separator="\n", extra_noise=("head",))
        text = collapse_whitespace(filter_unrelated_lines(visible))
        if len(text) > self.config.last_resort_threshold:
            start, end = self.config.last_resort_slice
            text = text[int(len(text) * start) : int(len(text) * end)].strip()
        if not is_meaningful_text(text):
            return None
        return text, "whole-document"

    @staticmethod
    def _meta(html: str, key: str) -> str:
        """Content of a ``<meta property=key>`` or ``<meta name=key>`` tag."""
        if not html or key not in html:
            return ""
        soup = BeautifulSoup(html, "html.parser")
        tag = soup.find("meta", attrs={"property": key}) or soup.find(
            "meta", attrs={"name": key}
        )
        if tag is None:
            return ""
        return (tag.get("content") or "").strip()
