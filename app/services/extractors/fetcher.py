"""Fetch note pages with browser-like request framing and bounded retry."""

from __future__ import annotations

import asyncio
import logging
import random
from urllib.parse import urlparse

import httpx

from app.services.extractors.base import ExtractionConfig, FetchResult
from app.services.extractors.exceptions import FetchError, FetchErrorKind

logger = logging.getLogger(__name__)

# Desktop browser strings rotated per attempt
BROWSER_USER_AGENTS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 "
    "Firefox/121.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.0 Safari/605.1.15",
)


class NoteFetcher:
    """Retrieve raw HTML for a note URL.

    Attempts are sequential. Before attempt ``k`` (k > 1) the fetcher sleeps
    ``(k - 1) * retry_delay_seconds``; once every attempt has failed a
    FetchError carrying the attempt count and last error is raised.
    """

    def __init__(self, config: ExtractionConfig | None = None) -> None:
        self.config = config or ExtractionConfig()
        self._client: httpx.AsyncClient | None = None

    def _new_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.config.timeout_seconds,
            follow_redirects=True,
            proxy=self.config.proxy,
        )

    async def open(self) -> None:
        """Keep one client open across fetches until close() is called."""
        if self._client is None:
            self._client = self._new_client()

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def build_headers(self, url: str) -> dict[str, str]:
        """Browser headers for a request to ``url``.

        The Referer points at the target site's own origin.
        """
        parsed = urlparse(url)
        referer = f"{parsed.scheme or 'https'}://{parsed.netloc}/" if parsed.netloc else ""
        headers = {
            "User-Agent": self.config.user_agent or random.choice(BROWSER_USER_AGENTS),
            "Accept": (
                "text/html,application/xhtml+xml,application/xml;q=0.9,"
                "image/avif,image/webp,*/*;q=0.8"
            ),
            "Accept-Language": "zh-CN,zh;q=0.9,en;q=0.8",
            "Cache-Control": "no-cache",
            "Upgrade-Insecure-Requests": "1",
        }
        if referer:
            headers["Referer"] = referer
        return headers

    async def fetch(self, url: str) -> FetchResult:
        """Fetch ``url`` and return its HTML.

        Args:
            url: Absolute http(s) URL of the note page

        Returns:
            FetchResult with the page text and the attempt count used

        Raises:
            FetchError: If every attempt failed
        """
        if self._client is not None:
            return await self._fetch_with_retry(self._client, url)
        async with self._new_client() as client:
            return await self._fetch_with_retry(client, url)

    async def _fetch_with_retry(self, client: httpx.AsyncClient, url: str) -> FetchResult:
        max_attempts = max(1, self.config.max_retries)
        last_error: FetchError | None = None

        for attempt in range(1, max_attempts + 1):
            if attempt > 1:
                delay = (attempt - 1) * self.config.retry_delay_seconds
                logger.info(
                    "Retrying %s in %.1fs (attempt %d/%d)",
                    url,
                    delay,
                    attempt,
                    max_attempts,
                )
                await asyncio.sleep(delay)

            try:
                html = await self._fetch_once(client, url)
            except FetchError as e:
                last_error = e
                logger.warning(
                    "Fetch attempt %d/%d for %s failed [%s]: %s",
                    attempt,
                    max_attempts,
                    url,
                    e.kind.value,
                    e,
                )
                continue

            logger.debug("Fetched %d chars from %s on attempt %d", len(html), url, attempt)
            return FetchResult(html=html, attempts=attempt, url=url)

        kind = last_error.kind if last_error else FetchErrorKind.UNKNOWN
        raise FetchError(
            f"Failed to fetch {url} after {max_attempts} attempts: {last_error}",
            kind=kind,
            attempts=max_attempts,
        )

    async def _fetch_once(self, client: httpx.AsyncClient, url: str) -> str:
        """Run a single GET and map failures onto FetchErrorKind."""
        try:
            response = await client.get(url, headers=self.build_headers(url))
        except httpx.TimeoutException as e:
            raise FetchError(f"Timeout fetching {url}: {e}", FetchErrorKind.TIMEOUT) from e
        except httpx.ConnectError as e:
            raise FetchError(
                f"Connection refused for {url}: {e}", FetchErrorKind.CONNECTION_REFUSED
            ) from e
        except httpx.HTTPError as e:
            raise FetchError(f"Network error fetching {url}: {e}", FetchErrorKind.UNKNOWN) from e

        status = response.status_code
        if status == 404:
            raise FetchError(f"HTTP 404 from {url}", FetchErrorKind.NOT_FOUND)
        if status == 403:
            raise FetchError(f"HTTP 403 from {url}", FetchErrorKind.FORBIDDEN)
        if status >= 400:
            raise FetchError(f"HTTP {status} from {url}", FetchErrorKind.UNKNOWN)

        return response.text
