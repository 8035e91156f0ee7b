"""Tests for the note extraction pipeline."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from app.services.extractors.base import (
    PLACEHOLDER_CONTENT,
    PLACEHOLDER_TITLE,
    ExtractionConfig,
    Outcome,
)
from app.services.extractors.exceptions import FetchError, FetchErrorKind
from app.services.extractors.pipeline import NoteExtractionPipeline

# Page with a complete embedded note
EMBEDDED_STATE_HTML = """
<!DOCTYPE html>
<html>
<head><title>杭州三日游 - 小红书</title></head>
<body>
<div id="app"></div>
<script>window.__INITIAL_STATE__={"note":{"noteDetailMap":{"6650a1b2":{"note":{
"title":"杭州三日游","desc":"第一天去了西湖，第二天去了灵隐寺。",
"tagList":[{"type":"location","name":"西湖"}],"user":undefined}}}}}</script>
</body>
</html>
"""

# No embedded state; body lives in a known container
DOM_ONLY_HTML = """
<!DOCTYPE html>
<html>
<head><title>Weekend in Suzhou | TravelSite</title></head>
<body>
<div class="note-content">We walked around 苏州 gardens and ate noodles all day.</div>
</body>
</html>
"""

# Login wall: nothing but navigation and a prompt
LOGIN_WALL_HTML = """
<!DOCTYPE html>
<html>
<head><title>Login - SiteName</title></head>
<body>
<nav>Home | Explore</nav>
<div class="login-box">Login to continue</div>
</body>
</html>
"""

# The real site's login wall: a branding-only title and a login prompt
SITE_LOGIN_WALL_HTML = """
<!DOCTYPE html>
<html>
<head><title>小红书 - 你的生活指南</title></head>
<body>
<div class="login-container">请先登录</div>
</body>
</html>
"""

# Embedded note whose body is too short to count
SHORT_BODY_HTML = """
<html>
<head></head>
<body>
<script>window.__INITIAL_STATE__={"noteInfo":{"note":{"title":"周末去杭州","desc":"好玩"}}}</script>
</body>
</html>
"""


@pytest.fixture
def pipeline() -> NoteExtractionPipeline:
    return NoteExtractionPipeline(ExtractionConfig(use_trafilatura=False))


def _response(html: str) -> MagicMock:
    response = MagicMock()
    response.status_code = 200
    response.text = html
    return response


class TestExtractFromHtml:
    """Stage orchestration over fetched HTML."""

    def test_embedded_state(self, pipeline: NoteExtractionPipeline) -> None:
        result = pipeline.extract_from_html(EMBEDDED_STATE_HTML)

        assert result.title == "杭州三日游"
        assert result.content == "第一天去了西湖，第二天去了灵隐寺。"
        assert result.places == ["西湖"]
        assert result.extraction_method == "embedded-state"
        assert result.login_wall is False

    def test_dom_fallback(self, pipeline: NoteExtractionPipeline) -> None:
        result = pipeline.extract_from_html(DOM_ONLY_HTML)

        assert result.title == "Weekend in Suzhou"
        assert result.content == "We walked around 苏州 gardens and ate noodles all day."
        assert result.places == ["苏州"]
        assert result.extraction_method == "dom-selector-1"
        assert "no embedded state found" in result.warnings

    def test_login_wall(self, pipeline: NoteExtractionPipeline) -> None:
        result = pipeline.extract_from_html(LOGIN_WALL_HTML)

        assert result.title == PLACEHOLDER_TITLE
        assert result.content == PLACEHOLDER_CONTENT
        assert result.login_wall is True
        assert result.extraction_method == ""

        verdict = pipeline.quality_gate.classify(
            result.title, result.content, login_wall=result.login_wall
        )
        assert verdict.outcome is Outcome.FAILURE
        assert "login" in verdict.message.lower()

    def test_branding_only_login_wall_is_failure(
        self, pipeline: NoteExtractionPipeline
    ) -> None:
        result = pipeline.extract_from_html(SITE_LOGIN_WALL_HTML)

        assert result.title == PLACEHOLDER_TITLE
        assert result.content == PLACEHOLDER_CONTENT
        assert result.login_wall is True

        verdict = pipeline.quality_gate.classify(
            result.title, result.content, login_wall=result.login_wall
        )
        assert verdict.outcome is Outcome.FAILURE
        assert "login prompt" in verdict.message

    def test_short_body_gives_partial_result(self, pipeline: NoteExtractionPipeline) -> None:
        result = pipeline.extract_from_html(SHORT_BODY_HTML)

        assert result.title == "周末去杭州"
        assert result.content == PLACEHOLDER_CONTENT
        assert result.places == ["杭州"]

        verdict = pipeline.quality_gate.classify(result.title, result.content)
        assert verdict.outcome is Outcome.PARTIAL_SUCCESS

    def test_stage_error_does_not_abort(self, pipeline: NoteExtractionPipeline) -> None:
        with patch.object(
            pipeline.state_locator, "locate", side_effect=RuntimeError("boom")
        ):
            result = pipeline.extract_from_html(DOM_ONLY_HTML)

        assert result.extraction_method == "dom-selector-1"
        assert any("state locator failed" in w for w in result.warnings)

    def test_empty_html(self, pipeline: NoteExtractionPipeline) -> None:
        result = pipeline.extract_from_html("")

        assert result.title == PLACEHOLDER_TITLE
        assert result.content == PLACEHOLDER_CONTENT
        assert result.places == []


class TestExtract:
    """End-to-end extraction with a mocked network."""

    @pytest.mark.asyncio
    async def test_extract_success(self, pipeline: NoteExtractionPipeline) -> None:
        with patch.object(
            httpx.AsyncClient, "get", return_value=_response(EMBEDDED_STATE_HTML)
        ):
            result = await pipeline.extract("https://www.xiaohongshu.com/explore/6650a1b2")

        assert result.title == "杭州三日游"
        assert result.attempts == 1
        assert result.extraction_time_ms >= 0

    @pytest.mark.asyncio
    async def test_fetch_failure_propagates(self, pipeline: NoteExtractionPipeline) -> None:
        with patch.object(
            httpx.AsyncClient,
            "get",
            side_effect=httpx.TimeoutException("Connection timed out"),
        ), patch("app.services.extractors.fetcher.asyncio.sleep", AsyncMock()):
            with pytest.raises(FetchError) as exc_info:
                await pipeline.extract("https://www.xiaohongshu.com/explore/slow")

        assert exc_info.value.kind is FetchErrorKind.TIMEOUT
        assert exc_info.value.attempts == 3

    @pytest.mark.asyncio
    async def test_context_manager_closes_client(self) -> None:
        with patch.object(
            httpx.AsyncClient, "get", return_value=_response(EMBEDDED_STATE_HTML)
        ):
            async with NoteExtractionPipeline() as pipeline:
                assert pipeline.fetcher._client is not None
                result = await pipeline.extract("https://www.xiaohongshu.com/explore/6650a1b2")

        assert result.title == "杭州三日游"
        assert pipeline.fetcher._client is None
