"""Tests for base extraction types."""

from __future__ import annotations

import pytest

from app.services.extractors.base import (
    PLACEHOLDER_CONTENT,
    PLACEHOLDER_TITLE,
    ExtractionConfig,
    ExtractionResult,
    Outcome,
    first_successful,
)


class TestExtractionConfig:
    """Test suite for ExtractionConfig dataclass."""

    def test_default_values(self) -> None:
        """Test that default values are set correctly."""
        config = ExtractionConfig()

        assert config.timeout_seconds == 15
        assert config.max_retries == 3
        assert config.retry_delay_seconds == 1.0
        assert config.min_content_length == 10
        assert config.min_fragment_length == 20
        assert config.last_resort_threshold == 5000
        assert config.last_resort_slice == (0.2, 0.8)
        assert config.max_places == 10
        assert config.user_agent is None
        assert config.placeholder_title == PLACEHOLDER_TITLE
        assert config.placeholder_content == PLACEHOLDER_CONTENT

    def test_custom_values(self) -> None:
        """Test that custom values can be set."""
        config = ExtractionConfig(
            timeout_seconds=5,
            max_retries=1,
            user_agent="custom-agent/1.0",
            use_trafilatura=False,
        )

        assert config.timeout_seconds == 5
        assert config.max_retries == 1
        assert config.user_agent == "custom-agent/1.0"
        assert config.use_trafilatura is False

    def test_is_frozen(self) -> None:
        """Test that config is immutable (frozen dataclass)."""
        config = ExtractionConfig()

        with pytest.raises(AttributeError):
            config.timeout_seconds = 60  # type: ignore[misc]


class TestExtractionResult:
    """Test suite for ExtractionResult dataclass."""

    def test_defaults(self) -> None:
        result = ExtractionResult(title="T", content="C")

        assert result.places == []
        assert result.tags == []
        assert result.attempts == 0
        assert result.login_wall is False
        assert result.warnings == []

    def test_lists_are_not_shared(self) -> None:
        first = ExtractionResult(title="a", content="b")
        second = ExtractionResult(title="c", content="d")
        first.places.append("西湖")

        assert second.places == []


class TestOutcome:
    def test_values(self) -> None:
        assert Outcome.SUCCESS.value == "success"
        assert Outcome.PARTIAL_SUCCESS.value == "partial_success"
        assert Outcome.FAILURE.value == "failure"


class TestFirstSuccessful:
    def test_returns_first_truthy_result(self) -> None:
        calls: list[str] = []

        def empty(value: str) -> str | None:
            calls.append("empty")
            return None

        def upper(value: str) -> str:
            calls.append("upper")
            return value.upper()

        def never(value: str) -> str:
            calls.append("never")
            return value

        assert first_successful([empty, upper, never], "abc") == "ABC"
        assert calls == ["empty", "upper"]

    def test_returns_none_when_all_fail(self) -> None:
        assert first_successful([lambda v: "", lambda v: None], "x") is None
