"""Shared pytest fixtures for integration and unit tests.

Route tests swap the note service for ``FakeNoteService`` through FastAPI's
dependency overrides, so no network traffic happens. The fixtures below are
prefixed with ``shared_`` so they never collide with per-module fixtures.

Usage in new test files:
    def test_something(shared_client, fake_note_service):
        fake_note_service.result = NoteParseResult(...)
        resp = shared_client.post("/api/v1/notes/parse", json={"url": "..."})
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.routes.notes import get_note_service
from app.services.extractors import ExtractionResult, Outcome
from app.services.note_service import NoteParseResult


class FakeNoteService:
    """Stands in for NoteParseService and records the URLs it was given."""

    def __init__(self, result: NoteParseResult | None = None) -> None:
        self.result = result or NoteParseResult(
            outcome=Outcome.SUCCESS,
            message="Note parsed successfully.",
            result=ExtractionResult(
                title="杭州三日游",
                content="第一天去了西湖，第二天去了灵隐寺。",
                places=["西湖", "灵隐寺"],
                extraction_method="embedded-state",
                attempts=1,
            ),
            tags=["西湖", "灵隐寺"],
        )
        self.calls: list[str] = []

    async def parse(self, url: str) -> NoteParseResult:
        self.calls.append(url)
        return self.result


# ------------------------------------------------------------------
# Client fixtures (shared_ prefix to avoid collisions)
# ------------------------------------------------------------------


@pytest.fixture()
def fake_note_service() -> FakeNoteService:
    return FakeNoteService()


@pytest.fixture()
def shared_client(fake_note_service: FakeNoteService):
    """TestClient with the note service dependency overridden."""
    app.dependency_overrides[get_note_service] = lambda: fake_note_service
    with TestClient(app, raise_server_exceptions=False) as tc:
        yield tc
    app.dependency_overrides.clear()
