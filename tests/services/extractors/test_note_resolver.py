"""Tests for locating the note object inside embedded state."""

from __future__ import annotations

from app.services.extractors.note_resolver import (
    FIRST_KEY,
    NoteResolver,
    get_path,
    is_searchable_key,
    looks_like_note,
)

NOTE = {"title": "杭州三日游", "desc": "第一天去了西湖，第二天去了灵隐寺。"}


def _wrap(node: dict, levels: int, key: str = "noteWrapper") -> dict:
    for _ in range(levels):
        node = {key: node}
    return node


class TestDirectPaths:
    def test_note_info_note(self) -> None:
        assert NoteResolver().resolve({"noteInfo": {"note": NOTE}}) is NOTE

    def test_path_priority(self) -> None:
        other = {"title": "other"}
        state = {"note": other, "noteInfo": {"note": NOTE}}

        assert NoteResolver().resolve(state) is NOTE

    def test_note_detail_map_first_entry(self) -> None:
        state = {"note": {"noteDetailMap": {"6650a1b2": {"note": NOTE}}}}

        assert NoteResolver().resolve(state) is NOTE

    def test_direct_path_only_needs_one_marker(self) -> None:
        state = {"data": {"note": {"desc": "body only"}}}

        assert NoteResolver().resolve(state) == {"desc": "body only"}


class TestBoundedSearch:
    def test_found_at_depth_five(self) -> None:
        assert NoteResolver().resolve(_wrap(NOTE, 5)) is NOTE

    def test_not_found_at_depth_six(self) -> None:
        assert NoteResolver().resolve(_wrap(NOTE, 6)) is None

    def test_only_note_or_content_keys_are_searched(self) -> None:
        assert NoteResolver().resolve({"user": NOTE}) is None
        assert NoteResolver().resolve({"mainContent": NOTE}) is NOTE

    def test_search_needs_title_and_content(self) -> None:
        assert NoteResolver().resolve({"noteWrapper": {"title": "only"}}) is None

    def test_non_mapping_state(self) -> None:
        assert NoteResolver().resolve(["not", "a", "dict"]) is None
        assert NoteResolver().resolve(None) is None


class TestHelpers:
    def test_get_path(self) -> None:
        tree = {"a": {"b": {"c": 1}}}

        assert get_path(tree, ("a", "b", "c")) == 1
        assert get_path(tree, ("a", "x")) is None
        assert get_path(tree, ("a", "b", "c", "d")) is None

    def test_get_path_first_key(self) -> None:
        assert get_path({"m": {"k1": "v1", "k2": "v2"}}, ("m", FIRST_KEY)) == "v1"
        assert get_path({"m": {}}, ("m", FIRST_KEY)) is None

    def test_is_searchable_key(self) -> None:
        assert is_searchable_key("note")
        assert is_searchable_key("noteInfo")
        assert is_searchable_key("currentNoteDetail")
        assert is_searchable_key("pageContent")
        assert not is_searchable_key("user")
        assert not is_searchable_key(3)

    def test_looks_like_note(self) -> None:
        assert looks_like_note({"name": "n", "rawContent": "c"})
        assert not looks_like_note({"title": "", "desc": "c"})
        assert not looks_like_note("title")
