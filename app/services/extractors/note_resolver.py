"""Locate the note object inside an embedded state tree of unknown shape."""

from __future__ import annotations

import logging
from typing import Any, Sequence

logger = logging.getLogger(__name__)

# Path segment meaning "the value under the first key of this mapping"
FIRST_KEY = object()

# Direct access paths, tried in priority order
NOTE_PATHS: tuple[tuple[Any, ...], ...] = (
    ("noteInfo", "note"),
    ("note",),
    ("data", "note"),
    ("noteInfo",),
    ("data", "noteInfo"),
    ("page", "noteInfo"),
    ("page", "noteInfo", "note"),
    ("note", "noteDetailMap", FIRST_KEY, "note"),
    ("noteData", FIRST_KEY),
)

# A direct path succeeds when the object has any of these
DIRECT_MARKERS = ("title", "content", "desc")

TITLE_KEYS = ("title", "name", "noteTitle")
CONTENT_KEYS = ("content", "desc", "rawContent", "text", "note")

MAX_SEARCH_DEPTH = 5


def get_path(tree: Any, path: Sequence[Any]) -> Any | None:
    """Follow ``path`` through nested mappings.

    Returns None as soon as a segment is missing or the current value is not
    a mapping.
    """
    node = tree
    for segment in path:
        if not isinstance(node, dict) or not node:
            return None
        if segment is FIRST_KEY:
            node = next(iter(node.values()))
        else:
            node = node.get(segment)
        if node is None:
            return None
    return node


def is_searchable_key(key: Any) -> bool:
    """Only keys that name notes or content are descended into."""
    if not isinstance(key, str):
        return False
    lowered = key.lower()
    return key in ("note", "noteInfo") or "note" in lowered or "content" in lowered


def looks_like_note(node: Any) -> bool:
    """A note has a non-empty title-like and content-like field."""
    if not isinstance(node, dict):
        return False
    has_title = any(node.get(key) for key in TITLE_KEYS)
    has_content = any(node.get(key) for key in CONTENT_KEYS)
    return has_title and has_content


class NoteResolver:
    """Resolve the note sub-object of an embedded state.

    Direct paths are tried first; if none yields a note-shaped object a
    depth-bounded search walks note/content keys of the tree.
    """

    def __init__(
        self,
        paths: tuple[tuple[Any, ...], ...] = NOTE_PATHS,
        max_depth: int = MAX_SEARCH_DEPTH,
    ) -> None:
        self.paths = paths
        self.max_depth = max_depth

    def resolve(self, state: Any) -> dict | None:
        """Return the note object inside ``state``, or None."""
        if not isinstance(state, dict):
            return None

        for path in self.paths:
            candidate = get_path(state, path)
            if isinstance(candidate, dict) and any(
                marker in candidate for marker in DIRECT_MARKERS
            ):
                logger.debug("Note resolved via path %s", _format_path(path))
                return candidate

        found = self.search(state)
        if found is not None:
            logger.debug("Note resolved via bounded search")
        return found

    def search(self, node: Any, depth: int = 0) -> dict | None:
        """Depth-first search for a note-shaped object.

        The root is depth 0; objects deeper than ``max_depth`` are not
        inspected.
        """
        if not isinstance(node, dict):
            return None
        if looks_like_note(node):
            return node
        if depth >= self.max_depth:
            return None

        for key, child in node.items():
            if isinstance(child, dict) and is_searchable_key(key):
                found = self.search(child, depth + 1)
                if found is not None:
                    return found
        return None


def _format_path(path: Sequence[Any]) -> str:
    return ".".join("<first>" if segment is FIRST_KEY else str(segment) for segment in path)
