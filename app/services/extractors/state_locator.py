"""Locate and repair embedded page state JSON."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from app.services.extractors.exceptions import ParseError

logger = logging.getLogger(__name__)

STATE_IDENTIFIERS = (
    "__INITIAL_STATE__",
    "__NOTE_INFO__",
    "__REDUX_STATE__",
    "__PRELOADED_STATE__",
    "__INITIAL_SSR_STATE__",
)

_IDENT_ALTERNATION = "|".join(re.escape(name) for name in STATE_IDENTIFIERS)

# Tried strictly in order; the first one whose capture parses wins
STATE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"window\.__INITIAL_STATE__\s*=\s*(\{.*?)(?:</script>|\Z)", re.S),
    re.compile(r"window\.__NOTE_INFO__\s*=\s*(\{.*?)(?:</script>|\Z)", re.S),
    re.compile(r"window\.__REDUX_STATE__\s*=\s*(\{.*?)(?:</script>|\Z)", re.S),
    re.compile(r"window\.__PRELOADED_STATE__\s*=\s*(\{.*?)(?:</script>|\Z)", re.S),
    re.compile(r"window\.__INITIAL_SSR_STATE__\s*=\s*(\{.*?)(?:</script>|\Z)", re.S),
    re.compile(
        r"<script[^>]*>[^<]*?(?:" + _IDENT_ALTERNATION + r")[^=<]*=\s*(\{.*?)</script>",
        re.S | re.I,
    ),
    re.compile(
        r"<script[^>]*>(?=[^<]*?(?:noteId|noteDetail|\"note\"))[^{<]*(\{[^<]{200,})</script>",
        re.S | re.I,
    ),
)

_TRAILING_COMMA = re.compile(r",\s*([}\]])")
_UNDEFINED_VALUE = re.compile(r"([:\[,]\s*)undefined\b")


class StateLocator:
    """Find the embedded initial-state object inside page markup."""

    def __init__(self, patterns: tuple[re.Pattern[str], ...] = STATE_PATTERNS) -> None:
        self.patterns = patterns

    def locate(self, html: str) -> Any | None:
        """Return the first embedded state that parses, or None.

        Not finding any state is the common case for login walls and
        client-rendered pages, so None is returned rather than raising.
        """
        if not html:
            return None

        for index, pattern in enumerate(self.patterns, start=1):
            for match in pattern.finditer(html):
                try:
                    state = parse_state(match.group(1))
                except ParseError as e:
                    logger.debug("State pattern %d matched but did not parse: %s", index, e)
                    continue
                logger.debug("Embedded state found with pattern %d", index)
                return state

        logger.debug("No embedded state found in %d chars of HTML", len(html))
        return None


def parse_state(raw: str) -> Any:
    """Repair a JavaScript object literal and parse it as JSON.

    Raises:
        ParseError: If the repaired text still is not valid JSON
    """
    text = repair_json(raw)
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        # A second statement after the object also ends in "}"
        balanced = truncate_to_balanced(text, first=True) if text.startswith("{") else text
        if balanced != text:
            try:
                return json.loads(balanced)
            except json.JSONDecodeError:
                pass
        raise ParseError(f"Invalid embedded state at offset {e.pos}: {e.msg}") from e


def repair_json(raw: str) -> str:
    """Apply the repair heuristics in order.

    1. strip ``/* */`` and ``//`` comments outside strings
    2. replace bare ``undefined`` values with ``null``
    3. drop trailing commas before ``}`` or ``]``
    4. truncate an unterminated object to its largest balanced prefix
    """
    text = raw.strip().rstrip(";").strip()
    text = strip_comments(text)
    text = _UNDEFINED_VALUE.sub(r"\1null", text)
    text = _TRAILING_COMMA.sub(r"\1", text)
    text = text.strip()
    if text.startswith("{") and not text.endswith("}"):
        text = truncate_to_balanced(text)
    return text


def strip_comments(text: str) -> str:
    """Remove JavaScript comments while leaving string literals intact."""
    out: list[str] = []
    i = 0
    length = len(text)
    quote: str | None = None

    while i < length:
        ch = text[i]
        if quote:
            out.append(ch)
            if ch == "\\" and i + 1 < length:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == quote:
                quote = None
            i += 1
            continue

        if ch in ('"', "'"):
            quote = ch
            out.append(ch)
            i += 1
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            i = length if end == -1 else end + 2
        elif text.startswith("//", i):
            end = text.find("\n", i + 2)
            i = length if end == -1 else end
        else:
            out.append(ch)
            i += 1

    return "".join(out)


def truncate_to_balanced(text: str, first: bool = False) -> str:
    """Cut ``text`` after the last ``}`` that closes a top-level object.

    With ``first`` the cut is made after the first top-level object instead.
    """
    depth = 0
    last_close = -1
    in_string = False
    escaped = False

    for i, ch in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                last_close = i
                if first:
                    break

    if last_close == -1:
        return text
    return text[: last_close + 1]
