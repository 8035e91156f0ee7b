"""Text cleaning and validation helpers shared by the extraction stages."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup
from bs4.element import Comment

# Tags whose text is never note content
NOISE_TAGS = ("script", "style", "noscript", "template")

# Site names and taglines appended to page titles
BRANDING_NAMES = (
    "小红书",
    "xiaohongshu",
    "xiaohongshu.com",
    "RED",
    "你的生活指南",
    "你的生活兴趣社区",
    "标记我的生活",
)
_BRANDING_LOWER = frozenset(name.lower() for name in BRANDING_NAMES)

_BRANDING_SUFFIX = re.compile(
    r"\s*[-_|\u2013\u2014]\s*(?:"
    + "|".join(re.escape(name) for name in BRANDING_NAMES)
    + r")(?![A-Za-z]).*$",
    re.I,
)
_GENERIC_SUFFIX = re.compile(r"\s+[-_|\u2013\u2014]\s+[^-_|\u2013\u2014]+$")

_WHITESPACE = re.compile(r"\s+")
_LETTER = re.compile(r"[A-Za-z\u4e00-\u9fff]")
_PUNCTUATION_ONLY = re.compile(r"^[\W_]+$")

# Short strings starting with these are navigation, not content
_CHROME_PREFIX = re.compile(
    r"^(?:(?:home|login|log\s*in|sign\s*in|sign\s*up|register|search|menu|nav"
    r"|navigation|ads?|advertisement|cookies?|privacy)\b"
    r"|首页|登录|注册|搜索|菜单|导航|广告|隐私)",
    re.I,
)
CHROME_MAX_LENGTH = 100

LOGIN_INDICATORS = (
    "登录后推荐",
    "登录查看更多",
    "请先登录",
    "登录后查看",
    "需要登录",
    "登录以继续",
    "sign in",
    "login",
)

# Comment/recommendation markers seen around note bodies
_UNRELATED_LINE = re.compile(
    r"(?:^|\s)\d{1,2}-\d{2}(?:\s|$)|\d+(?:\.\d+)?[wW万](?:\s|$)|评论|相关推荐|热门评论|查看更多|推荐"
)


def clean_html(
    fragment: str,
    separator: str = " ",
    extra_noise: tuple[str, ...] = (),
) -> str:
    """Strip noise elements, comments and tags, and decode entities.

    Whitespace is not collapsed; callers decide how to normalize it.
    """
    if not fragment:
        return ""
    soup = BeautifulSoup(fragment, "html.parser")
    for tag in soup(NOISE_TAGS + extra_noise):
        tag.decompose()
    for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
        comment.extract()
    return soup.get_text(separator=separator)


def collapse_whitespace(text: str) -> str:
    """Collapse every whitespace run to a single space and trim."""
    return _WHITESPACE.sub(" ", text or "").strip()


def clean_fragment(fragment: str) -> str:
    """Clean an HTML fragment down to a single line of text."""
    return collapse_whitespace(clean_html(fragment))


def strip_branding(title: str, generic: bool = False) -> str:
    """Remove site-branding suffixes from a page title.

    Known site names are always stripped. With ``generic`` the last segment
    after a spaced separator (``" - X"``) is treated as branding too, which
    suits ``<title>`` tags but not titles taken from note data. A title
    that is nothing but branding comes back empty.
    """
    if not title:
        return ""
    cleaned = _BRANDING_SUFFIX.sub("", title.strip()).strip()
    if generic:
        cleaned = _GENERIC_SUFFIX.sub("", cleaned).strip()
    if cleaned.lower() in _BRANDING_LOWER:
        return ""
    return cleaned


def has_letters(text: str) -> bool:
    return bool(_LETTER.search(text or ""))


def is_interface_chrome(text: str) -> bool:
    """True for short strings that start like navigation or banners."""
    stripped = (text or "").strip()
    return len(stripped) <= CHROME_MAX_LENGTH and bool(_CHROME_PREFIX.match(stripped))


def is_meaningful_text(text: str) -> bool:
    """Reject chrome, pure punctuation and letterless text."""
    if not text:
        return False
    if _PUNCTUATION_ONLY.match(text):
        return False
    if is_interface_chrome(text):
        return False
    return has_letters(text)


def is_valid_fragment(text: str, min_length: int = 20) -> bool:
    """Validate text cleaned out of a DOM content container."""
    return len(text or "") > min_length and is_meaningful_text(text)


def filter_unrelated_lines(text: str) -> str:
    """Drop lines that look like comments, recommendations or counters."""
    if not text:
        return ""
    kept = [line for line in text.splitlines() if not _UNRELATED_LINE.search(line)]
    return "\n".join(kept).strip()


def has_login_prompt(html: str) -> bool:
    """Detect login-wall wording anywhere in the page."""
    if not html:
        return False
    lowered = html.lower()
    return any(indicator in lowered for indicator in LOGIN_INDICATORS)


def tidy_lines(text: str) -> str:
    """Trim every line and drop blank ones, keeping line structure."""
    lines = (collapse_whitespace(line) for line in (text or "").splitlines())
    return "\n".join(line for line in lines if line)
