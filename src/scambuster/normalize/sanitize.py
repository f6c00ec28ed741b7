# src/scambuster/normalize/sanitize.py

"""Input cleanup for user-submitted report fields."""

import re
from typing import Optional
from urllib.parse import urlparse

_HTML_TAG = re.compile(r"<[^>]*>")
_CONTROL_CHARS = re.compile(r"[\x00-\x1F\x7F]")
_WHITESPACE = re.compile(r"\s+")


def strip_html(text: str) -> str:
    return _HTML_TAG.sub("", text)


def sanitize_text(text: str, max_length: int = 5000) -> str:
    """Strip HTML and NUL bytes, collapse whitespace, trim and truncate."""
    clean = strip_html(text).replace("\0", "")
    clean = _WHITESPACE.sub(" ", clean)
    return clean.strip()[:max_length]


def sanitize_identifier(text: str, max_length: int = 500) -> str:
    """Stricter cleanup for identifiers: no tags, no control characters."""
    clean = strip_html(text)
    clean = _CONTROL_CHARS.sub("", clean)
    return clean.strip()[:max_length]


def sanitize_url(text: str) -> Optional[str]:
    """Return the URL if it is an absolute http(s) link, otherwise None."""
    trimmed = text.strip()
    if not trimmed:
        return None
    try:
        parsed = urlparse(trimmed)
    except ValueError:
        return None
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None
    return parsed.geturl()
