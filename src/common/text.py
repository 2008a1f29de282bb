"""Text and URL normalization utilities."""

import re
from typing import Optional
from urllib.parse import urldefrag, urlsplit

_WHITESPACE_RE = re.compile(r"\s+")
_TAG_RE = re.compile(r"<[^>]*?>")
_ARABIC_RE = re.compile(r"[؀-ۿ]")

ELLIPSIS = "…"


def collapse_whitespace(text: Optional[str]) -> str:
    """Collapse whitespace runs to single spaces and trim."""
    return _WHITESPACE_RE.sub(" ", text or "").strip()


def normalize_text(text: Optional[str], max_len: int = 220) -> str:
    """Collapse whitespace and truncate to `max_len` characters.

    Text longer than `max_len` is cut to `max_len - 1` characters and
    terminated with a single ellipsis character, so the result never
    exceeds `max_len`.
    """
    clean = collapse_whitespace(text)
    if len(clean) <= max_len:
        return clean
    if max_len <= 0:
        return ""
    return clean[: max_len - 1] + ELLIPSIS


def strip_html(html: Optional[str]) -> str:
    """Remove tag spans and collapse whitespace.

    Entities are left as-is. The output is plain text and must not be
    rendered as HTML.
    """
    return collapse_whitespace(_TAG_RE.sub(" ", html or ""))


def normalize_url(url: Optional[str]) -> Optional[str]:
    """Drop the fragment from an absolute URL.

    Anything that does not parse as an absolute URL is returned unchanged.
    """
    if not url:
        return url
    candidate = url.strip()
    try:
        parts = urlsplit(candidate)
    except ValueError:
        return url
    if not parts.scheme or not parts.netloc:
        return url
    return urldefrag(candidate).url


def is_arabic(text: Optional[str]) -> bool:
    """Return True if the text contains any Arabic-block code point."""
    return bool(_ARABIC_RE.search(text or ""))


def detect_language(text: Optional[str]) -> str:
    """Guess the language code from script: "ar" for Arabic, else "en"."""
    return "ar" if is_arabic(text) else "en"
