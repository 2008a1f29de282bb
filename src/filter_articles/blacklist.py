"""Banned-term filtering."""

import logging
import re
from typing import Any, Callable, Mapping

logger = logging.getLogger(__name__)

BLACKLIST_BUCKETS = ("ar", "en", "adult", "violence")


def compile_blacklist(blacklist: Mapping[str, Any] | None) -> Callable[[str], bool]:
    """Compile the term buckets into an `is_blocked(text)` predicate.

    Terms from every bucket are escaped and joined into one word-boundary,
    case-insensitive alternation. With no terms the predicate always
    returns False.
    """
    terms = []
    for bucket in BLACKLIST_BUCKETS:
        terms.extend(t for t in (blacklist or {}).get(bucket) or [] if t)

    if not terms:
        return lambda text: False

    pattern = re.compile(r"\b(" + "|".join(re.escape(t) for t in terms) + r")\b", re.IGNORECASE)
    logger.info("Compiled blacklist with %d terms", len(terms))

    def is_blocked(text: str) -> bool:
        return bool(pattern.search((text or "").lower()))

    return is_blocked
