"""Data models for classify_articles pipeline stage."""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class ClassificationRule:
    """A category paired with the compiled pattern that selects it."""
    category: str
    pattern: re.Pattern

    def matches(self, text: str) -> bool:
        return bool(self.pattern.search(text))
