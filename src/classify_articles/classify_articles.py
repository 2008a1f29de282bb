"""Rule-based article category classification."""

import logging
import re
from pathlib import Path
from typing import Any, Iterable, Sequence

from classify_articles.models import ClassificationRule
from common.config import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "general"


def compile_rules(entries: Iterable[dict[str, Any]]) -> list[ClassificationRule]:
    """Compile `{category, patterns}` records into ordered rules.

    Order is preserved exactly as given; each rule's patterns are joined
    into a single case-insensitive alternation.
    """
    rules = []
    for entry in entries:
        category = entry.get("category")
        patterns = [p for p in entry.get("patterns") or [] if p]
        if not category or not patterns:
            logger.warning("Skipping incomplete classifier rule: %s", entry)
            continue
        pattern = re.compile("|".join(f"(?:{p})" for p in patterns), re.IGNORECASE)
        rules.append(ClassificationRule(category=category, pattern=pattern))
    return rules


def load_rules(path: Path) -> list[ClassificationRule]:
    """Load classifier rules from a YAML file with a top-level `rules` list."""
    data = load_yaml(path)
    rules = compile_rules(data.get("rules") or [])
    logger.info("Loaded %d classifier rules from %s", len(rules), path)
    return rules


def classify_category(
    text: str,
    rules: Sequence[ClassificationRule],
    fallback: Sequence[str] = (),
) -> str:
    """Return the category of the first rule matching `text`.

    Falls back to the first of `fallback`, then to "general".
    """
    lowered = (text or "").lower()
    for rule in rules:
        if rule.matches(lowered):
            return rule.category
    if fallback:
        return fallback[0]
    return DEFAULT_CATEGORY
