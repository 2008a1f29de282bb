"""Data models for discover_sources pipeline stage."""

from dataclasses import dataclass, field
from typing import Any, Optional

from common.text import normalize_url


@dataclass(frozen=True)
class Source:
    """A feed origin, identified by its normalized feed URL."""
    name: str
    homepage: Optional[str] = None
    feed_url: Optional[str] = None
    lang: Optional[str] = None
    region: str = "global"
    categories: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Source":
        """Build a Source from a seed or explicit source record.

        Accepts both `feed_url` and `feedUrl` spellings.
        """
        categories = data.get("categories") or ()
        if isinstance(categories, str):
            categories = (categories,)
        return cls(
            name=data.get("name") or data.get("homepage") or data.get("feed_url") or data.get("feedUrl") or "",
            homepage=data.get("homepage"),
            feed_url=normalize_url(data.get("feed_url") or data.get("feedUrl")),
            lang=data.get("lang"),
            region=data.get("region") or "global",
            categories=tuple(categories),
        )
