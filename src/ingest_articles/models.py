"""Data models for ingest_articles pipeline stage."""

from dataclasses import dataclass, field
from typing import Any, Optional

from discover_sources.models import Source


@dataclass(frozen=True)
class FetchState:
    """Cached validators for a feed's next conditional request."""
    etag: Optional[str] = None
    last_modified: Optional[str] = None
    last_run: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FetchState":
        return cls(
            etag=data.get("etag"),
            last_modified=data.get("last_modified") or data.get("lastModified"),
            last_run=data.get("last_run") or data.get("lastRunTimestamp"),
        )


@dataclass(frozen=True)
class ArticleSource:
    name: str
    homepage: Optional[str]


@dataclass(frozen=True)
class Article:
    """Normalized article built from one feed entry."""
    id: str
    title: str
    link: str
    summary: str
    body: Optional[str]
    image: Optional[str]
    pub_date: Optional[str]
    source: ArticleSource
    lang: str
    category: str
    region: str


@dataclass
class RunResult:
    """Outcome of ingesting one source."""
    src: Source
    taken: int = 0
    items: list[Article] = field(default_factory=list)
    error: Optional[str] = None
    not_modified: bool = False
    skipped: bool = False
