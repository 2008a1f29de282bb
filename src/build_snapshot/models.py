"""Data models for build_snapshot pipeline stage."""

from dataclasses import dataclass, field
from typing import Optional

from ingest_articles.models import Article


@dataclass
class SourceOutcome:
    """Per-source line of the run metadata."""
    name: str
    url: Optional[str]
    homepage: Optional[str]
    lang: Optional[str]
    region: str
    cats: list[str]
    taken: int
    error: Optional[str]
    not_modified: bool


@dataclass
class SnapshotMeta:
    generated_at: str
    total: int
    processed_feeds: int
    discovered_feeds: int
    shard_of: int
    shard_index: int
    sports_processed_every_run: bool = True
    results: list[SourceOutcome] = field(default_factory=list)


@dataclass
class Snapshot:
    """All accepted articles of a run plus their partition views."""
    meta: SnapshotMeta
    items: list[Article]
    by_category: dict[str, list[Article]]
    by_lang: dict[str, list[Article]]
    by_region: dict[str, list[Article]]
