"""Snapshot assembly and publication."""

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional, Protocol, Sequence

from common.context import RunContext
from ingest_articles.models import Article, RunResult
from build_snapshot.models import Snapshot, SnapshotMeta, SourceOutcome

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class SnapshotStore(Protocol):
    def put(self, key: str, value) -> None: ...


def _pub_datetime(article: Article) -> datetime:
    """Publish date for sorting; missing or invalid dates sort as the epoch."""
    if not article.pub_date:
        return EPOCH
    try:
        dt = datetime.fromisoformat(article.pub_date.replace("Z", "+00:00"))
    except ValueError:
        return EPOCH
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def sort_and_cap(items: Iterable[Article], max_items: int) -> list[Article]:
    """Newest first, truncated to `max_items`."""
    return sorted(items, key=_pub_datetime, reverse=True)[:max_items]


def partition(items: Sequence[Article], key: Callable[[Article], str]) -> dict[str, list[Article]]:
    """Group articles by `key`, preserving their order within each group."""
    groups: dict[str, list[Article]] = {}
    for item in items:
        groups.setdefault(key(item), []).append(item)
    return groups


def summarize_result(result: RunResult) -> SourceOutcome:
    src = result.src
    return SourceOutcome(
        name=src.name,
        url=src.feed_url,
        homepage=src.homepage,
        lang=src.lang,
        region=src.region,
        cats=list(src.categories),
        taken=result.taken,
        error=result.error,
        not_modified=result.not_modified,
    )


def assemble_snapshot(
    results: Sequence[RunResult],
    ctx: RunContext,
    discovered_feeds: int,
    shard_index: int,
    generated_at: Optional[datetime] = None,
) -> Snapshot:
    """Merge per-source results into a capped, sorted, partitioned snapshot."""
    collected = [item for result in results for item in result.items]
    items = sort_and_cap(collected, ctx.config.snapshot.max_items)
    if len(collected) > len(items):
        logger.info("Capped %d articles to %d", len(collected), len(items))

    meta = SnapshotMeta(
        generated_at=(generated_at or datetime.now(timezone.utc)).isoformat(),
        total=len(items),
        processed_feeds=len(results),
        discovered_feeds=discovered_feeds,
        shard_of=ctx.config.schedule.shards,
        shard_index=shard_index,
        results=[summarize_result(r) for r in results],
    )
    return Snapshot(
        meta=meta,
        items=items,
        by_category=partition(items, lambda a: a.category),
        by_lang=partition(items, lambda a: a.lang),
        by_region=partition(items, lambda a: a.region),
    )


def is_safe_partition_key(key: str) -> bool:
    """Partition keys become file names; reject empty, dotted or nested ones."""
    return bool(key) and key not in (".", "..") and "/" not in key and "\\" not in key


def publish_snapshot(snapshot: Snapshot, store: SnapshotStore, day_key: str, api_prefix: str = "/api") -> dict:
    """Write every snapshot resource to `store` and return the index manifest."""

    def path(key: str) -> str:
        return f"{api_prefix.rstrip('/')}/{key}.json"

    store.put("latest", {"meta": snapshot.meta, "items": snapshot.items})

    dimensions = {
        "categories": dict(snapshot.by_category),
        "lang": dict(snapshot.by_lang),
        "regions": dict(snapshot.by_region),
    }
    for prefix, groups in dimensions.items():
        for key in [k for k in groups if not is_safe_partition_key(k)]:
            logger.warning("Skipping %s partition with unsafe key %r", prefix, key)
            del groups[key]
        for key, items in groups.items():
            store.put(f"{prefix}/{key}", items)

    store.put(f"days/{day_key}", snapshot.items)

    manifest = {
        "latest": path("latest"),
        **{prefix: [path(f"{prefix}/{key}") for key in groups] for prefix, groups in dimensions.items()},
        "days": [path(f"days/{day_key}")],
    }
    store.put("index", manifest)
    logger.info("Published snapshot with %d articles", snapshot.meta.total)
    return manifest
