"""Time-sharded fetch scheduling and the bounded worker pool."""

import logging
import queue
import threading
from datetime import datetime
from typing import Callable, Iterable, Sequence, TypeVar

from common.context import RunContext
from common.hashing import stable_hash
from discover_sources.models import Source
from ingest_articles.ingest_articles import ingest_source
from ingest_articles.models import RunResult
from schedule_sources.models import WorkPlan

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


def shard_key(source: Source) -> str:
    return source.feed_url or source.homepage or ""


def shard_index(key: str, shards: int) -> int:
    """Assign `key` to one of `shards` buckets, stable across processes."""
    return stable_hash(key) % shards


def active_shard(now: datetime, shards: int) -> int:
    """The shard processed by a run started at `now`."""
    return now.minute % shards


def is_priority(source: Source, priority_category: str) -> bool:
    return priority_category in source.categories


def plan_work(
    sources: Sequence[Source],
    shard: int,
    shards: int,
    priority_category: str = "sports",
) -> WorkPlan:
    """Select every priority source plus the non-priority sources in `shard`."""
    priority = [s for s in sources if is_priority(s, priority_category)]
    sharded = [
        s for s in sources
        if not is_priority(s, priority_category) and shard_index(shard_key(s), shards) == shard
    ]
    logger.info(
        "Work list: %d %s + %d in shard %d/%d (of %d sources)",
        len(priority), priority_category, len(sharded), shard, shards, len(sources),
    )
    return WorkPlan(priority=priority, sharded=sharded, shard_index=shard, shard_count=shards)


def run_workers(
    items: Iterable[T],
    work: Callable[[T], R],
    concurrency: int = 20,
) -> list[R]:
    """Apply `work` to every item on a fixed pool of threads.

    Each worker pulls items from a shared queue until it is empty, so every
    item is processed exactly once. Results are returned in completion
    order. If any call raises, the first exception is re-raised after all
    workers have finished.
    """
    tasks: queue.Queue = queue.Queue()
    for item in items:
        tasks.put(item)
    if tasks.empty():
        return []

    results: list[R] = []
    results_lock = threading.Lock()
    errors: list[BaseException] = []

    def worker() -> None:
        while True:
            try:
                item = tasks.get_nowait()
            except queue.Empty:
                return
            try:
                result = work(item)
            except Exception as e:
                with results_lock:
                    errors.append(e)
                continue
            with results_lock:
                results.append(result)

    pool_size = max(1, min(concurrency, tasks.qsize()))
    threads = [threading.Thread(target=worker, name=f"fetch-worker-{i}", daemon=True) for i in range(pool_size)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    if errors:
        raise errors[0]
    return results



def fetch_sources(plan: WorkPlan, ctx: RunContext) -> list[RunResult]:
    """Ingest every source in the plan on the bounded worker pool."""
    return run_workers(
        plan.sources,
        lambda source: ingest_source(source, ctx),
        concurrency=ctx.config.schedule.concurrency,
    )
