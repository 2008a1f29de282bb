"""End-to-end run: discover, schedule, ingest, assemble, persist."""

import logging
from typing import Optional, Sequence

from build_snapshot.build_snapshot import SnapshotStore, assemble_snapshot, publish_snapshot
from build_snapshot.models import Snapshot
from common.context import RunContext
from common.local_io import save_fetch_state
from discover_sources.discover_sources import discover_feeds, load_explicit_sources, merge_sources
from schedule_sources.schedule import active_shard, fetch_sources, plan_work

logger = logging.getLogger(__name__)


def build_db(
    ctx: RunContext,
    stores: Sequence[SnapshotStore],
    shard: Optional[int] = None,
) -> Snapshot:
    """Run one ingestion cycle and publish its snapshot.

    Nothing is written until every fetch has finished, so a failure
    during discovery or fetching leaves the previous snapshot in place.
    """
    schedule = ctx.config.schedule

    discovered = discover_feeds(ctx)
    sources = merge_sources(discovered, load_explicit_sources(ctx))

    shard_index = active_shard(ctx.started_at, schedule.shards) if shard is None else shard % schedule.shards
    plan = plan_work(sources, shard_index, schedule.shards, schedule.priority_category)

    results = fetch_sources(plan, ctx)
    errors = sum(1 for r in results if r.error and not r.skipped)
    not_modified = sum(1 for r in results if r.not_modified)
    logger.info("Fetched %d sources: %d errors, %d not modified", len(results), errors, not_modified)

    snapshot = assemble_snapshot(results, ctx, discovered_feeds=len(discovered), shard_index=shard_index)
    for store in stores:
        publish_snapshot(snapshot, store, ctx.day_key, ctx.config.snapshot.api_prefix)

    save_fetch_state(ctx.config.paths.resolve("state_file"), ctx.fetch_state)

    logger.info(
        "Done. Items: %d; Feeds processed: %d/%d (%s + shard %d/%d).",
        snapshot.meta.total, len(plan.sources), len(sources),
        schedule.priority_category, shard_index, schedule.shards,
    )
    return snapshot
