"""Per-source feed ingestion."""

import logging

from common.context import RunContext
from discover_sources.models import Source
from ingest_articles.fetch_articles.fetch_feed import fetch_feed, is_not_modified, next_fetch_state
from ingest_articles.fetch_articles.parse_entries import parse_entry, parse_feed
from ingest_articles.models import RunResult

logger = logging.getLogger(__name__)


def ingest_source(source: Source, ctx: RunContext) -> RunResult:
    """Fetch one source's feed and convert its entries to articles.

    Never raises: a failure anywhere after the URL check is recorded on
    the result and leaves the source's fetch state untouched, so the next
    run retries with the same validators.
    """
    feed_url = source.feed_url
    if not feed_url:
        logger.debug("Skipping %s: no feed URL", source.name)
        return RunResult(src=source, skipped=True, error="no_feed_url")

    try:
        response = fetch_feed(feed_url, ctx.get_fetch_state(feed_url), ctx.config.fetch)
        if is_not_modified(response):
            logger.debug("Not modified: %s", feed_url)
            return RunResult(src=source, not_modified=True)

        feed = parse_feed(response.content)
        feed_title = (feed.get("feed") or {}).get("title") or ""

        items = []
        for entry in feed.get("entries") or []:
            article = parse_entry(entry, source, feed_title, ctx)
            if article is not None:
                items.append(article)
    except Exception as e:
        logger.warning("Failed to ingest %s (%s): %s", source.name, feed_url, e)
        return RunResult(src=source, error=str(e) or e.__class__.__name__)

    ctx.update_fetch_state(feed_url, next_fetch_state(response, ctx.started_at.isoformat()))
    logger.info("Took %d articles from %s", len(items), source.name)
    return RunResult(src=source, taken=len(items), items=items)
