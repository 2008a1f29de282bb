"""Feed entry to Article conversion."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import feedparser
from dateutil.parser import parse as parse_date

from classify_articles.classify_articles import classify_category
from common.context import RunContext
from common.hashing import generate_article_id
from common.text import collapse_whitespace, detect_language, normalize_text, normalize_url, strip_html
from discover_sources.models import Source
from ingest_articles.models import Article, ArticleSource

logger = logging.getLogger(__name__)

# Timezone abbreviations for date parsing
TZINFOS = {
    "EST": timezone(timedelta(hours=-5)),
    "EDT": timezone(timedelta(hours=-4)),
    "CST": timezone(timedelta(hours=-6)),
    "CDT": timezone(timedelta(hours=-5)),
    "MST": timezone(timedelta(hours=-7)),
    "MDT": timezone(timedelta(hours=-6)),
    "PST": timezone(timedelta(hours=-8)),
    "PDT": timezone(timedelta(hours=-7)),
    "GMT": timezone.utc,
    "UTC": timezone.utc,
    "BST": timezone(timedelta(hours=1)),
}


class FeedParseError(ValueError):
    """Raised when a response body is not a recognizable feed."""


def parse_feed(content: bytes):
    """Parse a feed document, rejecting bodies feedparser cannot make sense of."""
    feed = feedparser.parse(content)
    if feed.get("bozo") and not feed.get("entries") and not feed.get("version"):
        raise FeedParseError(f"Unparseable feed: {feed.get('bozo_exception')}")
    return feed


def parse_entry(entry: Any, source: Source, feed_title: str, ctx: RunContext) -> Optional[Article]:
    """Convert a feed entry into an Article, or None if it is filtered out."""
    snapshot = ctx.config.snapshot

    title = normalize_text(strip_html(entry.get("title")), snapshot.title_length)
    link = normalize_url((entry.get("link") or "").strip())
    if not title or not link:
        return None

    if ctx.is_excluded(link):
        logger.debug("Excluded path: %s", link)
        return None

    summary = normalize_text(strip_html(entry.get("summary") or entry.get("description")), snapshot.summary_length)

    if ctx.is_blocked(f"{source.name} {title} {summary}"):
        logger.debug("Blocked by blacklist: %s", link)
        return None

    lang = source.lang or detect_language(f"{title} {summary}")

    tags = " ".join(t.get("term") or "" for t in entry.get("tags") or [])
    category = classify_category(
        f"{title} {summary} {feed_title} {tags}",
        ctx.rules,
        fallback=source.categories,
    )
    if not ctx.is_allowed(category):
        logger.debug("Category %s not allowed: %s", category, link)
        return None

    return Article(
        id=generate_article_id(link, title),
        title=title,
        link=link,
        summary=summary,
        body=_extract_body(entry, snapshot.body_length),
        image=_extract_image(entry),
        pub_date=_parse_published_date(entry),
        source=ArticleSource(name=source.name, homepage=source.homepage),
        lang=lang,
        category=category,
        region=source.region,
    )


def _extract_image(entry: Any) -> Optional[str]:
    """Pick an image enclosure, else the first media:content URL."""
    for enclosure in entry.get("enclosures") or []:
        mime = (enclosure.get("type") or "").lower()
        href = enclosure.get("href") or enclosure.get("url")
        if href and mime.startswith("image/"):
            return href
    for media in entry.get("media_content") or []:
        if media.get("url"):
            return media["url"]
    return None


def _extract_body(entry: Any, max_len: int) -> Optional[str]:
    """Longer excerpt from the entry's full content, if it carries any."""
    for content in entry.get("content") or []:
        text = normalize_text(strip_html(content.get("value")), max_len)
        if text:
            return text
    return None


def _parse_published_date(entry: Any) -> Optional[str]:
    """Return the entry's publish date as a UTC ISO-8601 string, or None."""
    published = collapse_whitespace(entry.get("published") or entry.get("updated"))
    dt = None
    if published:
        try:
            dt = parse_date(published, tzinfos=TZINFOS)
        except (ValueError, OverflowError):
            dt = None

    if dt is None:
        parsed = entry.get("published_parsed") or entry.get("updated_parsed")
        if not parsed:
            return None
        dt = datetime(*parsed[:6], tzinfo=timezone.utc)

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat()
