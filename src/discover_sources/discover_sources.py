"""Build the run's feed source set from seed homepages, OPML and overrides."""

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import replace
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional
from urllib.parse import urljoin

import requests
from lxml import etree
from lxml import html as lxml_html

from common.config import load_json
from common.context import RunContext
from common.http import fetch_with_retry
from common.text import detect_language, normalize_url
from discover_sources.models import Source
from schedule_sources.schedule import run_workers

logger = logging.getLogger(__name__)

FEED_URL_RE = re.compile(r"xml|rss|feed", re.IGNORECASE)

# Document order is preserved by a single union expression.
FEED_CANDIDATES_XPATH = (
    "//link[contains(concat(' ', normalize-space(@rel), ' '), ' alternate ')"
    " and (contains(@type, 'rss') or contains(@type, 'atom'))]"
    " | //a[contains(@href, 'rss') or contains(@href, 'feed')"
    " or substring(@href, string-length(@href) - 3) = '.xml']"
)

OPML_SUFFIXES = (".opml", ".xml")

# lxml rejects decoded text that still carries an encoding declaration.
_XML_DECL_RE = re.compile(r"^\s*<\?xml[^>]*\?>")


def _parse_html(html: str | bytes):
    if not html or not html.strip():
        return None
    if isinstance(html, str):
        html = _XML_DECL_RE.sub("", html, count=1)
    try:
        return lxml_html.fromstring(html)
    except (etree.ParserError, ValueError) as e:
        logger.debug("Could not parse HTML: %s", e)
        return None


def discover_feed_urls(html: str | bytes, base_url: str) -> list[str]:
    """Return feed-looking URLs advertised by an HTML page, in page order."""
    doc = _parse_html(html)
    if doc is None:
        return []

    urls: list[str] = []
    for el in doc.xpath(FEED_CANDIDATES_XPATH):
        href = (el.get("href") or "").strip()
        if not href:
            continue
        try:
            url = urljoin(base_url, href)
        except ValueError:
            continue
        if FEED_URL_RE.search(url) and url not in urls:
            urls.append(url)
    return urls


def extract_open_graph(html: str | bytes) -> dict[str, Optional[str]]:
    """Return the page's OpenGraph image and description."""
    doc = _parse_html(html)
    if doc is None:
        return {"og_image": None, "og_desc": ""}

    def first_content(xpath: str) -> Optional[str]:
        values = [v.strip() for v in doc.xpath(xpath) if v and v.strip()]
        return values[0] if values else None

    og_image = first_content("//meta[@property='og:image' or @name='og:image']/@content")
    og_desc = first_content("//meta[@property='og:description' or @name='description']/@content")
    return {"og_image": og_image, "og_desc": og_desc or ""}


def discover_from_homepage(seed: dict[str, Any], ctx: RunContext) -> Optional[Source]:
    """Resolve a seed's feed URL by scanning its homepage.

    Returns None when the homepage cannot be fetched or advertises no
    usable feed; that seed simply contributes nothing this run.
    """
    if not isinstance(seed, Mapping):
        logger.warning("Skipping malformed seed record: %r", seed)
        return None
    homepage = seed.get("homepage")
    if not homepage:
        return None

    fetch = ctx.config.fetch
    try:
        response = fetch_with_retry(
            homepage,
            headers=fetch.request_headers(),
            retries=fetch.discovery_retries,
            timeout=fetch.discovery_timeout,
            backoff=fetch.backoff_seconds,
        )
    except requests.RequestException as e:
        logger.debug("Discovery failed for %s: %s", homepage, e)
        return None

    for url in discover_feed_urls(response.content, response.url or homepage):
        feed_url = normalize_url(url)
        if ctx.is_excluded(feed_url):
            logger.debug("Excluded discovered feed %s", feed_url)
            continue
        return replace(Source.from_dict(seed), feed_url=feed_url)

    logger.debug("No feed advertised on %s", homepage)
    return None


def load_opml_sources(opml_dir: Path, ctx: RunContext) -> list[Source]:
    """Read every `outline[type="rss"]` from OPML documents in `opml_dir`."""
    if not opml_dir.is_dir():
        logger.warning("OPML directory not found, skipping: %s", opml_dir)
        return []

    sources = []
    for path in sorted(opml_dir.iterdir()):
        if path.suffix.lower() not in OPML_SUFFIXES:
            continue
        try:
            root = ET.parse(path).getroot()
        except ET.ParseError as e:
            logger.warning("Skipping unreadable OPML file %s: %s", path, e)
            continue

        for outline in root.iter("outline"):
            if outline.get("type") != "rss":
                continue
            url = outline.get("xmlUrl") or outline.get("url")
            if not url:
                continue
            feed_url = normalize_url(url.strip())
            if ctx.is_excluded(feed_url):
                continue
            title = (outline.get("title") or outline.get("text") or feed_url).strip()
            sources.append(
                Source(
                    name=title,
                    homepage=outline.get("htmlUrl"),
                    feed_url=feed_url,
                    lang=detect_language(title),
                    region="global",
                    categories=("general",),
                )
            )
        logger.info("Read OPML file %s", path.name)
    return sources


def merge_sources(*groups: Iterable[Source]) -> list[Source]:
    """Concatenate source lists, keeping the first source per feed URL.

    Sources without a feed URL are kept as-is; ingestion skips them.
    """
    seen: set[str] = set()
    merged = []
    for group in groups:
        for source in group:
            key = normalize_url(source.feed_url) if source.feed_url else None
            if key is not None:
                if key in seen:
                    continue
                seen.add(key)
            merged.append(source)
    return merged


def discover_feeds(ctx: RunContext) -> list[Source]:
    """Discover feeds from seed homepages and OPML files, deduplicated by feed URL."""
    paths = ctx.config.paths
    seeds = load_json(paths.resolve("seeds_file"), [])

    from_homepages = run_workers(
        list(enumerate(seeds)),
        lambda item: (item[0], discover_from_homepage(item[1], ctx)),
        concurrency=ctx.config.schedule.concurrency,
    )
    # Workers finish in any order; restore seed order before deduplicating.
    homepage_sources = [src for _, src in sorted(from_homepages, key=lambda r: r[0]) if src is not None]
    logger.info("Discovered feeds for %d of %d seed homepages", len(homepage_sources), len(seeds))

    opml_sources = load_opml_sources(paths.resolve("opml_dir"), ctx)
    logger.info("Read %d feeds from OPML", len(opml_sources))

    return merge_sources(homepage_sources, opml_sources)


def load_explicit_sources(ctx: RunContext) -> list[Source]:
    """Read the explicitly declared source list."""
    records = load_json(ctx.config.paths.resolve("sources_file"), [])
    return [Source.from_dict(record) for record in records]
