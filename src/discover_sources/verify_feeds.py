"""Report which seed homepages advertise an RSS or Atom feed."""

import logging
import re
from dataclasses import dataclass
from typing import Any, Optional, Sequence

import requests

from common.config import FetchConfig
from common.http import fetch_with_retry
from discover_sources.discover_sources import extract_open_graph

logger = logging.getLogger(__name__)

FEED_LINK_RE = re.compile(r'<link[^>]+type="application/(?:rss|atom)\+xml"[^>]+href="([^"]+)"', re.IGNORECASE)

STATUS_OK = "OK (discovered)"
STATUS_NO_RSS = "NO RSS"


@dataclass
class SeedReport:
    name: str
    status: str
    og_image: Optional[str] = None


def verify_seed(seed: dict[str, Any], config: FetchConfig) -> SeedReport:
    """Fetch one seed homepage and report whether it links a feed."""
    name = seed.get("name") or seed.get("homepage") or "?"
    homepage = seed.get("homepage")
    if not homepage:
        return SeedReport(name=name, status="ERR missing homepage")
    try:
        response = fetch_with_retry(
            homepage,
            headers=config.request_headers(),
            retries=1,
            timeout=config.verify_timeout,
            backoff=config.backoff_seconds,
        )
    except requests.RequestException as e:
        return SeedReport(name=name, status=f"ERR {e}")

    html = response.text
    status = STATUS_OK if FEED_LINK_RE.search(html) else STATUS_NO_RSS
    return SeedReport(name=name, status=status, og_image=extract_open_graph(response.content)["og_image"])


def verify_feeds(seeds: Sequence[dict[str, Any]], config: FetchConfig) -> list[SeedReport]:
    """Check every seed homepage, in order."""
    report = []
    for seed in seeds:
        result = verify_seed(seed, config)
        logger.info("%s %s", result.name, result.status)
        report.append(result)
    return report
