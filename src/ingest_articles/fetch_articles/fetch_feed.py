"""Conditional feed download."""

import logging
from typing import Optional

import requests

from common.config import FetchConfig
from common.http import HTTP_NOT_MODIFIED, fetch_with_retry
from ingest_articles.models import FetchState

logger = logging.getLogger(__name__)


def build_conditional_headers(state: Optional[FetchState]) -> dict[str, str]:
    """Request headers that let the server answer 304 for an unchanged feed."""
    headers = {}
    if state is None:
        return headers
    if state.etag:
        headers["If-None-Match"] = state.etag
    if state.last_modified:
        headers["If-Modified-Since"] = state.last_modified
    return headers


def fetch_feed(feed_url: str, state: Optional[FetchState], config: FetchConfig) -> requests.Response:
    """Download a feed, passing cached validators from the previous run.

    A 304 response is returned rather than raised; callers check
    `response.status_code`.
    """
    conditional = build_conditional_headers(state)
    if conditional:
        logger.debug("Conditional request for %s: %s", feed_url, conditional)
    return fetch_with_retry(
        feed_url,
        headers={**config.request_headers(), **conditional},
        retries=config.feed_retries,
        timeout=config.feed_timeout,
        backoff=config.backoff_seconds,
        accept_status=(HTTP_NOT_MODIFIED,),
    )


def is_not_modified(response: requests.Response) -> bool:
    return response.status_code == HTTP_NOT_MODIFIED


def next_fetch_state(response: requests.Response, run_at: str) -> FetchState:
    """Validators to send on the next request for this feed."""
    return FetchState(
        etag=response.headers.get("ETag"),
        last_modified=response.headers.get("Last-Modified"),
        last_run=run_at,
    )
