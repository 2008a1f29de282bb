"""HTTP fetching with timeout and retry."""

import logging
import time
from typing import Iterable, Mapping, Optional

import requests

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (LightNewsDB/2.0; RSS reader)"
ACCEPT = "application/rss+xml, application/xml;q=0.9, text/xml;q=0.8, */*;q=0.7"

COMMON_HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": ACCEPT,
}

HTTP_NOT_MODIFIED = 304

BODY_CHUNK_SIZE = 1024


class FetchError(requests.RequestException):
    """Raised when a request finishes with a status the caller did not accept."""

    def __init__(self, url: str, status_code: int):
        super().__init__(f"HTTP {status_code} for {url}")
        self.url = url
        self.status_code = status_code


def _read_body(response: requests.Response, url: str, deadline: float) -> None:
    """Load the streamed body into `response`, aborting at `deadline`."""
    chunks = []
    for chunk in response.iter_content(chunk_size=BODY_CHUNK_SIZE):
        if time.monotonic() > deadline:
            response.close()
            raise requests.Timeout(f"Read deadline exceeded for {url}")
        chunks.append(chunk)
    response._content = b"".join(chunks)


def fetch_with_retry(
    url: str,
    headers: Optional[Mapping[str, str]] = None,
    retries: int = 2,
    timeout: float = 15.0,
    backoff: float = 0.4,
    accept_status: Iterable[int] = (),
) -> requests.Response:
    """GET `url`, retrying failures with linear backoff.

    A response is returned when its status is 2xx or listed in
    `accept_status` (e.g. 304 for conditional requests). Anything else,
    and any exception raised by requests, is retried up to `retries`
    more times, sleeping `backoff * attempt` seconds between attempts.
    The last error is raised once attempts run out.

    `timeout` bounds each whole attempt, body included: a server that
    keeps trickling bytes past it gets `requests.Timeout`.
    """
    accepted = set(accept_status)
    request_headers = dict(COMMON_HEADERS)
    if headers:
        request_headers.update(headers)

    last_error: Optional[requests.RequestException] = None
    for attempt in range(retries + 1):
        if attempt:
            time.sleep(backoff * attempt)
        deadline = time.monotonic() + timeout
        try:
            response = requests.get(url, headers=request_headers, timeout=timeout, stream=True)
            if response.status_code not in accepted and not 200 <= response.status_code < 300:
                response.close()
                raise FetchError(url, response.status_code)
            _read_body(response, url, deadline)
            return response
        except requests.RequestException as e:
            last_error = e
            logger.debug("Attempt %d for %s failed: %s", attempt + 1, url, e)

    raise last_error
