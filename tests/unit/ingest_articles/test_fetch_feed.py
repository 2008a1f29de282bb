"""Tests for ingest_articles.fetch_articles.fetch_feed module."""

from unittest.mock import Mock

from ingest_articles.fetch_articles.fetch_feed import build_conditional_headers, is_not_modified, next_fetch_state
from ingest_articles.models import FetchState


class TestBuildConditionalHeaders:
    def test_no_state(self) -> None:
        assert build_conditional_headers(None) == {}

    def test_both_validators(self) -> None:
        state = FetchState(etag='W/"1"', last_modified="Mon, 01 Jan 2024 00:00:00 GMT")
        assert build_conditional_headers(state) == {
            "If-None-Match": 'W/"1"',
            "If-Modified-Since": "Mon, 01 Jan 2024 00:00:00 GMT",
        }

    def test_state_without_validators(self) -> None:
        assert build_conditional_headers(FetchState(last_run="2024-01-01")) == {}


class TestNextFetchState:
    def test_reads_response_headers(self) -> None:
        response = Mock(status_code=200, headers={"ETag": "e1"})

        state = next_fetch_state(response, "2024-01-01T00:00:00+00:00")

        assert state == FetchState(etag="e1", last_modified=None, last_run="2024-01-01T00:00:00+00:00")
        assert not is_not_modified(response)

    def test_not_modified(self) -> None:
        assert is_not_modified(Mock(status_code=304))
