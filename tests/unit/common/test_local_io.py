"""Tests for common.local_io module."""

import json
from pathlib import Path

import pytest

from common.local_io import LocalSnapshotStore, load_fetch_state, save_fetch_state, write_json_atomic
from ingest_articles.models import FetchState


class TestWriteJsonAtomic:
    def test_writes_utf8_json(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "out.json"
        write_json_atomic(path, {"title": "خبر", "tags": ("a", "b")})

        text = path.read_text(encoding="utf-8")
        assert "خبر" in text
        assert json.loads(text) == {"title": "خبر", "tags": ["a", "b"]}

    def test_leaves_no_temp_files(self, tmp_path: Path) -> None:
        write_json_atomic(tmp_path / "out.json", [1])
        write_json_atomic(tmp_path / "out.json", [2])

        assert [p.name for p in tmp_path.iterdir()] == ["out.json"]
        assert json.loads((tmp_path / "out.json").read_text()) == [2]


class TestLocalSnapshotStore:
    def test_put_writes_key_path(self, tmp_path: Path) -> None:
        store = LocalSnapshotStore(tmp_path)
        store.put("categories/sports", [{"id": "1"}])

        assert json.loads((tmp_path / "categories" / "sports.json").read_text()) == [{"id": "1"}]

    def test_rejects_keys_outside_root(self, tmp_path: Path) -> None:
        store = LocalSnapshotStore(tmp_path / "api")

        for key in ("../x", "categories/../../x", "/etc/x"):
            with pytest.raises(ValueError):
                store.put(key, [])

        assert not (tmp_path / "x.json").exists()


class TestFetchState:
    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        assert load_fetch_state(tmp_path / "state.json") == {}

    def test_round_trip(self, tmp_path: Path) -> None:
        path = tmp_path / "state.json"
        state = {
            "https://b.com/rss": FetchState(etag='"xyz"', last_modified=None, last_run="2024-01-01T00:00:00+00:00"),
            "https://a.com/rss": FetchState(etag=None, last_modified="Mon, 01 Jan 2024 00:00:00 GMT"),
        }

        save_fetch_state(path, state)

        assert load_fetch_state(path) == state
        raw = json.loads(path.read_text())
        assert list(raw) == ["https://a.com/rss", "https://b.com/rss"]
        assert raw["https://b.com/rss"] == {"etag": '"xyz"', "last_modified": None, "last_run": "2024-01-01T00:00:00+00:00"}

    def test_reads_camel_case_keys(self, tmp_path: Path) -> None:
        path = tmp_path / "state.json"
        path.write_text(json.dumps({
            "https://a.com/rss": {
                "etag": "abc",
                "lastModified": "Tue, 02 Jan 2024 00:00:00 GMT",
                "lastRunTimestamp": "2024-01-02T00:00:00+00:00",
            },
        }), encoding="utf-8")

        state = load_fetch_state(path)

        assert state["https://a.com/rss"] == FetchState(
            etag="abc",
            last_modified="Tue, 02 Jan 2024 00:00:00 GMT",
            last_run="2024-01-02T00:00:00+00:00",
        )
