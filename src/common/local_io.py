"""Local file I/O utilities."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from common.serialization import to_jsonable
from ingest_articles.models import FetchState

logger = logging.getLogger(__name__)


def write_json_atomic(path: Path, value: Any) -> None:
    """Write `value` as pretty UTF-8 JSON, replacing `path` atomically."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(to_jsonable(value), f, ensure_ascii=False, indent=2)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class LocalSnapshotStore:
    """Snapshot store writing each key to `<root>/<key>.json`."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def path_for(self, key: str) -> Path:
        if ".." in Path(key).parts or Path(key).is_absolute():
            raise ValueError(f"Snapshot key escapes store root: {key!r}")
        return self.root / f"{key}.json"

    def put(self, key: str, value: Any) -> None:
        write_json_atomic(self.path_for(key), value)
        logger.debug("Wrote %s", self.path_for(key))


def load_fetch_state(path: Path) -> dict[str, FetchState]:
    """Read the persisted fetch-state map keyed by feed URL."""
    if not path.exists():
        logger.info("No fetch state at %s; starting empty", path)
        return {}
    with open(path, encoding="utf-8") as f:
        raw = json.load(f) or {}
    state = {url: FetchState.from_dict(entry or {}) for url, entry in raw.items()}
    logger.info("Loaded fetch state for %d feeds", len(state))
    return state


def save_fetch_state(path: Path, state: dict[str, FetchState]) -> None:
    """Rewrite the full fetch-state map."""
    write_json_atomic(path, dict(sorted(state.items())))
    logger.info("Saved fetch state for %d feeds to %s", len(state), path)
