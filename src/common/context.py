"""Run-wide context shared by discovery, ingestion and assembly."""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional

from classify_articles.classify_articles import load_rules
from classify_articles.models import ClassificationRule
from common.config import PipelineConfig, load_json
from common.local_io import load_fetch_state
from filter_articles.blacklist import compile_blacklist
from ingest_articles.models import FetchState

logger = logging.getLogger(__name__)


@dataclass
class RunContext:
    """Configuration and state for one pipeline run.

    Built once at process start and passed explicitly to each stage.
    """
    config: PipelineConfig
    started_at: datetime
    is_blocked: Callable[[str], bool] = lambda text: False
    allowed_categories: frozenset[str] = frozenset()
    excluded_paths: tuple[str, ...] = ()
    rules: list[ClassificationRule] = field(default_factory=list)
    fetch_state: dict[str, FetchState] = field(default_factory=dict)
    _state_lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def is_excluded(self, url: Optional[str]) -> bool:
        """Return True if `url` contains any excluded path substring."""
        return bool(url) and any(part in url for part in self.excluded_paths)

    def is_allowed(self, category: str) -> bool:
        """An empty allow-list admits every category."""
        return not self.allowed_categories or category in self.allowed_categories

    def get_fetch_state(self, feed_url: str) -> Optional[FetchState]:
        with self._state_lock:
            return self.fetch_state.get(feed_url)

    def update_fetch_state(self, feed_url: str, state: FetchState) -> None:
        with self._state_lock:
            self.fetch_state[feed_url] = state

    @property
    def day_key(self) -> str:
        return self.started_at.strftime("%Y-%m-%d")


def build_context(config: PipelineConfig, started_at: Optional[datetime] = None) -> RunContext:
    """Load filter lists, classifier rules and fetch state for a run."""
    paths = config.paths
    blacklist = load_json(paths.resolve("blacklist_file"), {})
    allowlist = load_json(paths.resolve("allowlist_file"), [])
    excluded = load_json(paths.resolve("excluded_paths_file"), [])
    rules_path = paths.resolve("rules_file")
    rules = load_rules(rules_path) if rules_path.exists() else []
    if not rules:
        logger.warning("No classifier rules loaded; every article falls back to source categories")

    return RunContext(
        config=config,
        started_at=started_at or datetime.now().astimezone(),
        is_blocked=compile_blacklist(blacklist),
        allowed_categories=frozenset(allowlist),
        excluded_paths=tuple(p for p in excluded if p),
        rules=rules,
        fetch_state=load_fetch_state(paths.resolve("state_file")),
    )
