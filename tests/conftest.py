"""Shared fixtures."""

from datetime import datetime, timezone

import pytest

from classify_articles.classify_articles import load_rules
from common.config import CONFIG_DIR, PipelineConfig
from common.context import RunContext


@pytest.fixture
def rules():
    return load_rules(CONFIG_DIR / "classifier_rules.yaml")


@pytest.fixture
def make_ctx(rules, tmp_path):
    """Build a RunContext whose paths all point into tmp_path."""

    def _make(**overrides) -> RunContext:
        config = overrides.pop("config", None) or PipelineConfig()
        for name in (
            "output_dir", "state_file", "seeds_file", "opml_dir", "sources_file",
            "blacklist_file", "allowlist_file", "excluded_paths_file",
        ):
            setattr(config.paths, name, str(tmp_path / name))
        config.fetch.backoff_seconds = 0
        params = {
            "config": config,
            "started_at": datetime(2024, 1, 1, 12, 7, tzinfo=timezone.utc),
            "rules": rules,
        }
        params.update(overrides)
        return RunContext(**params)

    return _make
