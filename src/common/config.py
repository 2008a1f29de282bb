"""Pipeline configuration loading."""

import json
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from common.http import ACCEPT, USER_AGENT

logger = logging.getLogger(__name__)

ROOT = Path(__file__).resolve().parents[2]
CONFIG_DIR = ROOT / "configs"


@dataclass
class FetchConfig:
    feed_timeout: float = 15.0
    feed_retries: int = 1
    discovery_timeout: float = 12.0
    discovery_retries: int = 1
    verify_timeout: float = 10.0
    backoff_seconds: float = 0.4
    user_agent: str = USER_AGENT
    accept: str = ACCEPT

    def request_headers(self) -> dict[str, str]:
        return {"User-Agent": self.user_agent, "Accept": self.accept}


@dataclass
class ScheduleConfig:
    shards: int = 5
    concurrency: int = 20
    priority_category: str = "sports"


@dataclass
class SnapshotConfig:
    max_items: int = 4000
    summary_length: int = 220
    title_length: int = 300
    body_length: int = 1200
    api_prefix: str = "/api"


@dataclass
class PathsConfig:
    output_dir: str = "public/api"
    state_file: str = "data/state/feed_state.json"
    seeds_file: str = "data/seeds/homepages.json"
    opml_dir: str = "data/opml"
    sources_file: str = "data/sources.json"
    blacklist_file: str = "data/blacklist.json"
    allowlist_file: str = "data/allowed_categories.json"
    excluded_paths_file: str = "data/excluded_paths.json"
    rules_file: str = "configs/classifier_rules.yaml"

    def resolve(self, name: str) -> Path:
        """Return the named path, anchored at the repository root if relative."""
        path = Path(getattr(self, name))
        return path if path.is_absolute() else ROOT / path


@dataclass
class PipelineConfig:
    fetch: FetchConfig = field(default_factory=FetchConfig)
    schedule: ScheduleConfig = field(default_factory=ScheduleConfig)
    snapshot: SnapshotConfig = field(default_factory=SnapshotConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)


def find_config_path(
    config_name: str | None,
    config_dir: Path = CONFIG_DIR,
    default_name: str = "prod",
    env_var: str | None = "CONFIG_ENV",
) -> Path:
    """Find config file path, checking env var and defaults.

    Args:
        config_name: Name of config (without .yaml) or None for default
        config_dir: Directory containing config files
        default_name: Default config name if config_name is None
        env_var: Environment variable to check for config name

    Returns:
        Path to the config file

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    if config_name is None:
        config_name = os.environ.get(env_var, default_name) if env_var else default_name

    config_path = config_dir / f"{config_name}.yaml"
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    return config_path


def load_yaml(path: Path) -> dict:
    """Load YAML file and return dict."""
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_json(path: Path, default: Any) -> Any:
    """Load a JSON input file, returning `default` when it does not exist."""
    if not path.exists():
        logger.warning("Input file not found, treating as empty: %s", path)
        return default
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def _build(cls, data: dict | None):
    known = {f.name for f in fields(cls)}
    data = data or {}
    for key in data:
        if key not in known:
            logger.warning("Ignoring unknown %s key: %s", cls.__name__, key)
    return cls(**{k: v for k, v in data.items() if k in known})


def parse_config(data: dict) -> PipelineConfig:
    """Parse config dictionary into PipelineConfig object."""
    return PipelineConfig(
        fetch=_build(FetchConfig, data.get("fetch")),
        schedule=_build(ScheduleConfig, data.get("schedule")),
        snapshot=_build(SnapshotConfig, data.get("snapshot")),
        paths=_build(PathsConfig, data.get("paths")),
    )


def load_config(config_name: str | None = None) -> PipelineConfig:
    """Load the named pipeline config from the configs directory."""
    path = find_config_path(config_name)
    logger.info("Loading config from %s", path)
    return parse_config(load_yaml(path))
