"""CLI for checking seed homepages for feed autodiscovery."""

from __future__ import annotations

import argparse
import logging
import sys

from dotenv import load_dotenv

from common.cli_helpers import setup_logging
from common.config import load_config, load_json
from discover_sources.verify_feeds import STATUS_OK, verify_feeds

load_dotenv()

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Check seed homepages for RSS/Atom links.")
    parser.add_argument("--config", default=None)
    args = parser.parse_args(argv)
    setup_logging()

    config = load_config(args.config)
    seeds = load_json(config.paths.resolve("seeds_file"), [])
    report = verify_feeds(seeds, config.fetch)

    ok = sum(1 for r in report if r.status == STATUS_OK)
    logger.info("%d of %d homepages advertise a feed", ok, len(report))
    return 0


if __name__ == "__main__":
    sys.exit(main())
