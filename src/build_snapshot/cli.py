"""CLI for building the feed snapshot."""

from __future__ import annotations

import argparse
import logging
import sys

from dotenv import load_dotenv

from build_snapshot.build_db import build_db
from common.cli_helpers import setup_logging
from common.config import load_config
from common.context import build_context
from common.local_io import LocalSnapshotStore

load_dotenv()

logger = logging.getLogger(__name__)


def parse_build_db_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for build-db."""
    parser = argparse.ArgumentParser(description="Fetch feeds and publish the snapshot.")
    parser.add_argument("--config", default=None, help="Config name under configs/ (default: $CONFIG_ENV or prod)")
    parser.add_argument("--shard", type=int, default=None, help="Override the active shard")
    parser.add_argument("--load-s3", action="store_true", help="Also upload the snapshot to S3")
    parser.add_argument("--no-local", action="store_true", help="Do not write snapshot files locally")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_build_db_args(argv)
    setup_logging(args.verbose)

    try:
        config = load_config(args.config)
        ctx = build_context(config)

        stores = []
        if not args.no_local:
            stores.append(LocalSnapshotStore(config.paths.resolve("output_dir")))
        if args.load_s3:
            from common.aws import S3SnapshotStore

            stores.append(S3SnapshotStore(prefix=config.snapshot.api_prefix))

        build_db(ctx, stores, shard=args.shard)
    except Exception:
        logger.exception("Build failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
