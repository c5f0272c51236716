"""
Validator node: wait for `genesis` and `server_<id>` in the config store, then
start one server process per shard.

    ZEFBOOT_SERVER_ID=1 zefboot-validator NUM_SHARDS
"""

from __future__ import annotations

import argparse
from typing import List, Optional

import structlog

from zefboot.bootstrap.config import load_validator_env
from zefboot.fetch.backoff import FixedBackoff
from zefboot.fetch.fetcher import PollFetcher
from zefboot.nodes.launcher import ShardLauncher
from zefboot.nodes.validator import ValidatorNode
from zefboot.store.client import StoreClient
from zefboot.utils.log import setup_logging

logger = structlog.get_logger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch validator configuration and launch shard workers.")
    parser.add_argument("shards", type=int, help="Number of shards to run")
    parser.add_argument("--server-id", type=int, default=None, help="Validator identifier (defaults to ZEFBOOT_SERVER_ID)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.debug)
    if args.shards < 1:
        logger.error("Shard count must be >= 1", shards=args.shards)
        return 2
    cfg = load_validator_env(server_id=args.server_id)

    fetcher = PollFetcher(
        StoreClient(cfg.store.endpoint, timeout_s=cfg.store.timeout_s),
        backoff=FixedBackoff(cfg.fetch.poll_interval_s),
        log_every=cfg.fetch.log_every,
    )
    node = ValidatorNode(
        cfg.server_id,
        args.shards,
        fetcher,
        launcher=ShardLauncher(cfg.server_bin),
        workdir=cfg.workdir,
    )
    node.run()
    codes = node.wait()
    return 0 if all(c == 0 for c in codes) else 1


if __name__ == "__main__":
    raise SystemExit(main())
