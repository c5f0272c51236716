"""
Client node: wait for `genesis` and `wallet` in the config store, then run the
client workload against them.

    zefboot-client
"""

from __future__ import annotations

import argparse
from typing import List, Optional

from zefboot.bootstrap.config import load_client_env
from zefboot.fetch.backoff import FixedBackoff
from zefboot.fetch.fetcher import PollFetcher
from zefboot.nodes.client import ClientNode, ClientWorkload
from zefboot.store.client import StoreClient
from zefboot.utils.log import setup_logging


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch genesis and wallet, then run the client.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.debug)
    cfg = load_client_env()

    fetcher = PollFetcher(
        StoreClient(cfg.store.endpoint, timeout_s=cfg.store.timeout_s),
        backoff=FixedBackoff(cfg.fetch.poll_interval_s),
        log_every=cfg.fetch.log_every,
    )
    node = ClientNode(fetcher, ClientWorkload(cfg.client_bin, cfg.client_args), workdir=cfg.workdir)
    code = node.run()
    return int(code or 0)


if __name__ == "__main__":
    raise SystemExit(main())
