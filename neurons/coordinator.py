"""
Coordinator node: generate the cluster configuration, publish it into the
config store it hosts, then keep serving the store until terminated.

    zefboot-coordinator NUM_VALIDATORS NUM_SHARDS
"""

from __future__ import annotations

import argparse
from typing import List, Optional

import structlog

from zefboot.bootstrap.config import load_coordinator_env
from zefboot.coordinator.coordinator import Coordinator
from zefboot.coordinator.host import StoreHost
from zefboot.core.errors import GenerationError
from zefboot.store.app import create_app
from zefboot.store.client import StoreClient
from zefboot.store.storage import InMemoryConfigStore
from zefboot.utils.log import setup_logging

logger = structlog.get_logger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate and publish cluster configuration.")
    parser.add_argument("validators", type=int, help="Number of validators")
    parser.add_argument("shards", type=int, help="Number of shards per validator")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.debug)
    cfg = load_coordinator_env()

    host = StoreHost(create_app(InMemoryConfigStore()), host=cfg.listen_host, port=cfg.listen_port)
    store = StoreClient(cfg.publish_endpoint, timeout_s=cfg.store.timeout_s)

    coordinator = Coordinator(
        store,
        host=host,
        num_chains=cfg.num_chains,
        initial_funding=cfg.initial_funding,
        project=cfg.project,
        validator_port=cfg.validator_port,
    )
    try:
        coordinator.run(args.validators, args.shards)
    except GenerationError as exc:
        logger.error("Generation failed, nothing published", error=str(exc))
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted; stopping config store")
        host.stop()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
