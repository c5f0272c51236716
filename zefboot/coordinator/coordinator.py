from __future__ import annotations

import threading
from typing import List, Optional

import structlog

from zefboot.coordinator.generate import KeypairFactory, ed25519_keypair, generate
from zefboot.coordinator.host import StoreHost
from zefboot.coordinator.publish import publish
from zefboot.core.models import CoordinatorState
from zefboot.core.naming import DEFAULT_PROJECT
from zefboot.store.storage import ConfigStore

logger = structlog.get_logger(__name__)


class Coordinator:
    """
    Generates the cluster configuration and publishes it.

    Generation and store hosting are separate: `setup` only generates and
    publishes, then sets `published`. `run` additionally keeps the hosted
    store alive until the process is terminated.
    """

    def __init__(
        self,
        store: ConfigStore,
        *,
        host: Optional[StoreHost] = None,
        num_chains: int = 1000,
        initial_funding: int = 100,
        project: str = DEFAULT_PROJECT,
        validator_port: int = 9100,
        keypair_factory: KeypairFactory = ed25519_keypair,
    ) -> None:
        self.store = store
        self.host = host
        self.num_chains = num_chains
        self.initial_funding = initial_funding
        self.project = project
        self.validator_port = validator_port
        self.keypair_factory = keypair_factory
        self.state: Optional[CoordinatorState] = None
        self.published = threading.Event()

    def _enter(self, state: CoordinatorState) -> None:
        logger.info("Coordinator state", previous=self.state.value if self.state else None, state=state.value)
        self.state = state

    def setup(self, validator_count: int, shard_count: int) -> List[str]:
        self._enter(CoordinatorState.GENERATING)
        cluster, genesis, wallet = generate(
            validator_count,
            shard_count,
            num_chains=self.num_chains,
            initial_funding=self.initial_funding,
            project=self.project,
            port=self.validator_port,
            keypair_factory=self.keypair_factory,
        )

        self._enter(CoordinatorState.PUBLISHING)
        keys = publish(self.store, cluster, genesis, wallet)
        self.published.set()
        self._enter(CoordinatorState.SERVING)
        return keys

    def run(self, validator_count: int, shard_count: int) -> List[str]:
        try:
            if self.host is not None:
                self.host.start()
                self.host.wait_ready()
            keys = self.setup(validator_count, shard_count)
        except Exception:
            if self.host is not None:
                self.host.stop()
            raise

        if self.host is not None:
            self.host.serve_forever()
        return keys
