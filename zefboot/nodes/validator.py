from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Union

import structlog

from zefboot.core.errors import ConfigMismatchError
from zefboot.core.keys import GENESIS_KEY, server_key
from zefboot.core.models import NodeState, ValidatorDescriptor
from zefboot.fetch.fetcher import CancellationToken, PollFetcher
from zefboot.nodes.launcher import ShardLauncher, ShardWorker

logger = structlog.get_logger(__name__)


class ValidatorNode:
    """
    One validator: waits for its descriptor and the genesis, then starts one
    server process per shard. Workers are neither awaited nor restarted here.
    """

    def __init__(
        self,
        validator_id: int,
        shard_count: int,
        fetcher: PollFetcher,
        *,
        launcher: Optional[ShardLauncher] = None,
        workdir: Union[str, Path] = ".",
    ) -> None:
        if int(validator_id) < 1:
            raise ValueError(f"validator_id must be >= 1, got {validator_id}")
        if int(shard_count) < 1:
            raise ValueError(f"shard_count must be >= 1, got {shard_count}")
        self.validator_id = int(validator_id)
        self.shard_count = int(shard_count)
        self.fetcher = fetcher
        self.launcher = launcher or ShardLauncher()
        self.workdir = Path(workdir)
        self.state = NodeState.INIT
        self.descriptor: Optional[ValidatorDescriptor] = None
        self.workers: List[ShardWorker] = []

    @property
    def descriptor_key(self) -> str:
        return server_key(self.validator_id)

    def _enter(self, state: NodeState) -> None:
        logger.info("Validator state", validator_id=self.validator_id, previous=self.state.value, state=state.value)
        self.state = state

    def run(self, *, cancel: Optional[CancellationToken] = None) -> List[ShardWorker]:
        self._enter(NodeState.FETCHING)
        genesis_file = f"{GENESIS_KEY}.json"
        descriptor_file = f"{self.descriptor_key}.json"
        self.fetcher.fetch_to_file(GENESIS_KEY, self.workdir / genesis_file, cancel=cancel)
        raw = self.fetcher.fetch_to_file(self.descriptor_key, self.workdir / descriptor_file, cancel=cancel)

        descriptor = ValidatorDescriptor.from_bytes(raw)
        if descriptor.validator_id != self.validator_id:
            raise ConfigMismatchError(
                f"{self.descriptor_key!r} describes validator {descriptor.validator_id}, expected {self.validator_id}"
            )
        if descriptor.shards != self.shard_count:
            logger.warning(
                "Descriptor shard count differs; launching requested count",
                declared=descriptor.shards,
                requested=self.shard_count,
            )
        self.descriptor = descriptor
        self._enter(NodeState.READY)

        self.workers = [
            self.launcher.launch(
                shard=shard,
                descriptor_path=descriptor_file,
                genesis_path=genesis_file,
                cwd=self.workdir,
            )
            for shard in range(self.shard_count)
        ]
        self._enter(NodeState.RUNNING)
        logger.info(
            "Shard workers started",
            validator_id=self.validator_id,
            workers=len(self.workers),
            address=descriptor.address,
        )
        return self.workers

    def wait(self) -> List[Optional[int]]:
        """Block until every started worker exits; returns their exit codes."""
        codes: List[Optional[int]] = []
        for worker in self.workers:
            if worker.process is None:
                codes.append(None)
                continue
            code = worker.process.wait()
            log = logger.info if code == 0 else logger.warning
            log("Shard worker exited", validator_id=self.validator_id, shard=worker.shard, status=code)
            codes.append(code)
        return codes
