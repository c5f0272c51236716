from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence, Union

import structlog

from zefboot.core.errors import ConfigMismatchError
from zefboot.core.keys import GENESIS_KEY, WALLET_KEY
from zefboot.core.models import GenesisState, NodeState, WalletState
from zefboot.fetch.fetcher import CancellationToken, PollFetcher

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ClientBootstrap:
    genesis: GenesisState
    wallet: WalletState
    genesis_path: Path
    wallet_path: Path


Workload = Callable[[ClientBootstrap], Any]


class ClientWorkload:
    """Default workload: run the client binary against the fetched files and wait for it."""

    def __init__(self, client_bin: str = "./client", args: Sequence[str] = ("benchmark",)) -> None:
        self.client_bin = client_bin
        self.args = list(args)

    def command(self, boot: ClientBootstrap) -> List[str]:
        return [
            self.client_bin,
            "--wallet",
            boot.wallet_path.name,
            "--genesis",
            boot.genesis_path.name,
            *self.args,
        ]

    def __call__(self, boot: ClientBootstrap) -> int:
        cmd = self.command(boot)
        logger.info("Running client workload", command=cmd)
        return subprocess.call(cmd, cwd=str(boot.wallet_path.parent))


class ClientNode:
    """Waits for genesis and wallet, then hands both to the workload."""

    def __init__(
        self,
        fetcher: PollFetcher,
        workload: Optional[Workload] = None,
        *,
        workdir: Union[str, Path] = ".",
    ) -> None:
        self.fetcher = fetcher
        self.workload = workload or ClientWorkload()
        self.workdir = Path(workdir)
        self.state = NodeState.INIT

    def _enter(self, state: NodeState) -> None:
        logger.info("Client state", previous=self.state.value, state=state.value)
        self.state = state

    def run(self, *, cancel: Optional[CancellationToken] = None) -> Any:
        self._enter(NodeState.FETCHING)
        genesis_path = self.workdir / f"{GENESIS_KEY}.json"
        wallet_path = self.workdir / f"{WALLET_KEY}.json"
        genesis = GenesisState.from_bytes(self.fetcher.fetch_to_file(GENESIS_KEY, genesis_path, cancel=cancel))
        wallet = WalletState.from_bytes(self.fetcher.fetch_to_file(WALLET_KEY, wallet_path, cancel=cancel))

        if wallet.genesis_hash != genesis.digest():
            raise ConfigMismatchError("wallet was generated for a different genesis")
        self._enter(NodeState.READY)

        boot = ClientBootstrap(genesis=genesis, wallet=wallet, genesis_path=genesis_path, wallet_path=wallet_path)
        self._enter(NodeState.RUNNING)
        return self.workload(boot)
