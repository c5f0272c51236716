from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence

import structlog

from zefboot.core.keys import shard_partition

logger = structlog.get_logger(__name__)

Spawn = Callable[[Sequence[str], Path], "subprocess.Popen"]


def spawn(cmd: Sequence[str], cwd: Path) -> subprocess.Popen:
    """Start `cmd` in `cwd`, inheriting stdout/stderr."""
    proc = subprocess.Popen(list(cmd), cwd=str(cwd))
    logger.debug("Spawned worker", command=list(cmd), pid=proc.pid)
    return proc


@dataclass
class ShardWorker:
    shard: int
    partition: str
    command: List[str]
    process: Optional[subprocess.Popen] = field(default=None, repr=False)

    @property
    def pid(self) -> Optional[int]:
        return self.process.pid if self.process is not None else None


class ShardLauncher:
    """Builds and spawns the per-shard server command."""

    def __init__(self, server_bin: str = "./server", *, spawn_fn: Spawn = spawn) -> None:
        self.server_bin = server_bin
        self.spawn_fn = spawn_fn

    def command(self, *, shard: int, descriptor_path: str, genesis_path: str) -> List[str]:
        return [
            self.server_bin,
            "run",
            "--storage",
            f"{shard_partition(shard)}.db",
            "--server",
            descriptor_path,
            "--shard",
            str(shard),
            "--genesis",
            genesis_path,
        ]

    def launch(self, *, shard: int, descriptor_path: str, genesis_path: str, cwd: Path) -> ShardWorker:
        cmd = self.command(shard=shard, descriptor_path=descriptor_path, genesis_path=genesis_path)
        proc = self.spawn_fn(cmd, cwd)
        return ShardWorker(shard=shard, partition=shard_partition(shard), command=cmd, process=proc)
