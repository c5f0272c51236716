from __future__ import annotations

from typing import List

GENESIS_KEY = "genesis"
WALLET_KEY = "wallet"


def server_key(validator_id: int) -> str:
    return f"server_{int(validator_id)}"


def shard_partition(shard: int) -> str:
    return f"shard_{int(shard)}"


def published_keys(validator_count: int) -> List[str]:
    """Every key a cluster of `validator_count` validators publishes (N + 2)."""
    return [server_key(i) for i in range(1, validator_count + 1)] + [GENESIS_KEY, WALLET_KEY]
