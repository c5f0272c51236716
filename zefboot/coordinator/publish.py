from __future__ import annotations

from typing import List

import structlog

from zefboot.core.keys import GENESIS_KEY, WALLET_KEY, server_key
from zefboot.core.models import ClusterConfig, GenesisState, WalletState
from zefboot.store.storage import ConfigStore

logger = structlog.get_logger(__name__)


def publish(
    store: ConfigStore,
    cluster: ClusterConfig,
    genesis: GenesisState,
    wallet: WalletState,
) -> List[str]:
    """Put one entry per validator plus genesis and wallet; returns the keys written."""
    entries = [(server_key(v.validator_id), v.to_bytes()) for v in cluster.validators]
    entries.append((GENESIS_KEY, genesis.to_bytes()))
    entries.append((WALLET_KEY, wallet.to_bytes()))

    written: List[str] = []
    for key, value in entries:
        store.put(key, value)
        written.append(key)
        logger.debug("Published key", key=key, size=len(value))

    logger.info("Published cluster config", count=len(written), keys=written)
    return written
