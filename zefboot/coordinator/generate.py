from __future__ import annotations

import hashlib
from typing import Callable, List, Tuple

import structlog
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from zefboot.core.errors import GenerationError
from zefboot.core.models import (
    ChainDescription,
    ClusterConfig,
    GenesisState,
    ValidatorDescriptor,
    WalletChain,
    WalletState,
)
from zefboot.core.naming import DEFAULT_PROJECT, validator_host

logger = structlog.get_logger(__name__)

# Returns (private_key_hex, public_key_hex).
KeypairFactory = Callable[[], Tuple[str, str]]


def ed25519_keypair() -> Tuple[str, str]:
    private_key = Ed25519PrivateKey.generate()
    public_key = private_key.public_key()
    return private_key.private_bytes_raw().hex(), public_key.public_bytes_raw().hex()


def _chain_id(owner: str, index: int) -> str:
    return hashlib.sha256(f"{owner}:{index}".encode("utf-8")).hexdigest()


def generate_cluster(
    validator_count: int,
    shard_count: int,
    *,
    project: str = DEFAULT_PROJECT,
    port: int = 9100,
    keypair_factory: KeypairFactory = ed25519_keypair,
) -> ClusterConfig:
    validators: List[ValidatorDescriptor] = []
    for ordinal in range(1, validator_count + 1):
        seed, name = keypair_factory()
        validators.append(
            ValidatorDescriptor(
                validator_id=ordinal,
                name=name,
                host=validator_host(project, ordinal),
                port=port,
                shards=shard_count,
                key_seed=seed,
            )
        )
    return ClusterConfig(shard_count=shard_count, validators=validators)


def generate_genesis(
    cluster: ClusterConfig,
    *,
    num_chains: int,
    initial_funding: int,
    keypair_factory: KeypairFactory = ed25519_keypair,
) -> Tuple[GenesisState, WalletState]:
    """Create the initial chains and the wallet holding their keys."""
    chains: List[ChainDescription] = []
    wallet_chains: List[WalletChain] = []
    for index in range(num_chains):
        seed, owner = keypair_factory()
        chain_id = _chain_id(owner, index)
        chains.append(ChainDescription(chain_id=chain_id, owner=owner, balance=initial_funding))
        wallet_chains.append(WalletChain(chain_id=chain_id, owner=owner, key_seed=seed))

    genesis = GenesisState(
        committee=cluster.committee(),
        chains=chains,
        initial_funding=initial_funding,
        admin_chain=chains[0].chain_id,
    )
    wallet = WalletState(genesis_hash=genesis.digest(), chains=wallet_chains)
    return genesis, wallet


def generate(
    validator_count: int,
    shard_count: int,
    *,
    num_chains: int = 1000,
    initial_funding: int = 100,
    project: str = DEFAULT_PROJECT,
    port: int = 9100,
    keypair_factory: KeypairFactory = ed25519_keypair,
) -> Tuple[ClusterConfig, GenesisState, WalletState]:
    """
    Build the full cluster configuration.

    Raises GenerationError for invalid counts or any failure while building;
    callers must not publish anything in that case.
    """
    if int(validator_count) < 1:
        raise GenerationError(f"validator count must be >= 1, got {validator_count}")
    if int(shard_count) < 1:
        raise GenerationError(f"shard count must be >= 1, got {shard_count}")
    if int(num_chains) < 1:
        raise GenerationError(f"chain count must be >= 1, got {num_chains}")

    try:
        cluster = generate_cluster(
            int(validator_count),
            int(shard_count),
            project=project,
            port=port,
            keypair_factory=keypair_factory,
        )
        genesis, wallet = generate_genesis(
            cluster,
            num_chains=int(num_chains),
            initial_funding=int(initial_funding),
            keypair_factory=keypair_factory,
        )
    except GenerationError:
        raise
    except Exception as exc:
        raise GenerationError(f"cluster generation failed: {exc}") from exc

    logger.info(
        "Generated cluster config",
        validators=len(cluster.validators),
        shards=cluster.shard_count,
        chains=len(genesis.chains),
    )
    return cluster, genesis, wallet
