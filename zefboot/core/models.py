from __future__ import annotations

import enum
import hashlib
import json
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


def canon_json(obj: Dict[str, Any]) -> bytes:
    # Stable canonical encoding; the genesis hash depends on it.
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=True).encode("utf-8")


class NodeState(str, enum.Enum):
    INIT = "INIT"
    FETCHING = "FETCHING"
    READY = "READY"
    RUNNING = "RUNNING"


class CoordinatorState(str, enum.Enum):
    GENERATING = "GENERATING"
    PUBLISHING = "PUBLISHING"
    SERVING = "SERVING"


class _Blob(BaseModel):
    model_config = ConfigDict(frozen=True)

    def to_bytes(self) -> bytes:
        return canon_json(self.model_dump(mode="json"))

    @classmethod
    def from_bytes(cls, raw: bytes):
        return cls.model_validate_json(raw)


class ValidatorDescriptor(_Blob):
    # Ordinal in 1..N; also selects the `server_<i>` store key.
    validator_id: int = Field(ge=1)
    # Public identity (hex Ed25519 public key).
    name: str
    host: str
    port: int
    protocol: str = "tcp"
    shards: int = Field(ge=1)
    # Private key hex. Stored in the clear; secret distribution is out of scope.
    key_seed: str

    @property
    def address(self) -> str:
        return f"{self.protocol}:{self.host}:{self.port}"


class CommitteeMember(_Blob):
    name: str
    address: str
    shards: int


class ClusterConfig(_Blob):
    shard_count: int = Field(ge=1)
    validators: List[ValidatorDescriptor]

    def committee(self) -> List[CommitteeMember]:
        return [
            CommitteeMember(name=v.name, address=v.address, shards=v.shards)
            for v in self.validators
        ]


class ChainDescription(_Blob):
    chain_id: str
    owner: str
    balance: int


class GenesisState(_Blob):
    committee: List[CommitteeMember]
    chains: List[ChainDescription]
    initial_funding: int
    admin_chain: str

    def digest(self) -> str:
        return hashlib.sha256(self.to_bytes()).hexdigest()


class WalletChain(_Blob):
    chain_id: str
    owner: str
    key_seed: str


class WalletState(_Blob):
    genesis_hash: str
    chains: List[WalletChain]
