from __future__ import annotations

import shlex
from dataclasses import dataclass
from typing import Callable, List, NoReturn, Optional, TypeVar

from zefboot.utils.env import _env_float, _env_int, _env_optional_int, _env_str

T = TypeVar("T")

STORE_ENDPOINT_ENV = "ZEFBOOT_STORE_ENDPOINT"
DEFAULT_STORE_PORT = 2379


@dataclass(frozen=True)
class StoreConfig:
    endpoint: str
    timeout_s: float


@dataclass(frozen=True)
class FetchConfig:
    poll_interval_s: float
    log_every: int


@dataclass(frozen=True)
class CoordinatorConfig:
    store: StoreConfig
    listen_host: str
    listen_port: int
    # Where the coordinator itself publishes; the shared store endpoint when set.
    publish_endpoint: str
    project: str
    validator_port: int
    num_chains: int
    initial_funding: int


@dataclass(frozen=True)
class ValidatorConfig:
    store: StoreConfig
    fetch: FetchConfig
    server_id: int
    server_bin: str
    workdir: str


@dataclass(frozen=True)
class ClientConfig:
    store: StoreConfig
    fetch: FetchConfig
    client_bin: str
    client_args: List[str]
    workdir: str


def _die(msg: str) -> NoReturn:
    raise SystemExit(f"[zefboot] {msg}")


def _parse(name: str, read: Callable[[], T]) -> T:
    try:
        return read()
    except ValueError:
        _die(f"Invalid value for {name}.")


def _load_store() -> StoreConfig:
    endpoint = _env_str(STORE_ENDPOINT_ENV, f"http://127.0.0.1:{DEFAULT_STORE_PORT}").rstrip("/")
    if not endpoint.startswith("http"):
        _die(f"{STORE_ENDPOINT_ENV} must be http(s). Got: {endpoint!r}")
    timeout_s = _parse("ZEFBOOT_STORE_TIMEOUT_S", lambda: _env_float("ZEFBOOT_STORE_TIMEOUT_S", 5.0))
    return StoreConfig(endpoint=endpoint, timeout_s=max(0.1, timeout_s))


def _local_endpoint(host: str, port: int) -> str:
    if host in ("", "0.0.0.0"):
        host = "127.0.0.1"
    elif host == "::":
        host = "::1"
    if ":" in host:
        host = f"[{host}]"
    return f"http://{host}:{port}"


def _load_fetch() -> FetchConfig:
    interval = _parse("ZEFBOOT_POLL_INTERVAL_S", lambda: _env_float("ZEFBOOT_POLL_INTERVAL_S", 1.0))
    log_every = _parse("ZEFBOOT_POLL_LOG_EVERY", lambda: _env_int("ZEFBOOT_POLL_LOG_EVERY", 10))
    if interval < 0:
        _die(f"ZEFBOOT_POLL_INTERVAL_S must be >= 0. Got: {interval}")
    return FetchConfig(poll_interval_s=interval, log_every=max(1, log_every))


def load_coordinator_env() -> CoordinatorConfig:
    """Load coordinator settings from env/.env."""
    listen_port = _parse("ZEFBOOT_STORE_LISTEN_PORT", lambda: _env_int("ZEFBOOT_STORE_LISTEN_PORT", DEFAULT_STORE_PORT))
    validator_port = _parse("ZEFBOOT_VALIDATOR_PORT", lambda: _env_int("ZEFBOOT_VALIDATOR_PORT", 9100))
    num_chains = _parse("ZEFBOOT_NUM_CHAINS", lambda: _env_int("ZEFBOOT_NUM_CHAINS", 1000))
    initial_funding = _parse("ZEFBOOT_INITIAL_FUNDING", lambda: _env_int("ZEFBOOT_INITIAL_FUNDING", 100))
    if num_chains < 1:
        _die(f"ZEFBOOT_NUM_CHAINS must be >= 1. Got: {num_chains}")
    if initial_funding < 0:
        _die(f"ZEFBOOT_INITIAL_FUNDING must be >= 0. Got: {initial_funding}")

    store = _load_store()
    listen_host = _env_str("ZEFBOOT_STORE_LISTEN_HOST", "0.0.0.0") or "0.0.0.0"
    if _env_str(STORE_ENDPOINT_ENV):
        publish_endpoint = store.endpoint
    else:
        publish_endpoint = _local_endpoint(listen_host, listen_port)

    return CoordinatorConfig(
        store=store,
        listen_host=listen_host,
        listen_port=listen_port,
        publish_endpoint=publish_endpoint,
        project=_env_str("ZEFBOOT_PROJECT", "zefchain") or "zefchain",
        validator_port=validator_port,
        num_chains=num_chains,
        initial_funding=initial_funding,
    )


def load_validator_env(*, server_id: Optional[int] = None) -> ValidatorConfig:
    """
    Load validator settings from env/.env.

    `server_id` given on the command line wins over ZEFBOOT_SERVER_ID; one of
    the two is required.
    """
    if server_id is None:
        server_id = _parse("ZEFBOOT_SERVER_ID", lambda: _env_optional_int("ZEFBOOT_SERVER_ID"))
    if server_id is None:
        _die("Missing required env var: ZEFBOOT_SERVER_ID (or pass --server-id).")
    if server_id < 1:
        _die(f"Validator identifier must be >= 1. Got: {server_id}")

    return ValidatorConfig(
        store=_load_store(),
        fetch=_load_fetch(),
        server_id=int(server_id),
        server_bin=_env_str("ZEFBOOT_SERVER_BIN", "./server") or "./server",
        workdir=_env_str("ZEFBOOT_WORKDIR", ".") or ".",
    )


def load_client_env() -> ClientConfig:
    """Load client settings from env/.env."""
    return ClientConfig(
        store=_load_store(),
        fetch=_load_fetch(),
        client_bin=_env_str("ZEFBOOT_CLIENT_BIN", "./client") or "./client",
        client_args=shlex.split(_env_str("ZEFBOOT_CLIENT_ARGS", "benchmark")),
        workdir=_env_str("ZEFBOOT_WORKDIR", ".") or ".",
    )
