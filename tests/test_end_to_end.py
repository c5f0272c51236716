import shutil
import threading

import pytest

from conftest import free_port
from zefboot.coordinator.coordinator import Coordinator
from zefboot.coordinator.host import StoreHost
from zefboot.fetch.backoff import FixedBackoff
from zefboot.fetch.fetcher import PollFetcher
from zefboot.store.app import create_app
from zefboot.store.client import StoreClient
from zefboot.store.storage import InMemoryConfigStore


@pytest.fixture
def hosted_store():
    port = free_port()
    host = StoreHost(create_app(InMemoryConfigStore()), host="127.0.0.1", port=port)
    host.start()
    host.wait_ready()
    endpoint = f"http://127.0.0.1:{port}"
    assert StoreClient(endpoint).healthy()
    yield endpoint
    host.stop()


@pytest.mark.integration
def test_nodes_bootstrap_over_http(hosted_store, fake_keypairs, tmp_path):
    from neurons.client import main as client_main
    from neurons.validator import main as validator_main

    if shutil.which("true") is None:
        pytest.skip("needs a `true` executable to stand in for the server/client binaries")

    mp = pytest.MonkeyPatch()
    mp.setenv("ZEFBOOT_STORE_ENDPOINT", hosted_store)
    mp.setenv("ZEFBOOT_POLL_INTERVAL_S", "0.05")
    mp.setenv("ZEFBOOT_SERVER_BIN", "true")
    mp.setenv("ZEFBOOT_CLIENT_BIN", "true")
    results = {}

    def run_validator(ordinal):
        workdir = tmp_path / f"server_{ordinal}"
        workdir.mkdir()
        mp.setenv("ZEFBOOT_WORKDIR", str(workdir))
        results[f"server_{ordinal}"] = validator_main(["1", "--server-id", str(ordinal)])

    try:
        # The client starts before anything is published and must wait.
        mp.setenv("ZEFBOOT_WORKDIR", str(tmp_path))
        t = threading.Thread(target=lambda: results.update(client=client_main([])))
        t.start()

        coordinator = Coordinator(StoreClient(hosted_store), num_chains=3, keypair_factory=fake_keypairs)
        coordinator.setup(2, 1)
        t.join(timeout=10.0)

        run_validator(1)
        run_validator(2)
    finally:
        mp.undo()

    assert results == {"client": 0, "server_1": 0, "server_2": 0}
    assert (tmp_path / "server_2" / "server_2.json").exists()
    assert (tmp_path / "wallet.json").exists()


@pytest.mark.integration
def test_fetch_over_http_waits_for_publish(hosted_store, fake_keypairs):
    client = StoreClient(hosted_store)
    fetcher = PollFetcher(client, backoff=FixedBackoff(0.05))
    got = {}

    t = threading.Thread(target=lambda: got.update(value=fetcher.fetch("server_1")))
    t.start()

    Coordinator(client, num_chains=1, keypair_factory=fake_keypairs).setup(1, 1)
    t.join(timeout=5.0)

    assert got["value"] == client.get("server_1")
    assert sorted(client.keys()) == ["genesis", "server_1", "wallet"]


@pytest.mark.integration
def test_coordinator_entrypoint_fails_without_publishing(monkeypatch):
    from neurons.coordinator import main as coordinator_main

    monkeypatch.setenv("ZEFBOOT_STORE_LISTEN_HOST", "127.0.0.1")
    monkeypatch.setenv("ZEFBOOT_STORE_LISTEN_PORT", str(free_port()))

    assert coordinator_main(["0", "1"]) == 1


@pytest.mark.integration
def test_serve_forever_returns_after_stop():
    host = StoreHost(create_app(InMemoryConfigStore()), host="127.0.0.1", port=free_port())
    host.start()
    host.wait_ready()

    timer = threading.Timer(0.2, host.stop)
    timer.start()
    host.serve_forever()
    timer.join()

    assert not host._thread.is_alive()
