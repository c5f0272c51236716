import itertools
import socket
import sys
from pathlib import Path
from typing import Callable, List, Tuple

import pytest

# Ensure repo root is on sys.path so `import zefboot` / `neurons` work under all pytest import modes.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from zefboot.fetch.backoff import FixedBackoff  # noqa: E402
from zefboot.fetch.fetcher import PollFetcher  # noqa: E402
from zefboot.store.storage import InMemoryConfigStore  # noqa: E402


def free_port() -> int:
    s = socket.socket()
    s.bind(("127.0.0.1", 0))
    port = s.getsockname()[1]
    s.close()
    return port


class RecordingStore(InMemoryConfigStore):
    """In-memory store that logs every put/get in call order."""

    def __init__(self) -> None:
        super().__init__()
        self.puts: List[str] = []
        self.gets: List[Tuple[str, bool]] = []

    def put(self, key: str, value: bytes) -> None:
        self.puts.append(key)
        super().put(key, value)

    def get(self, key: str):
        value = super().get(key)
        self.gets.append((key, value is not None))
        return value


class FakeProcess:
    _pids = itertools.count(1000)

    def __init__(self, cmd, returncode: int = 0):
        self.cmd = list(cmd)
        self.pid = next(self._pids)
        self.returncode = returncode

    def wait(self, timeout=None):  # noqa: ARG002
        return self.returncode


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def fetcher(store: RecordingStore) -> PollFetcher:
    return PollFetcher(store, backoff=FixedBackoff(0.01))


@pytest.fixture
def fake_keypairs() -> Callable[[], Tuple[str, str]]:
    counter = itertools.count(1)

    def factory() -> Tuple[str, str]:
        n = next(counter)
        return f"{n:064x}", f"owner-{n}"

    return factory


def pytest_configure(config):
    config.addinivalue_line("markers", "integration: starts a real store host on a local port")
