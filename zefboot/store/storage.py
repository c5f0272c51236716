import threading
from typing import Dict, List, Optional, Protocol

import structlog

logger = structlog.get_logger(__name__)


class ConfigStore(Protocol):
    def put(self, key: str, value: bytes) -> None: ...

    def get(self, key: str) -> Optional[bytes]: ...


class InMemoryConfigStore:
    """Process-local key/value storage backing the hosted store app."""

    def __init__(self) -> None:
        self._entries: Dict[str, bytes] = {}
        self._lock = threading.Lock()

    def put(self, key: str, value: bytes) -> None:
        with self._lock:
            if key in self._entries and self._entries[key] != value:
                # Keys are write-once by convention; the store itself does not refuse.
                logger.warning("Overwriting published key", key=key)
            self._entries[key] = bytes(value)

    def get(self, key: str) -> Optional[bytes]:
        with self._lock:
            return self._entries.get(key)

    def keys(self) -> List[str]:
        with self._lock:
            return sorted(self._entries)
