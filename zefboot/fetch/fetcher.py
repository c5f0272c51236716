from __future__ import annotations

import threading
from pathlib import Path
from typing import Dict, Optional, Union

import structlog

from zefboot.core.errors import FetchCancelled, StoreUnavailableError
from zefboot.fetch.backoff import Backoff, FixedBackoff
from zefboot.store.storage import ConfigStore

logger = structlog.get_logger(__name__)


class CancellationToken:
    """Lets a caller bound a fetch that would otherwise block forever."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float) -> bool:
        """Sleep up to `timeout` seconds; True if cancelled meanwhile."""
        return self._event.wait(timeout)


class PollFetcher:
    """
    Blocking retrieval of a published config blob.

    `fetch` retries until the key appears. There is no attempt limit and no
    timeout: a key that is never published keeps the caller waiting until the
    process is killed or the optional cancellation token fires. Misses are
    only reported through logging and `attempts()`.
    """

    def __init__(
        self,
        store: ConfigStore,
        *,
        backoff: Optional[Backoff] = None,
        log_every: int = 10,
    ) -> None:
        self.store = store
        self.backoff = backoff or FixedBackoff()
        self.log_every = max(1, int(log_every))
        self._attempts: Dict[str, int] = {}
        self._lock = threading.Lock()

    def attempts(self, key: str) -> int:
        with self._lock:
            return self._attempts.get(key, 0)

    def _record(self, key: str) -> int:
        with self._lock:
            n = self._attempts.get(key, 0) + 1
            self._attempts[key] = n
            return n

    def fetch(self, key: str, *, cancel: Optional[CancellationToken] = None) -> bytes:
        token = cancel or CancellationToken()
        misses = 0
        while True:
            if token.cancelled:
                raise FetchCancelled(key, self.attempts(key))
            attempt = self._record(key)
            reason = "absent"
            try:
                value = self.store.get(key)
            except StoreUnavailableError as exc:
                value = None
                reason = str(exc)
            if value is not None:
                logger.info("Fetched config", key=key, size=len(value), attempts=attempt)
                return value

            misses += 1
            if misses % self.log_every == 0:
                logger.warning("Still waiting for config", key=key, misses=misses, reason=reason)
            else:
                logger.debug("Config not available yet", key=key, reason=reason)

            if token.wait(self.backoff.delay(misses)):
                raise FetchCancelled(key, self.attempts(key))

    def fetch_to_file(
        self,
        key: str,
        path: Union[str, Path],
        *,
        cancel: Optional[CancellationToken] = None,
    ) -> bytes:
        value = self.fetch(key, cancel=cancel)
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(value)
        return value
