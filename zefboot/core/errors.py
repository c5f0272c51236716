from __future__ import annotations


class ZefbootError(Exception):
    """Base class for bootstrap errors."""


class GenerationError(ZefbootError):
    """Cluster configuration could not be generated; nothing may be published."""


class StoreUnavailableError(ZefbootError):
    """The config store could not be reached or answered with a server error."""


class FetchCancelled(ZefbootError):
    def __init__(self, key: str, attempts: int) -> None:
        super().__init__(f"fetch of {key!r} cancelled after {attempts} attempt(s)")
        self.key = key
        self.attempts = attempts


class ConfigMismatchError(ZefbootError):
    """Two fetched blobs do not belong to the same cluster instantiation."""
