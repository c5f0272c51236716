from __future__ import annotations

from typing import List, Optional

import requests

from zefboot.core.errors import StoreUnavailableError


class StoreClient:
    """HTTP client for the config store hosted by the coordinator."""

    def __init__(self, endpoint: str, *, timeout_s: float = 5.0) -> None:
        self.endpoint = endpoint.rstrip("/")
        self.timeout_s = timeout_s

    def put(self, key: str, value: bytes) -> None:
        try:
            r = requests.put(
                f"{self.endpoint}/kv/{key}",
                data=value,
                headers={"content-type": "application/octet-stream"},
                timeout=self.timeout_s,
            )
        except requests.RequestException as exc:
            raise StoreUnavailableError(f"put {key!r} failed: {exc}") from exc
        if r.status_code >= 500:
            raise StoreUnavailableError(f"put {key!r} failed: status={r.status_code}")
        r.raise_for_status()

    def get(self, key: str) -> Optional[bytes]:
        """Return the value under `key`, or None when the key is absent."""
        try:
            r = requests.get(f"{self.endpoint}/kv/{key}", timeout=self.timeout_s)
        except requests.RequestException as exc:
            raise StoreUnavailableError(f"get {key!r} failed: {exc}") from exc
        if r.status_code == 404:
            return None
        # Any other status is transient as far as callers are concerned.
        if r.status_code != 200:
            raise StoreUnavailableError(f"get {key!r} failed: status={r.status_code}")
        return r.content

    def keys(self) -> List[str]:
        r = requests.get(f"{self.endpoint}/keys", timeout=self.timeout_s)
        r.raise_for_status()
        data = r.json()
        return data if isinstance(data, list) else []

    def healthy(self) -> bool:
        try:
            r = requests.get(f"{self.endpoint}/healthz", timeout=self.timeout_s)
        except requests.RequestException:
            return False
        return r.status_code == 200
