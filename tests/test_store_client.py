from typing import List, Tuple

import pytest
import requests

import zefboot.store.client as mod
from zefboot.core.errors import StoreUnavailableError
from zefboot.store.client import StoreClient


class _Resp:
    def __init__(self, status_code: int = 200, content: bytes = b""):
        self.status_code = status_code
        self.content = content

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"status {self.status_code}")


def test_get_absent_key_returns_none(monkeypatch):
    monkeypatch.setattr(mod.requests, "get", lambda url, *, timeout: _Resp(404))
    assert StoreClient("http://store").get("genesis") is None


def test_get_returns_body(monkeypatch):
    calls: List[Tuple[str, float]] = []

    def fake_get(url, *, timeout):
        calls.append((url, timeout))
        return _Resp(200, b"{}")

    monkeypatch.setattr(mod.requests, "get", fake_get)
    assert StoreClient("http://store/", timeout_s=2.0).get("server_1") == b"{}"
    assert calls == [("http://store/kv/server_1", 2.0)]


def test_transport_error_is_store_unavailable(monkeypatch):
    def refuse(url, *, timeout):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(mod.requests, "get", refuse)
    with pytest.raises(StoreUnavailableError):
        StoreClient("http://store").get("wallet")


def test_server_error_is_store_unavailable(monkeypatch):
    monkeypatch.setattr(mod.requests, "get", lambda url, *, timeout: _Resp(503))
    with pytest.raises(StoreUnavailableError):
        StoreClient("http://store").get("wallet")


def test_put_sends_raw_bytes(monkeypatch):
    sent = {}

    def fake_put(url, *, data, headers, timeout):
        sent.update(url=url, data=data, headers=headers, timeout=timeout)
        return _Resp(200)

    monkeypatch.setattr(mod.requests, "put", fake_put)
    StoreClient("http://store").put("genesis", b"{}")

    assert sent["url"] == "http://store/kv/genesis"
    assert sent["data"] == b"{}"
    assert sent["headers"]["content-type"] == "application/octet-stream"


@pytest.mark.parametrize("status", [403, 408, 429])
def test_other_client_errors_are_store_unavailable(monkeypatch, status):
    monkeypatch.setattr(mod.requests, "get", lambda url, *, timeout: _Resp(status))
    with pytest.raises(StoreUnavailableError):
        StoreClient("http://store").get("genesis")


def test_fetch_keeps_polling_through_throttling(monkeypatch):
    from zefboot.fetch.backoff import FixedBackoff
    from zefboot.fetch.fetcher import PollFetcher

    responses = iter([_Resp(429), _Resp(403), _Resp(200, b"{}")])
    monkeypatch.setattr(mod.requests, "get", lambda url, *, timeout: next(responses))

    fetcher = PollFetcher(StoreClient("http://store"), backoff=FixedBackoff(0.0))
    assert fetcher.fetch("genesis") == b"{}"
    assert fetcher.attempts("genesis") == 3


def test_healthy_reflects_healthz(monkeypatch):
    urls: List[str] = []

    def fake_get(url, *, timeout):
        urls.append(url)
        return _Resp(200)

    monkeypatch.setattr(mod.requests, "get", fake_get)
    assert StoreClient("http://store").healthy() is True
    assert urls == ["http://store/healthz"]


def test_unreachable_store_is_not_healthy(monkeypatch):
    def refuse(url, *, timeout):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(mod.requests, "get", refuse)
    assert StoreClient("http://store").healthy() is False
