from fastapi.testclient import TestClient

from zefboot.store.app import create_app
from zefboot.store.storage import InMemoryConfigStore


def test_put_then_get_roundtrips_raw_bytes():
    client = TestClient(create_app())

    r = client.put("/kv/genesis", content=b'{"committee":[]}')
    assert r.status_code == 200
    assert r.json()["ok"] is True

    r2 = client.get("/kv/genesis")
    assert r2.status_code == 200
    assert r2.content == b'{"committee":[]}'


def test_absent_key_is_404():
    client = TestClient(create_app())
    assert client.get("/kv/server_1").status_code == 404


def test_empty_value_rejected():
    client = TestClient(create_app())
    assert client.put("/kv/wallet", content=b"").status_code == 400


def test_keys_and_health_reflect_storage():
    storage = InMemoryConfigStore()
    storage.put("server_2", b"{}")
    storage.put("genesis", b"{}")
    client = TestClient(create_app(storage))

    assert client.get("/keys").json() == ["genesis", "server_2"]
    health = client.get("/healthz").json()
    assert health == {"ok": True, "keys": 2}
