from typing import Optional

from fastapi import FastAPI, HTTPException, Request, Response

from zefboot import __version__
from zefboot.store.storage import InMemoryConfigStore


def create_app(storage: Optional[InMemoryConfigStore] = None) -> FastAPI:
    store = storage if storage is not None else InMemoryConfigStore()
    app = FastAPI(title="zefboot config store", version=__version__)
    app.state.storage = store

    @app.get("/healthz")
    def healthz():
        return {"ok": True, "keys": len(store.keys())}

    @app.get("/keys")
    def keys():
        return store.keys()

    @app.put("/kv/{key}")
    async def put_value(key: str, request: Request):
        body = await request.body()
        if not body:
            raise HTTPException(status_code=400, detail="Empty value")
        store.put(key, body)
        return {"ok": True}

    @app.get("/kv/{key}")
    def get_value(key: str):
        value = store.get(key)
        if value is None:
            raise HTTPException(status_code=404, detail=f"Key not found: {key}")
        return Response(content=value, media_type="application/json")

    return app
