from __future__ import annotations

import threading
import time
from typing import Optional

import structlog
import uvicorn
from fastapi import FastAPI

logger = structlog.get_logger(__name__)


class StoreHost:
    """Runs the config store app under uvicorn on a background thread."""

    def __init__(self, app: FastAPI, *, host: str = "0.0.0.0", port: int = 2379, log_level: str = "warning") -> None:
        self.app = app
        self.host = host
        self.port = port
        self._server = uvicorn.Server(uvicorn.Config(app, host=host, port=port, log_level=log_level))
        self._thread: Optional[threading.Thread] = None

    @property
    def started(self) -> bool:
        return bool(self._server.started)

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._server.run, name="store-host", daemon=True)
        self._thread.start()
        logger.info("Config store starting", host=self.host, port=self.port)

    def wait_ready(self, timeout_s: float = 10.0, interval_s: float = 0.05) -> None:
        deadline = time.time() + timeout_s
        while time.time() < deadline:
            if self.started:
                return
            if self._thread is not None and not self._thread.is_alive():
                raise RuntimeError(f"Config store on {self.host}:{self.port} exited during startup")
            time.sleep(interval_s)
        raise RuntimeError(f"Timed out waiting for config store on {self.host}:{self.port}")

    def serve_forever(self) -> None:
        """Block until the server stops (externally terminated or `stop()`)."""
        self.start()
        thread = self._thread
        while thread is not None and thread.is_alive():
            thread.join(timeout=1.0)

    def stop(self, timeout_s: float = 5.0) -> None:
        self._server.should_exit = True
        if self._thread is not None:
            self._thread.join(timeout=timeout_s)
