from __future__ import annotations

import os
from typing import Optional

from dotenv import load_dotenv

# Load .env once on import so every node picks up the same cluster settings.
load_dotenv()


def _env_str(name: str, default: str = "") -> str:
    """Read a string env var, stripping whitespace."""
    return (os.getenv(name, default) or "").strip()


def _env_int(name: str, default: int = 0) -> int:
    v = _env_str(name, str(default)) or str(default)
    return int(v)


def _env_float(name: str, default: float = 0.0) -> float:
    v = _env_str(name, str(default)) or str(default)
    return float(v)


def _env_optional_int(name: str) -> Optional[int]:
    v = _env_str(name, "")
    return int(v) if v else None
