"""Docker Compose layout for a local cluster: one coordinator, N validators, one client."""

from __future__ import annotations

from typing import Any, Dict

import yaml

from zefboot.bootstrap.config import DEFAULT_STORE_PORT, STORE_ENDPOINT_ENV
from zefboot.core.keys import server_key
from zefboot.core.naming import DEFAULT_PROJECT, setup_host


def build_compose(num_validators: int, num_shards: int, *, project: str = DEFAULT_PROJECT) -> Dict[str, Any]:
    if num_validators < 1 or num_shards < 1:
        raise ValueError("num_validators and num_shards must be >= 1")

    store_env = f"{STORE_ENDPOINT_ENV}=http://{setup_host(project)}:{DEFAULT_STORE_PORT}"
    services: Dict[str, Any] = {
        "setup": {
            "build": {"context": ".", "target": "setup"},
            "command": f"zefboot-coordinator {num_validators} {num_shards}",
            "environment": [f"ZEFBOOT_PROJECT={project}"],
        }
    }
    for validator_id in range(1, num_validators + 1):
        services[server_key(validator_id)] = {
            "build": {"context": ".", "target": "server"},
            "command": f"zefboot-validator {num_shards}",
            "environment": [store_env, f"ZEFBOOT_SERVER_ID={validator_id}"],
            "depends_on": ["setup"],
        }
    services["client"] = {
        "build": {"context": ".", "target": "client"},
        "command": "zefboot-client",
        "environment": [store_env],
        "depends_on": ["setup"],
    }
    return {"name": project, "services": services}


def render_compose(num_validators: int, num_shards: int, *, project: str = DEFAULT_PROJECT) -> str:
    return yaml.safe_dump(build_compose(num_validators, num_shards, project=project), sort_keys=False)
