from __future__ import annotations

DEFAULT_PROJECT = "zefchain"


def validator_host(project: str, validator_id: int) -> str:
    """Network name of validator `validator_id` under compose's `<project>-<service>-1` scheme."""
    return f"{project}-server_{int(validator_id)}-1"


def setup_host(project: str) -> str:
    return f"{project}-setup-1"
