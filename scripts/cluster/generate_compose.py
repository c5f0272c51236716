"""
Write docker-compose.yml for a local cluster and optionally bring it up.

    python scripts/cluster/generate_compose.py NUM_VALIDATORS NUM_SHARDS [--up]
"""

from __future__ import annotations

import argparse
import subprocess
from pathlib import Path
from typing import List, Optional

import structlog

from zefboot.compose import render_compose
from zefboot.core.naming import DEFAULT_PROJECT

logger = structlog.get_logger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Generate the cluster docker-compose file.")
    parser.add_argument("validators", type=int)
    parser.add_argument("shards", type=int)
    parser.add_argument("--project", default=DEFAULT_PROJECT)
    parser.add_argument("--output", default="docker-compose.yml")
    parser.add_argument("--up", action="store_true", help="Run `docker compose up` afterwards")
    args = parser.parse_args(argv)

    if args.validators < 1 or args.shards < 1:
        print("USAGE: generate_compose.py NUM_VALIDATORS NUM_SHARDS (both >= 1)")
        return 1

    out = Path(args.output)
    out.write_text(render_compose(args.validators, args.shards, project=args.project), encoding="utf-8")
    logger.info("Wrote compose file", path=str(out), validators=args.validators, shards=args.shards)

    if args.up:
        return subprocess.call(["docker", "compose", "-f", str(out), "up"])
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
