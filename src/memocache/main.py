#!/usr/bin/env python3
# ./src/memocache/main.py
"""Command-line interface for inspecting and exercising a memocache instance.

Run via ``memocache`` (console script) or ``python -m memocache.main``.
Inputs: CLI command + optional ``--config`` JSON path; ``replay`` reads JSON lines on stdin.
Outputs: JSON printed to stdout, one line per replayed operation.
Side effects: none beyond the in-process cache built for the run.
Operational notes: cache errors are reported per line and do not stop a replay.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Dict, Optional

from .cache import MemoCache
from .models import CacheError
from .utils.config import load_config


def build_cache(config_path: Optional[str] = None) -> MemoCache:
    return MemoCache(config_path=config_path)


def _to_json(data: Any) -> str:
    return json.dumps(data, default=lambda value: value.__dict__)


def _ttl(op: Dict[str, Any]) -> Optional[float]:
    ttl = op.get("ttl")
    if ttl is None:
        return None
    if isinstance(ttl, bool) or not isinstance(ttl, (int, float)):
        raise ValueError(f"ttl must be a number of seconds, got {ttl!r}")
    return ttl


def _apply(cache: MemoCache, op: Dict[str, Any]) -> Any:
    name = str(op.get("op", "")).lower()
    if name == "set":
        return cache.set(op.get("key"), op.get("value"), _ttl(op))
    if name == "get":
        return cache.get(op.get("key"), op.get("error_on_missing"))
    if name == "mget":
        return cache.mget(op.get("keys"))
    if name == "del":
        return cache.delete(op.get("keys", op.get("key")))
    if name == "ttl":
        return cache.ttl(op.get("key"), _ttl(op))
    if name == "getttl":
        return cache.get_ttl(op.get("key"))
    if name == "keys":
        return cache.keys()
    if name == "stats":
        return cache.get_stats().as_dict()
    if name == "flush":
        cache.flush_all()
        return True
    raise ValueError(f"unknown op {name!r}")


def _error(op_name: Any, code: str, message: str) -> str:
    return _to_json({"op": op_name, "error": {"code": code, "message": message}})


def _replay(cache: MemoCache, lines: Any) -> None:
    for line in lines:
        line = line.strip()
        if not line:
            continue
        try:
            op = json.loads(line)
        except ValueError as err:
            print(_error(None, "EPARSE", str(err)))
            continue
        if not isinstance(op, dict):
            print(_error(None, "EPARSE", "expected a JSON object"))
            continue

        try:
            result = _apply(cache, op)
        except CacheError as err:
            print(_error(op.get("op"), err.code, str(err)))
        except (TypeError, ValueError) as err:
            print(_error(op.get("op"), "EOP", str(err)))
        else:
            print(_to_json({"op": op.get("op"), "result": result}))


def _cli() -> int:
    parser = argparse.ArgumentParser(
        prog="memocache",
        description="In-process TTL cache utilities",
    )
    parser.add_argument("--config", help="Path to config.json", default=None)
    subcommands = parser.add_subparsers(dest="cmd", required=True)

    subcommands.add_parser("config", help="Print the effective cache configuration")
    subcommands.add_parser(
        "replay", help="Apply JSON-lines cache operations read from stdin"
    )

    args = parser.parse_args()

    if args.cmd == "config":
        print(_to_json(load_config(args.config).as_dict()))
    elif args.cmd == "replay":
        cache = build_cache(args.config)
        try:
            _replay(cache, sys.stdin)
        finally:
            cache.close()

    return 0


if __name__ == "__main__":
    raise SystemExit(_cli())
