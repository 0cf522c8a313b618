# ./src/memocache/utils/config.py
"""Configuration loader and coercion utilities for memocache.

Used by ``MemoCache`` to merge defaults, JSON config, dotenv, and environment.
Run path: internal import via ``memocache.cache`` or direct helper import in tests.
Inputs: optional JSON config path, optional local ``.env``, and ``MEMOCACHE_*`` variables.
Outputs: populated ``CacheConfig`` dataclass with normalized types.
Side effects: may read local files and mutate process env when a ``.env`` exists.
Operational notes: malformed overrides are ignored to preserve deterministic defaults.
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv

_LOG_LEVELS = {
    "CRITICAL": 50,
    "ERROR": 40,
    "WARNING": 30,
    "INFO": 20,
    "DEBUG": 10,
    "NOTSET": 0,
}

# Option names used by the JavaScript node-cache API.
_OPTION_ALIASES = {
    "forceString": "force_string",
    "objectValueSize": "object_value_size",
    "arrayValueSize": "array_value_size",
    "stdTTL": "std_ttl",
    "checkperiod": "check_period",
    "useClones": "use_clones",
    "errorOnMissing": "error_on_missing",
}

_BOOL_FIELDS = {"force_string", "use_clones", "error_on_missing", "redact_keys"}
_INT_FIELDS = {"object_value_size", "array_value_size"}
_FLOAT_FIELDS = {"std_ttl", "check_period"}


@dataclass
class CacheConfig:
    force_string: bool = False
    object_value_size: int = 80
    array_value_size: int = 40
    std_ttl: float = 0.0
    check_period: float = 600.0
    use_clones: bool = True
    error_on_missing: bool = False

    log_level: int = 30
    logger_name: str = "memocache"
    redact_keys: bool = True
    redact_style: str = "mask"  # mask | none

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _bool(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _to_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    return default


def _to_int(value: Any, default: int) -> int:
    try:
        if isinstance(value, bool):
            return int(value)
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            return int(value)
        if isinstance(value, str) and value.strip():
            return int(value.strip())
    except ValueError:
        return default
    return default


def _to_float(value: Any, default: float) -> float:
    try:
        if isinstance(value, bool):
            return float(value)
        if isinstance(value, (int, float)):
            return float(value)
        if isinstance(value, str) and value.strip():
            return float(value.strip())
    except ValueError:
        return default
    return default


def _to_log_level(value: Any, default: int) -> int:
    if isinstance(value, str):
        return _LOG_LEVELS.get(value.strip().upper(), _to_int(value, default))
    return _to_int(value, default)


def option_name(name: str) -> str:
    """Map a node-cache style option name to its ``CacheConfig`` field."""
    return _OPTION_ALIASES.get(name, name)


def apply_overrides(cfg: CacheConfig, data: Mapping[str, Any]) -> CacheConfig:
    """Coerce and apply ``data`` onto ``cfg`` in place; unknown keys are skipped."""
    for raw_key, value in data.items():
        key = option_name(raw_key)
        if not hasattr(cfg, key) or key.startswith("_"):
            continue

        if key == "log_level":
            cfg.log_level = _to_log_level(value, cfg.log_level)
            continue

        if key in _BOOL_FIELDS:
            setattr(cfg, key, _to_bool(value, getattr(cfg, key)))
            continue

        if key in _INT_FIELDS:
            setattr(cfg, key, max(0, _to_int(value, getattr(cfg, key))))
            continue

        if key in _FLOAT_FIELDS:
            setattr(cfg, key, max(0.0, _to_float(value, getattr(cfg, key))))
            continue

        if key == "redact_style":
            if isinstance(value, str) and value in {"mask", "none"}:
                cfg.redact_style = value
            continue

        if key == "logger_name" and isinstance(value, str) and value.strip():
            cfg.logger_name = value.strip()

    return cfg


def _load_json_config(config_path: str) -> dict[str, Any]:
    path = Path(config_path)
    if not path.is_file():
        return {}
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return payload if isinstance(payload, dict) else {}


def _load_dotenv_if_present() -> None:
    env_path = Path(".env")
    if not env_path.exists():
        return
    load_dotenv(dotenv_path=env_path, override=True)


def load_config(config_path: Optional[str] = None) -> CacheConfig:
    """Load runtime config with precedence: defaults -> JSON -> dotenv -> env."""
    cfg = CacheConfig()

    if config_path:
        apply_overrides(cfg, _load_json_config(config_path))

    _load_dotenv_if_present()
    env = os.environ.get

    level = env("MEMOCACHE_LOG_LEVEL")
    if level:
        cfg.log_level = _LOG_LEVELS.get(level.upper(), cfg.log_level)

    cfg.force_string = _bool(env("MEMOCACHE_FORCE_STRING"), cfg.force_string)
    cfg.use_clones = _bool(env("MEMOCACHE_USE_CLONES"), cfg.use_clones)
    cfg.error_on_missing = _bool(
        env("MEMOCACHE_ERROR_ON_MISSING"),
        cfg.error_on_missing,
    )

    cfg.object_value_size = max(
        0, _to_int(env("MEMOCACHE_OBJECT_VALUE_SIZE"), cfg.object_value_size)
    )
    cfg.array_value_size = max(
        0, _to_int(env("MEMOCACHE_ARRAY_VALUE_SIZE"), cfg.array_value_size)
    )
    cfg.std_ttl = max(0.0, _to_float(env("MEMOCACHE_STD_TTL"), cfg.std_ttl))
    cfg.check_period = max(
        0.0, _to_float(env("MEMOCACHE_CHECK_PERIOD"), cfg.check_period)
    )

    cfg.redact_keys = _bool(env("MEMOCACHE_REDACT_KEYS"), cfg.redact_keys)
    redaction_style = env("MEMOCACHE_REDACT_STYLE")
    if redaction_style in {"mask", "none"}:
        cfg.redact_style = redaction_style

    return cfg
