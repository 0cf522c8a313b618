# ./src/memocache/utils/sizing.py
"""Key validation and value size estimation for cache statistics.

Run path: imported by ``memocache.cache`` only.
Inputs: cache keys, cached values, and the engine's size multipliers.
Outputs: validated keys, integer size estimates, compact JSON strings.
Side effects: none.
Operational notes: estimates feed ``ksize``/``vsize`` stats only, never eviction.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from ..models import CacheKey, InvalidKeyTypeError

NUMBER_SIZE = 8


def _type_name(value: Any) -> str:
    return "None" if value is None else type(value).__name__


def validate_key(key: Any) -> CacheKey:
    """Return ``key`` unchanged, or raise ``InvalidKeyTypeError``."""
    if isinstance(key, bool) or not isinstance(key, (str, int)):
        raise InvalidKeyTypeError(_type_name(key))
    return key


def to_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), default=str)


def estimate_key_size(key: CacheKey) -> int:
    return len(str(key))


def estimate_size(
    value: Any,
    force_string: bool = False,
    object_value_size: int = 80,
    array_value_size: int = 40,
) -> int:
    if isinstance(value, str):
        return len(value)
    if force_string:
        return len(to_json(value))
    if isinstance(value, (list, tuple)):
        return array_value_size * len(value)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return NUMBER_SIZE
    if isinstance(value, Mapping):
        return object_value_size * len(value)
    return 0
