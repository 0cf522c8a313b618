# ./src/memocache/models.py
"""Data models and error taxonomy for the memocache engine.

Run path: imported by ``memocache.cache`` and re-exported from ``memocache``.
Inputs: none (pure type definitions).
Outputs: ``Entry``/``CacheStats`` records and ``CacheError`` subclasses.
Side effects: none.
Operational notes: error ``code`` values are stable identifiers safe to match on.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Hashable, Optional, Union

CacheKey = Union[str, int]


@dataclass
class Entry:
    """Stored representation of one cached value.

    ``expires_at`` is an absolute epoch timestamp in milliseconds, or ``0``
    when the entry never expires.
    """

    value: Any
    expires_at: int = 0

    def is_stale(self, now_ms: int) -> bool:
        return self.expires_at != 0 and self.expires_at < now_ms


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    keys: int = 0
    ksize: int = 0
    vsize: int = 0

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


class CacheError(Exception):
    """Base class for every error raised by the cache engine."""

    code = "ECACHE"

    def __init__(self, message: str, data: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.data: Dict[str, Any] = dict(data or {})

    def __str__(self) -> str:
        return self.args[0] if self.args else self.code


class InvalidKeyTypeError(CacheError):
    code = "EKEYTYPE"

    def __init__(self, type_name: str):
        super().__init__(
            "The key argument has to be of type `str` or `int`. "
            f"Found: `{type_name}`",
            {"type": type_name},
        )
        self.type_name = type_name


class InvalidKeysArgumentError(CacheError):
    code = "EKEYSTYPE"

    def __init__(self, type_name: str):
        super().__init__(
            f"The keys argument has to be a list or tuple. Found: `{type_name}`",
            {"type": type_name},
        )
        self.type_name = type_name


class NotFoundError(CacheError, KeyError):
    """Raised by ``get`` when error-on-missing is active and the key is absent."""

    code = "ENOTFOUND"

    def __init__(self, key: Hashable):
        super().__init__(f"Key `{key}` not found", {"key": key})
        self.key = key
