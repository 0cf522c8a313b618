# ./src/memocache/__init__.py
"""memocache: in-process key/value cache with TTL, stats and change events."""

from .cache import MemoCache
from .events import CacheEvent
from .models import (
    CacheError,
    CacheStats,
    Entry,
    InvalidKeysArgumentError,
    InvalidKeyTypeError,
    NotFoundError,
)
from .utils.config import CacheConfig, load_config

__all__ = [
    "CacheConfig",
    "CacheError",
    "CacheEvent",
    "CacheStats",
    "Entry",
    "InvalidKeyTypeError",
    "InvalidKeysArgumentError",
    "MemoCache",
    "NotFoundError",
    "load_config",
]

__version__ = "0.1.0"
