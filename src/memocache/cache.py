# ./src/memocache/cache.py
"""memocache engine: in-process key/value cache with TTL, stats and events.

Used by the public Python API (``from memocache import MemoCache``) and the CLI.
Run via imports or ``python -m memocache.main``.
Inputs: ``str``/``int`` keys, arbitrary values, config via ``CacheConfig``,
``--config`` JSON, ``MEMOCACHE_*`` env, or keyword options.
Outputs: cached values, ``CacheStats`` snapshots, ``CacheError`` exceptions.
Side effects: one daemon sweep timer per instance while ``check_period > 0``.
Operational notes: every operation and sweep pass holds one re-entrant lock, so
the sweep thread never interleaves with a foreground call.
"""

from __future__ import annotations

import copy
import threading
import time
from dataclasses import fields, replace
from typing import Any, Dict, Iterable, List, Optional, Union

from .events import CacheEvent, EventName, EventHub, Handler
from .models import (
    CacheKey,
    CacheStats,
    Entry,
    InvalidKeysArgumentError,
    NotFoundError,
)
from .utils.config import CacheConfig, apply_overrides, load_config, option_name
from .utils.logger import build_logger
from .utils.sizing import (
    estimate_key_size,
    estimate_size,
    to_json,
    validate_key,
)
from .utils.sweeper import PeriodicSweeper

_CONFIG_FIELDS = {field.name for field in fields(CacheConfig)}


def _now_ms() -> int:
    return int(time.time() * 1000)


class MemoCache:
    """Unbounded TTL cache with hit/miss statistics and change notifications."""

    def __init__(
        self,
        cfg: Optional[CacheConfig] = None,
        config_path: Optional[str] = None,
        **options: Any,
    ):
        unknown = sorted(
            name for name in options if option_name(name) not in _CONFIG_FIELDS
        )
        if unknown:
            raise TypeError(f"Unknown cache option(s): {', '.join(unknown)}")

        base = cfg if cfg is not None else load_config(config_path)
        self.cfg = apply_overrides(replace(base), options)
        self.log = build_logger(
            self.cfg.logger_name,
            self.cfg.log_level,
            redact_keys=self.cfg.redact_keys,
            redact_style=self.cfg.redact_style,
        )

        self._lock = threading.RLock()
        self._data: Dict[CacheKey, Entry] = {}
        self._stats = CacheStats()
        self._events = EventHub(self.log)
        self._sweeper = PeriodicSweeper(self._sweep, self.cfg.check_period)

        self._check_data()
        self.log.info(
            "Cache ready std_ttl=%s check_period=%s use_clones=%s",
            self.cfg.std_ttl,
            self.cfg.check_period,
            self.cfg.use_clones,
        )

    # -- notifications ---------------------------------------------------

    def on(self, event: EventName, handler: Handler) -> None:
        """Subscribe ``handler`` to ``set``, ``del``, ``expired`` or ``flush``."""
        self._events.subscribe(event, handler)

    def off(self, event: EventName, handler: Handler) -> bool:
        return self._events.unsubscribe(event, handler)

    # -- reads -----------------------------------------------------------

    def get(self, key: CacheKey, error_on_missing: Optional[bool] = None) -> Any:
        """Return the cached value for ``key``, or ``None`` on a miss.

        ``error_on_missing`` overrides the configured policy for this call;
        when the effective policy is on, a miss raises ``NotFoundError``.
        """
        validate_key(key)
        with self._lock:
            entry = self._data.get(key)
            if entry is not None and self._check(key, entry):
                self._stats.hits += 1
                return self._unwrap(entry)
            self._stats.misses += 1

        raise_on_miss = (
            self.cfg.error_on_missing if error_on_missing is None else error_on_missing
        )
        if raise_on_miss:
            raise NotFoundError(key)
        return None

    def mget(self, keys: Union[List[CacheKey], tuple]) -> Dict[CacheKey, Any]:
        """Return a dict of the fresh entries among ``keys``; misses are omitted.

        An invalid key aborts the call, but hits and misses counted for the
        keys before it are kept.
        """
        if not isinstance(keys, (list, tuple)):
            raise InvalidKeysArgumentError(type(keys).__name__)

        found: Dict[CacheKey, Any] = {}
        with self._lock:
            for key in keys:
                validate_key(key)
                entry = self._data.get(key)
                if entry is not None and self._check(key, entry):
                    self._stats.hits += 1
                    found[key] = self._unwrap(entry)
                else:
                    self._stats.misses += 1
        return found

    def get_ttl(self, key: Optional[CacheKey]) -> Optional[int]:
        """Return the expiry timestamp in ms (``0`` = never), or ``None``.

        Does not count as a hit or a miss.
        """
        if key is None:
            return None
        validate_key(key)
        with self._lock:
            entry = self._data.get(key)
            if entry is not None and self._check(key, entry):
                return entry.expires_at
        return None

    def keys(self) -> List[CacheKey]:
        with self._lock:
            return list(self._data)

    def get_stats(self) -> CacheStats:
        with self._lock:
            return replace(self._stats)

    # -- writes ----------------------------------------------------------

    def set(self, key: CacheKey, value: Any, ttl: Optional[float] = None) -> bool:
        """Store ``value`` under ``key``.

        ``ttl`` is in seconds: ``None`` uses ``std_ttl``, ``0`` never expires.
        """
        if self.cfg.force_string and not isinstance(value, str):
            value = to_json(value)
        validate_key(key)

        entry = self._wrap(value, ttl)
        size = self._size(value)

        with self._lock:
            existing = self._data.get(key)
            if existing is not None:
                self._stats.vsize -= self._size(existing.value)

            self._data[key] = entry
            self._stats.vsize += size

            if existing is None:
                self._stats.ksize += estimate_key_size(key)
                self._stats.keys += 1

            self.log.debug("Cache set key=%s ttl=%s", key, ttl)
            self._events.emit(CacheEvent.SET, key, value)
        return True

    def delete(self, keys: Union[CacheKey, Iterable[CacheKey]]) -> int:
        """Remove one key or a list/tuple of keys and return how many existed.

        Each absent key counts as a miss. An invalid key aborts the rest of
        the batch; removals already made in the call stay applied.
        """
        if not isinstance(keys, (list, tuple)):
            keys = [keys]

        deleted = 0
        with self._lock:
            for key in keys:
                validate_key(key)
                entry = self._data.get(key)
                if entry is not None:
                    self._remove(key, entry)
                    deleted += 1
                else:
                    self._stats.misses += 1
        return deleted

    def ttl(self, key: Optional[CacheKey], ttl: Optional[float] = None) -> bool:
        """Refresh the TTL of a live key without touching its value.

        A negative ``ttl`` deletes the key. Returns ``False`` when the key is
        absent or already expired.
        """
        if ttl is None:
            ttl = self.cfg.std_ttl
        if key is None:
            return False
        validate_key(key)

        with self._lock:
            entry = self._data.get(key)
            if entry is None or not self._check(key, entry):
                return False
            if ttl >= 0:
                self._data[key] = self._wrap(entry.value, ttl, clone=False)
            else:
                self.delete(key)
            return True

    def flush_all(self, start_period: bool = True) -> None:
        """Drop every entry, zero the stats and restart the sweep timer."""
        with self._lock:
            self._data = {}
            self._stats = CacheStats()
            self._sweeper.cancel()
            self._check_data(start_period)
            self.log.info("Cache flushed")
            self._events.emit(CacheEvent.FLUSH)

    def close(self) -> None:
        """Cancel the sweep timer. Safe to call more than once."""
        self._sweeper.cancel()

    # -- mapping conveniences --------------------------------------------

    def __getitem__(self, key: CacheKey) -> Any:
        return self.get(key, error_on_missing=True)

    def __setitem__(self, key: CacheKey, value: Any) -> None:
        self.set(key, value)

    def __delitem__(self, key: CacheKey) -> None:
        if not self.delete(key):
            raise NotFoundError(key)

    def __contains__(self, key: object) -> bool:
        validate_key(key)
        with self._lock:
            entry = self._data.get(key)  # type: ignore[arg-type]
            return entry is not None and self._check(key, entry)  # type: ignore[arg-type]

    def __len__(self) -> int:
        return len(self._data)

    def __enter__(self) -> "MemoCache":
        return self

    def __exit__(self, *_exc: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"MemoCache(keys={len(self._data)}, std_ttl={self.cfg.std_ttl})"

    # -- internals -------------------------------------------------------

    def _size(self, value: Any) -> int:
        return estimate_size(
            value,
            force_string=self.cfg.force_string,
            object_value_size=self.cfg.object_value_size,
            array_value_size=self.cfg.array_value_size,
        )

    def _wrap(self, value: Any, ttl: Optional[float] = None, clone: bool = True) -> Entry:
        if ttl is None:
            ttl = self.cfg.std_ttl
        expires_at = 0 if ttl == 0 else _now_ms() + int(ttl * 1000)
        if clone and self.cfg.use_clones:
            value = copy.deepcopy(value)
        return Entry(value=value, expires_at=expires_at)

    def _unwrap(self, entry: Entry, clone: bool = True) -> Any:
        if entry.value is None:
            return None
        if clone and self.cfg.use_clones:
            return copy.deepcopy(entry.value)
        return entry.value

    def _remove(self, key: CacheKey, entry: Entry) -> None:
        self._stats.vsize -= self._size(entry.value)
        self._stats.ksize -= estimate_key_size(key)
        self._stats.keys -= 1
        del self._data[key]
        self.log.debug("Cache delete key=%s", key)
        self._events.emit(CacheEvent.DEL, key, entry.value)

    def _check(self, key: CacheKey, entry: Entry) -> bool:
        """Evict ``entry`` and return ``False`` if its TTL has passed."""
        if not entry.is_stale(_now_ms()):
            return True
        self._remove(key, entry)
        self.log.debug("Cache expired key=%s", key)
        self._events.emit(CacheEvent.EXPIRED, key, self._unwrap(entry))
        return False

    def _sweep(self) -> int:
        expired = 0
        with self._lock:
            for key, entry in list(self._data.items()):
                # an expired handler may already have removed this key
                if self._data.get(key) is not entry:
                    continue
                if not self._check(key, entry):
                    expired += 1
        if expired:
            self.log.debug("Sweep removed %d expired entries", expired)
        return expired

    def _check_data(self, start_period: bool = True) -> None:
        self._sweep()
        if start_period:
            self._sweeper.start()
