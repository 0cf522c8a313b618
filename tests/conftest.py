# ./tests/conftest.py
"""Pytest fixtures for memocache test stability.

This module ensures local `src/` imports resolve without editable installation
and provides a controllable wall clock plus a cache factory that never leaves
sweep timers running after a test.

Run path: auto-loaded by `pytest` in this repository.
Inputs: repository filesystem state.
Outputs: import path setup, `clock` and `make_cache` fixtures.
Operational notes: the clock patches `time.time` only; timers use monotonic time.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable, Iterator, List

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = PROJECT_ROOT / "src"

if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from memocache import cache as cache_mod  # noqa: E402
from memocache.cache import MemoCache  # noqa: E402
from memocache.utils.config import CacheConfig  # noqa: E402


class FakeClock:
    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock(monkeypatch: pytest.MonkeyPatch) -> FakeClock:
    fake = FakeClock()
    monkeypatch.setattr(cache_mod.time, "time", fake)
    return fake


@pytest.fixture
def make_cache() -> Iterator[Callable[..., MemoCache]]:
    created: List[MemoCache] = []

    def _factory(**options: Any) -> MemoCache:
        options.setdefault("check_period", 0)
        cache = MemoCache(cfg=CacheConfig(), **options)
        created.append(cache)
        return cache

    yield _factory

    for cache in created:
        cache.close()
