"""Shared test fixtures."""

from __future__ import annotations

import pytest

from ttlstore.services.scheduler import ManualScheduler
from ttlstore.services.store import TTLStore


@pytest.fixture
def clock() -> ManualScheduler:
    """Virtual timer facility, advanced in seconds."""
    return ManualScheduler()


@pytest.fixture
def store(clock):
    s = TTLStore(scheduler=clock)
    yield s
    s.clear()


class Recorder:
    """Eviction callback that remembers every call."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def __call__(self, key, value) -> None:
        self.calls.append((key, value))


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()
