"""
Shared fixtures.

No real backends in unit tests: the store runs over an in-memory adapter
that counts calls, and a fixed clock makes timestamps and the current
month deterministic.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from finance_tracker.services.storage import InMemoryStorage
from finance_tracker.store import MonthlyStore


class CountingStorage(InMemoryStorage):
    """In-memory adapter that records how often it was read and written."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        super().__init__(initial)
        self.load_calls = 0
        self.store_calls = 0

    def load(self, key: str) -> Optional[str]:
        self.load_calls += 1
        return super().load(key)

    def store(self, key: str, value: str) -> None:
        self.store_calls += 1
        super().store(key, value)


class FixedClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


# Midday UTC on the 15th is June 15 in every timezone
JUNE_15 = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def storage() -> CountingStorage:
    return CountingStorage()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(JUNE_15)


@pytest.fixture
def store(storage, clock) -> MonthlyStore:
    return MonthlyStore(storage, clock=clock)
