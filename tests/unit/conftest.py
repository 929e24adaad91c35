"""Shared fixtures: a fixed clock, a reading factory and in-memory stores."""

from collections.abc import Callable
from datetime import UTC, datetime

import pytest

from bptracker.domain.models import Reading
from bptracker.services.repository import ReadingRepository
from bptracker_adapters.local.kv import InMemoryKeyValueStore
from bptracker_adapters.local.store import LocalReadingStore

NOW = datetime(2024, 6, 10, 12, 0, tzinfo=UTC)

ReadingFactory = Callable[..., Reading]


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_reading() -> ReadingFactory:
    counter = iter(range(1, 10_000))

    def _make(
        timestamp: datetime = NOW,
        systolic: int = 120,
        diastolic: int = 80,
        heart_rate: int = 70,
        note: str | None = None,
        reading_id: str | None = None,
    ) -> Reading:
        return Reading(
            id=reading_id or f"r{next(counter)}",
            systolic=systolic,
            diastolic=diastolic,
            heart_rate=heart_rate,
            timestamp=timestamp,
            note=note,
        )

    return _make


@pytest.fixture
def kv() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def local_store(kv: InMemoryKeyValueStore) -> LocalReadingStore:
    return LocalReadingStore(kv)


@pytest.fixture
def repository(local_store: LocalReadingStore) -> ReadingRepository:
    return ReadingRepository(local_store)
