"""
Reading repository: the backend-agnostic owner of the reading set.

Key patterns:
- Protocol-based dependency injection (any ``ReadingStore`` variant)
- Explicit ``Result`` values instead of raising across the API boundary
- Sort order recomputed from ``timestamp`` on every load, never trusted from storage
- Per-id locks so overlapping edits of one reading are applied one at a time
"""

import asyncio
from collections import defaultdict
from collections.abc import Iterable, Mapping
from typing import Any

import structlog

from bptracker.domain.errors import NotFoundError, ReadingError
from bptracker.domain.models import Reading, ReadingDraft
from bptracker.domain.result import Result
from bptracker.services.store import ReadingStore
from bptracker.services.validation import merge_reading, validate_draft

logger = structlog.get_logger(__name__)


def sort_readings(readings: Iterable[Reading], descending: bool = False) -> list[Reading]:
    """Stable sort by timestamp; ties keep their input order."""
    return sorted(readings, key=lambda r: r.timestamp, reverse=descending)


class ReadingRepository:
    """
    Orchestrates the active store adapter.

    The repository keeps a snapshot of the last load (id -> Reading). ``update``
    and ``delete`` only accept ids known to that snapshot.
    """

    def __init__(self, store: ReadingStore) -> None:
        self.store = store
        self.logger = logger.bind(component="reading_repository", store=store.store_name)
        self._snapshot: dict[str, Reading] = {}
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    @property
    def readings(self) -> list[Reading]:
        """Copy of the last loaded set, ascending by timestamp."""
        return sort_readings(self._snapshot.values())

    async def load_all(self, descending: bool = False) -> Result[list[Reading], ReadingError]:
        """Fetch every reading and return a fresh list sorted by timestamp."""
        result = await self.store.get_all()
        if result.is_err():
            self.logger.warning("load_all_failed", error=str(result.unwrap_err()))
            return Result.err(result.unwrap_err())

        readings = sort_readings(result.unwrap())
        self._snapshot = {r.id: r for r in readings}
        for stale in self._locks.keys() - self._snapshot.keys():
            self._locks.pop(stale)
        self.logger.debug("readings_loaded", count=len(readings))
        return Result.ok(readings[::-1] if descending else readings)

    def get(self, reading_id: str) -> Result[Reading, ReadingError]:
        reading = self._snapshot.get(reading_id)
        if reading is None:
            return Result.err(NotFoundError(reading_id))
        return Result.ok(reading)

    async def create(
        self, draft: ReadingDraft | Mapping[str, Any]
    ) -> Result[Reading, ReadingError]:
        """Validate the draft, persist it, and return the stored reading with its id."""
        validated = validate_draft(draft)
        if validated.is_err():
            error = validated.unwrap_err()
            self.logger.info("create_rejected", errors=error.messages)
            return Result.err(error)

        result = await self.store.create(validated.unwrap())
        if result.is_err():
            self.logger.warning("create_failed", error=str(result.unwrap_err()))
            return Result.err(result.unwrap_err())

        reading = result.unwrap()
        self._snapshot[reading.id] = reading
        self.logger.info("reading_created", reading_id=reading.id)
        return Result.ok(reading)

    async def update(
        self, reading_id: str, partial: Mapping[str, Any]
    ) -> Result[Reading, ReadingError]:
        """
        Merge ``partial`` onto the known reading and persist it.

        Fields absent from ``partial`` keep their prior value; ``id`` and
        ``timestamp`` are never taken from ``partial``.
        """
        if reading_id not in self._snapshot:
            self.logger.info("update_unknown_reading", reading_id=reading_id)
            return Result.err(NotFoundError(reading_id))

        async with self._locks[reading_id]:
            # Deleted while this update waited
            existing = self._snapshot.get(reading_id)
            if existing is None:
                self.logger.info("update_unknown_reading", reading_id=reading_id)
                return Result.err(NotFoundError(reading_id))

            merged = merge_reading(existing, partial)
            if merged.is_err():
                error = merged.unwrap_err()
                self.logger.info("update_rejected", reading_id=reading_id, errors=error.messages)
                return Result.err(error)

            result = await self.store.update(merged.unwrap())
            if result.is_err():
                self.logger.warning(
                    "update_failed", reading_id=reading_id, error=str(result.unwrap_err())
                )
                return Result.err(result.unwrap_err())

            reading = result.unwrap()
            self._snapshot[reading.id] = reading
            self.logger.info("reading_updated", reading_id=reading.id)
            return Result.ok(reading)

    async def delete(self, reading_id: str) -> Result[None, ReadingError]:
        if reading_id not in self._snapshot:
            return Result.err(NotFoundError(reading_id))

        async with self._locks[reading_id]:
            if reading_id not in self._snapshot:
                return Result.err(NotFoundError(reading_id))

            result = await self.store.delete(reading_id)
            if result.is_err():
                self.logger.warning(
                    "delete_failed", reading_id=reading_id, error=str(result.unwrap_err())
                )
                return Result.err(result.unwrap_err())

            self._snapshot.pop(reading_id, None)
            self._locks.pop(reading_id, None)
            self.logger.info("reading_deleted", reading_id=reading_id)
            return Result.ok(None)

    async def delete_all(self) -> Result[None, ReadingError]:
        """Remove every reading. Succeeds on an already empty set."""
        result = await self.store.delete_all()
        if result.is_err():
            self.logger.warning("delete_all_failed", error=str(result.unwrap_err()))
            return Result.err(result.unwrap_err())

        self._snapshot.clear()
        self._locks.clear()
        self.logger.info("readings_cleared")
        return Result.ok(None)
