"""
Local reading store: the whole reading set as one JSON array under one key.

Record shape on disk (kept compatible with the mobile client's cache)::

    {"id": "...", "systolic": 120, "diastolic": 80, "heartRate": 70,
     "timestamp": 1718000000000, "note": "..."}

``timestamp`` is epoch milliseconds. Older records stored the numbers as
strings (``"120"``); those decode leniently.
"""

import asyncio
import json
import uuid
from datetime import UTC, datetime, timedelta
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field, field_validator

from bptracker.domain.errors import StoreError
from bptracker.domain.models import Reading, ReadingDraft
from bptracker.domain.result import Result
from bptracker_adapters.local.kv import KeyValueStore

logger = structlog.get_logger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
ONE_MS = timedelta(milliseconds=1)


def to_epoch_ms(value: datetime) -> int:
    return (value - EPOCH) // ONE_MS


def from_epoch_ms(value: int) -> datetime:
    return EPOCH + timedelta(milliseconds=value)


class LocalReadingRecord(BaseModel):
    """A reading as serialized in the local blob."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    systolic: int
    diastolic: int
    heart_rate: int = Field(alias="heartRate")
    timestamp: int = Field(description="Epoch milliseconds")
    note: str | None = None

    @field_validator("id", mode="before")
    def coerce_id(cls, v: Any) -> Any:
        # Legacy ids were Date.now() numbers
        return str(v) if isinstance(v, int) and not isinstance(v, bool) else v

    @classmethod
    def from_reading(cls, reading: Reading) -> "LocalReadingRecord":
        return cls(
            id=reading.id,
            systolic=reading.systolic,
            diastolic=reading.diastolic,
            heart_rate=reading.heart_rate,
            timestamp=to_epoch_ms(reading.timestamp),
            note=reading.note,
        )

    def to_reading(self) -> Reading:
        return Reading(
            id=self.id,
            systolic=self.systolic,
            diastolic=self.diastolic,
            heart_rate=self.heart_rate,
            timestamp=from_epoch_ms(self.timestamp),
            note=self.note,
        )

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class LocalReadingStore:
    """
    ``ReadingStore`` over a local key-value backend.

    Every mutation reads the whole blob, changes it in memory and writes it
    back in full while holding ``self._lock``. Mutations validate only the
    record they touch, so one unreadable legacy record does not block writes;
    ``get_all`` still rejects it.
    """

    def __init__(
        self,
        kv: KeyValueStore,
        storage_key: str = "bloodPressureReadings",
        store_name: str = "local",
    ) -> None:
        self.kv = kv
        self.storage_key = storage_key
        self.store_name = store_name
        self.logger = logger.bind(store=store_name, storage_key=storage_key)
        self._lock = asyncio.Lock()

    async def _read_raw(self) -> list[Any]:
        raw = await self.kv.get(self.storage_key)
        if raw is None or not raw.strip():
            return []
        data = json.loads(raw)
        if data is None:
            return []
        if not isinstance(data, list):
            raise ValueError(f"Stored readings must be a JSON array, got {type(data).__name__}")
        return data

    async def _read_all(self) -> list[Reading]:
        items = await self._read_raw()
        return [LocalReadingRecord.model_validate(item).to_reading() for item in items]

    async def _write_raw(self, items: list[Any]) -> None:
        await self.kv.set(self.storage_key, json.dumps(items, ensure_ascii=False))

    @staticmethod
    def _index_of(items: list[Any], reading_id: str) -> int | None:
        # Only ids are read here; other records are written back as stored
        for index, item in enumerate(items):
            if isinstance(item, dict) and str(item.get("id")) == reading_id:
                return index
        return None

    def _missing(self, operation: str, reading_id: str) -> Result[Any, StoreError]:
        self.logger.warning("reading_not_found", operation=operation, reading_id=reading_id)
        return Result.err(StoreError(operation, KeyError(reading_id)))

    def _fail(self, operation: str, error: Exception) -> Result[Any, StoreError]:
        self.logger.exception("local_store_operation_failed", operation=operation, error=str(error))
        return Result.err(StoreError(operation, error))

    async def get_all(self) -> Result[list[Reading], StoreError]:
        try:
            async with self._lock:
                readings = await self._read_all()
        except Exception as e:
            return self._fail("get_all", e)
        return Result.ok(readings)

    async def get_by_id(self, reading_id: str) -> Result[Reading, StoreError]:
        try:
            async with self._lock:
                items = await self._read_raw()
            index = self._index_of(items, reading_id)
            if index is not None:
                reading = LocalReadingRecord.model_validate(items[index]).to_reading()
        except Exception as e:
            return self._fail("get_by_id", e)
        if index is None:
            return self._missing("get_by_id", reading_id)
        return Result.ok(reading)

    async def create(self, draft: ReadingDraft) -> Result[Reading, StoreError]:
        try:
            async with self._lock:
                items = await self._read_raw()
                reading_id = uuid.uuid4().hex
                while self._index_of(items, reading_id) is not None:
                    reading_id = uuid.uuid4().hex
                record = LocalReadingRecord.from_reading(draft.to_reading(reading_id))
                await self._write_raw([*items, record.to_json_dict()])
            # Round-trip through the record so the result matches what is stored
            reading = record.to_reading()
        except Exception as e:
            return self._fail("create", e)

        self.logger.debug("reading_stored", reading_id=reading.id)
        return Result.ok(reading)

    async def update(self, reading: Reading) -> Result[Reading, StoreError]:
        try:
            async with self._lock:
                items = await self._read_raw()
                index = self._index_of(items, reading.id)
                if index is not None:
                    stored = LocalReadingRecord.model_validate(items[index])
                    record = LocalReadingRecord.from_reading(reading).model_copy(
                        update={"timestamp": stored.timestamp}
                    )
                    items[index] = record.to_json_dict()
                    await self._write_raw(items)
            if index is not None:
                updated = record.to_reading()
        except Exception as e:
            return self._fail("update", e)
        if index is None:
            return self._missing("update", reading.id)
        return Result.ok(updated)

    async def delete(self, reading_id: str) -> Result[None, StoreError]:
        try:
            async with self._lock:
                items = await self._read_raw()
                index = self._index_of(items, reading_id)
                if index is not None:
                    del items[index]
                    await self._write_raw(items)
        except Exception as e:
            return self._fail("delete", e)
        if index is None:
            return self._missing("delete", reading_id)
        return Result.ok(None)

    async def delete_all(self) -> Result[None, StoreError]:
        try:
            async with self._lock:
                await self.kv.delete(self.storage_key)
        except Exception as e:
            return self._fail("delete_all", e)
        return Result.ok(None)

