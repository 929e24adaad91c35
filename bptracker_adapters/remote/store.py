"""
Remote reading store: JSON over HTTP against the readings API.

Wire contract::

    GET    /readings/       -> {"readings": [ReadingDto, ...]}
    GET    /readings/{id}   -> ReadingDto
    POST   /readings/       (CreateReadingDto) -> ReadingDto
    PUT    /readings/{id}   (UpdateReadingDto) -> ReadingDto
    DELETE /readings/{id}   -> no content
    DELETE /readings/       -> no content

The server is the source of truth: no retries, no client-side rollback.
"""

from datetime import datetime
from typing import Any
from urllib.parse import quote

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, field_validator

from bptracker.domain.errors import StoreError
from bptracker.domain.models import Reading, ReadingDraft
from bptracker.domain.result import Result

logger = structlog.get_logger(__name__)

COLLECTION_PATH = "/readings/"


class ReadingDto(BaseModel):
    """A reading as returned by the API."""

    model_config = ConfigDict(extra="ignore")

    id: str
    systolic: int
    diastolic: int
    heart_rate: int
    timestamp: datetime
    note: str | None = None

    @field_validator("id", mode="before")
    def coerce_id(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) and not isinstance(v, bool) else v

    def to_reading(self) -> Reading:
        return Reading.model_validate(self.model_dump())


class CreateReadingDto(BaseModel):
    """Body of ``POST /readings/``."""

    systolic: int
    diastolic: int
    heart_rate: int
    timestamp: datetime
    note: str | None = None

    @classmethod
    def from_draft(cls, draft: ReadingDraft) -> "CreateReadingDto":
        return cls.model_validate(draft.model_dump())

    def payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class UpdateReadingDto(BaseModel):
    """Body of ``PUT /readings/{id}``; timestamp is never sent, note is sent as null to clear it."""

    systolic: int
    diastolic: int
    heart_rate: int
    note: str | None = None

    @classmethod
    def from_reading(cls, reading: Reading) -> "UpdateReadingDto":
        return cls(
            systolic=reading.systolic,
            diastolic=reading.diastolic,
            heart_rate=reading.heart_rate,
            note=reading.note,
        )

    def payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class ReadingsEnvelope(BaseModel):
    """Body of ``GET /readings/``. Anything but a list under ``readings`` counts as empty."""

    model_config = ConfigDict(extra="ignore")

    readings: list[ReadingDto] = []

    @field_validator("readings", mode="before")
    def tolerate_missing_list(cls, v: Any) -> Any:
        return v if isinstance(v, list) else []

    @classmethod
    def from_payload(cls, payload: Any) -> "ReadingsEnvelope":
        if not isinstance(payload, dict):
            return cls()
        return cls.model_validate(payload)


class RemoteReadingStore:
    """``ReadingStore`` backed by the readings HTTP API."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
        store_name: str = "remote",
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.store_name = store_name
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout_seconds,
            headers={"Content-Type": "application/json"},
        )
        self.logger = logger.bind(store=store_name, base_url=self.base_url)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "RemoteReadingStore":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    @staticmethod
    def _resource_path(reading_id: str) -> str:
        return f"{COLLECTION_PATH}{quote(reading_id, safe='')}"

    async def _request(
        self, method: str, path: str, json: dict[str, Any] | None = None
    ) -> httpx.Response:
        response = await self._client.request(method, path, json=json)
        response.raise_for_status()
        return response

    def _fail(self, operation: str, error: Exception) -> Result[Any, StoreError]:
        self.logger.exception(
            "remote_store_operation_failed", operation=operation, error=str(error)
        )
        return Result.err(StoreError(operation, error))

    async def get_all(self) -> Result[list[Reading], StoreError]:
        try:
            response = await self._request("GET", COLLECTION_PATH)
            envelope = ReadingsEnvelope.from_payload(response.json())
            readings = [dto.to_reading() for dto in envelope.readings]
        except Exception as e:
            return self._fail("get_all", e)
        return Result.ok(readings)

    async def get_by_id(self, reading_id: str) -> Result[Reading, StoreError]:
        try:
            response = await self._request("GET", self._resource_path(reading_id))
            reading = ReadingDto.model_validate(response.json()).to_reading()
        except Exception as e:
            return self._fail("get_by_id", e)
        return Result.ok(reading)

    async def create(self, draft: ReadingDraft) -> Result[Reading, StoreError]:
        try:
            body = CreateReadingDto.from_draft(draft).payload()
            response = await self._request("POST", COLLECTION_PATH, json=body)
            reading = ReadingDto.model_validate(response.json()).to_reading()
        except Exception as e:
            return self._fail("create", e)
        return Result.ok(reading)

    async def update(self, reading: Reading) -> Result[Reading, StoreError]:
        try:
            body = UpdateReadingDto.from_reading(reading).payload()
            response = await self._request("PUT", self._resource_path(reading.id), json=body)
            updated = ReadingDto.model_validate(response.json()).to_reading()
        except Exception as e:
            return self._fail("update", e)
        return Result.ok(updated)

    async def delete(self, reading_id: str) -> Result[None, StoreError]:
        try:
            await self._request("DELETE", self._resource_path(reading_id))
        except Exception as e:
            return self._fail("delete", e)
        return Result.ok(None)

    async def delete_all(self) -> Result[None, StoreError]:
        try:
            await self._request("DELETE", COLLECTION_PATH)
        except Exception as e:
            return self._fail("delete_all", e)
        return Result.ok(None)
