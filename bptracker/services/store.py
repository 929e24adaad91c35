"""
Store adapter protocol.

The repository talks to exactly one persistence backend at a time through this
interface. Each variant translates its own record shape to the canonical
``Reading`` and reports every failure as ``Result.err(StoreError(...))``.
"""

from typing import Protocol

from bptracker.domain.errors import StoreError
from bptracker.domain.models import Reading, ReadingDraft
from bptracker.domain.result import Result


class ReadingStore(Protocol):
    """
    CRUD capability set over a reading collection.

    Why Protocol over ABC: structural typing, easy test doubles.
    """

    store_name: str

    async def get_all(self) -> Result[list[Reading], StoreError]: ...

    async def get_by_id(self, reading_id: str) -> Result[Reading, StoreError]: ...

    async def create(self, draft: ReadingDraft) -> Result[Reading, StoreError]:
        """Persist a new reading and return it with its assigned id."""
        ...

    async def update(self, reading: Reading) -> Result[Reading, StoreError]:
        """Replace the stored record with the same id. ``timestamp`` is never rewritten."""
        ...

    async def delete(self, reading_id: str) -> Result[None, StoreError]: ...

    async def delete_all(self) -> Result[None, StoreError]: ...
