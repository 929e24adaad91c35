"""Store adapter implementations for the reading core.

Each variant implements ``bptracker.services.store.ReadingStore`` and keeps
its own record shape to itself.
"""

from .factory import create_repository, create_store
from .local.kv import InMemoryKeyValueStore, JsonFileKeyValueStore
from .local.store import LocalReadingStore
from .remote.store import RemoteReadingStore

__all__ = [
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "LocalReadingStore",
    "RemoteReadingStore",
    "create_repository",
    "create_store",
]
