"""Build the active store adapter from configuration."""

import structlog

from bptracker.config import AppConfig, StoreConfig, get_config
from bptracker.services.repository import ReadingRepository
from bptracker.services.store import ReadingStore
from bptracker_adapters.local.kv import JsonFileKeyValueStore
from bptracker_adapters.local.store import LocalReadingStore
from bptracker_adapters.remote.store import RemoteReadingStore

logger = structlog.get_logger(__name__)


def create_store(config: StoreConfig) -> ReadingStore:
    """Exactly one variant is active at a time."""
    if config.backend == "remote":
        store: ReadingStore = RemoteReadingStore(
            base_url=config.api_base_url,
            timeout_seconds=config.api_timeout_seconds,
        )
    else:
        store = LocalReadingStore(
            JsonFileKeyValueStore(config.local_data_dir),
            storage_key=config.local_storage_key,
        )
    logger.info("store_selected", backend=config.backend, store_type=type(store).__name__)
    return store


def create_repository(config: AppConfig | None = None) -> ReadingRepository:
    config = config or get_config()
    return ReadingRepository(create_store(config.store))
