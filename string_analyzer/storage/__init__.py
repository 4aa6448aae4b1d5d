"""
Pluggable storage backends.

- **IndexedStore**: SQLAlchemy table, filters pushed down to the engine
- **FlatStore**: single JSON file with file locking and atomic replace

Both implement ``StorageBackend``; the variant is chosen once at startup.
"""
import logging

from string_analyzer.config import Settings
from string_analyzer.exceptions import StorageUnavailableError
from string_analyzer.storage.base import StorageBackend
from string_analyzer.storage.flat import FlatStore
from string_analyzer.storage.indexed import IndexedStore

logger = logging.getLogger(__name__)

__all__ = ["StorageBackend", "FlatStore", "IndexedStore", "build_storage"]


def build_storage(settings: Settings) -> StorageBackend:
    """Instantiate the configured backend"""
    mode = settings.storage_backend

    if mode == "flat":
        return FlatStore(settings.flat_store_path)

    if mode == "indexed":
        return IndexedStore(settings.database_url)

    try:
        return IndexedStore(settings.database_url)
    except StorageUnavailableError as e:
        logger.warning(f"⚠️ Indexed store unavailable ({e.message}), falling back to flat store.")
        return FlatStore(settings.flat_store_path)
