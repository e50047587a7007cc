"""
Storage Services Package

Provides the key-value store contract, the collection adapter used by the
ledger, and concrete backends (memory, local files, Google Sheets).
"""

from src.services.storage.interface import (
    KeyValueStore,
    SnapshotDecodeError,
    StorageConnectionError,
    StorageError,
)
from src.services.storage.adapter import (
    DEFAULT_KEY_PREFIX,
    CollectionKeys,
    PersistentStoreAdapter,
)
from src.services.storage.memory import InMemoryKeyValueStore
from src.services.storage.file_store import FileKeyValueStore
from src.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsKeyValueStore,
)

__all__ = [
    # Interfaces
    "KeyValueStore",
    "PersistentStoreAdapter",
    "CollectionKeys",
    "DEFAULT_KEY_PREFIX",
    # Exceptions
    "SnapshotDecodeError",
    "StorageConnectionError",
    "StorageError",
    # Implementations
    "FileKeyValueStore",
    "InMemoryKeyValueStore",
    "GoogleSheetsClient",
    "GoogleSheetsKeyValueStore",
]
