"""Services package."""

from src.services.storage import (
    CollectionKeys,
    FileKeyValueStore,
    GoogleSheetsClient,
    GoogleSheetsKeyValueStore,
    InMemoryKeyValueStore,
    KeyValueStore,
    PersistentStoreAdapter,
    SnapshotDecodeError,
    StorageConnectionError,
    StorageError,
)

__all__ = [
    "CollectionKeys",
    "FileKeyValueStore",
    "GoogleSheetsClient",
    "GoogleSheetsKeyValueStore",
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "PersistentStoreAdapter",
    "SnapshotDecodeError",
    "StorageConnectionError",
    "StorageError",
]
