"""
Abstract Key-Value Store Interface

DESIGN DECISION: The ledger only needs a durable key-value store of strings.
Keeping the contract this small allows us to:
1. Run on a local directory, Google Sheets, or anything else with get/set
2. Use in-memory storage for testing
3. Keep ledger logic decoupled from storage mechanics

Values are whole-collection snapshots. There is no partial-record access.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStore(ABC):
    """
    Abstract interface for a durable key-value store.

    Any backend (local files, Google Sheets, etc.) must implement these
    methods. `set` must replace the stored value atomically: a reader
    sees either the old blob or the new one, never a mix.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: Storage key

        Returns:
            The stored string, or None if the key is absent

        Raises:
            StorageError: If the read fails
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """
        Store a value under a key, replacing any previous value.

        Args:
            key: Storage key
            value: Serialized value

        Raises:
            StorageError: If the write fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class SnapshotDecodeError(StorageError):
    """A stored collection snapshot could not be decoded."""
    pass


class StorageConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
