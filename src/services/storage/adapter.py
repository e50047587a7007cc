"""
Persistent Store Adapter

Thin layer between the ledger and a KeyValueStore. It owns the JSON
encoding of collection snapshots and makes sure every backend failure
reaches the caller as a StorageError.

No retries happen here. A failed read or write is reported immediately.
"""

import json
from dataclasses import dataclass
from typing import Any, Optional

from src.services.storage.interface import (
    KeyValueStore,
    SnapshotDecodeError,
    StorageError,
)


DEFAULT_KEY_PREFIX = "@moneyflow_"


@dataclass(frozen=True)
class CollectionKeys:
    """Storage keys for the two ledger collections."""

    transactions: str
    goals: str

    @classmethod
    def with_prefix(cls, prefix: str = DEFAULT_KEY_PREFIX) -> "CollectionKeys":
        return cls(
            transactions=f"{prefix}transactions",
            goals=f"{prefix}goals",
        )

    def all(self) -> tuple[str, str]:
        return (self.transactions, self.goals)


class PersistentStoreAdapter:
    """
    Loads and saves whole collections through a KeyValueStore.
    """

    def __init__(self, store: KeyValueStore):
        self._store = store

    @property
    def store(self) -> KeyValueStore:
        return self._store

    async def get(self, key: str) -> Optional[str]:
        """Read a raw value, converting backend failures to StorageError."""
        try:
            return await self._store.get(key)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to read '{key}': {e}") from e

    async def set(self, key: str, value: str) -> None:
        """Write a raw value, converting backend failures to StorageError."""
        try:
            await self._store.set(key, value)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to write '{key}': {e}") from e

    async def load_collection(self, key: str) -> list[dict[str, Any]]:
        """
        Load the snapshot stored under `key`.

        An absent key is an empty collection.

        Raises:
            SnapshotDecodeError: If the stored value is not a JSON array
            StorageError: If the read fails
        """
        raw = await self.get(key)
        if raw is None:
            return []

        try:
            records = json.loads(raw)
        except json.JSONDecodeError as e:
            raise SnapshotDecodeError(f"Collection '{key}' is not valid JSON: {e}") from e

        if not isinstance(records, list):
            raise SnapshotDecodeError(
                f"Collection '{key}' must be a JSON array, got {type(records).__name__}"
            )
        return records

    async def save_collection(self, key: str, records: list[dict[str, Any]]) -> None:
        """Replace the snapshot stored under `key`."""
        await self.set(key, json.dumps(records, ensure_ascii=False))
