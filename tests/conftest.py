"""
Shared fixtures for the ledger tests.

No test touches the network or the user's data directory; storage is
either in memory or under pytest's tmp_path.
"""

import asyncio
from datetime import datetime, timezone
from typing import Optional

import pytest

from src.ledger import LedgerLifecycle, LedgerRepository
from src.orchestrator import LedgerService
from src.services.storage import (
    CollectionKeys,
    InMemoryKeyValueStore,
    KeyValueStore,
    PersistentStoreAdapter,
)


FIXED_NOW = datetime(2024, 1, 1, 9, 30, tzinfo=timezone.utc)


class YieldingStore(InMemoryKeyValueStore):
    """Gives up the event loop inside every get/set, like a real backend."""

    async def get(self, key: str) -> Optional[str]:
        await asyncio.sleep(0)
        value = await super().get(key)
        await asyncio.sleep(0)
        return value

    async def set(self, key: str, value: str) -> None:
        await asyncio.sleep(0)
        await super().set(key, value)


class FailingStore(KeyValueStore):
    """Raises on reads and/or writes until told to recover."""

    def __init__(self, fail_get: bool = False, fail_set: bool = True):
        self.fail_get = fail_get
        self.fail_set = fail_set
        self.data: dict[str, str] = {}

    async def get(self, key: str) -> Optional[str]:
        if self.fail_get:
            raise OSError("disk unavailable")
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        if self.fail_set:
            raise OSError("disk full")
        self.data[key] = value


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def keys() -> CollectionKeys:
    return CollectionKeys.with_prefix()


@pytest.fixture
def adapter(store) -> PersistentStoreAdapter:
    return PersistentStoreAdapter(store)


@pytest.fixture
def lifecycle(adapter, keys) -> LedgerLifecycle:
    return LedgerLifecycle(adapter, keys)


@pytest.fixture
def repository(adapter, keys, lifecycle) -> LedgerRepository:
    return LedgerRepository(
        adapter,
        keys=keys,
        lifecycle=lifecycle,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def service(repository) -> LedgerService:
    return LedgerService(repository)


@pytest.fixture
def failing_store_cls() -> type[FailingStore]:
    return FailingStore


@pytest.fixture
def yielding_store_cls() -> type[YieldingStore]:
    return YieldingStore


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW
