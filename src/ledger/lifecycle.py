"""
Ledger Initialization Lifecycle

Makes sure both collections exist in the store before the ledger is used.

The lifecycle is a plain object created once and handed to the
repository, not a module-level flag. Initialization is idempotent:
existing collections are never overwritten or inspected.
"""

import asyncio
from enum import Enum
from typing import Optional

from src.audit import AuditLogger
from src.ledger.errors import NotInitializedError
from src.services.storage import (
    CollectionKeys,
    PersistentStoreAdapter,
    StorageError,
)


EMPTY_COLLECTION = "[]"


class LifecycleState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"


class LedgerLifecycle:
    """
    Two-state machine: uninitialized -> initialized.

    Callers in one event loop share a single initialization run. Separate
    processes are not coordinated; two of them racing on an absent key
    both write "[]", which is harmless.
    """

    def __init__(
        self,
        adapter: PersistentStoreAdapter,
        keys: Optional[CollectionKeys] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._adapter = adapter
        self._keys = keys or CollectionKeys.with_prefix()
        self._audit_logger = audit_logger
        self._state = LifecycleState.UNINITIALIZED
        self._init_lock = asyncio.Lock()

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def is_initialized(self) -> bool:
        return self._state == LifecycleState.INITIALIZED

    async def initialize(self) -> None:
        """
        Create any missing collection as an empty array.

        Raises:
            StorageError: If the store fails. State stays uninitialized
                so the call can be retried.
        """
        if self.is_initialized:
            return

        async with self._init_lock:
            if self.is_initialized:
                return

            created: list[str] = []
            try:
                for key in self._keys.all():
                    if await self._adapter.get(key) is None:
                        await self._adapter.set(key, EMPTY_COLLECTION)
                        created.append(key)
                        if self._audit_logger:
                            self._audit_logger.log_collection_created(key)
            except StorageError as e:
                if self._audit_logger:
                    self._audit_logger.log_storage_error("initialize", e)
                raise

            self._state = LifecycleState.INITIALIZED
            if self._audit_logger:
                self._audit_logger.log_database_initialized(created)

    async def ensure_initialized(self) -> None:
        """Guard run at the top of every repository operation."""
        if not self.is_initialized:
            await self.initialize()

    def require_initialized(self) -> None:
        """
        Raises:
            NotInitializedError: If initialize() has not completed.
        """
        if not self.is_initialized:
            raise NotInitializedError(
                "Ledger storage is not initialized; call init_database() first"
            )
