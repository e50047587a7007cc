"""
Ledger Repository

Owns the transaction and goal collections.

Every write is a read-modify-write of the whole collection:
load snapshot -> append record -> save snapshot. Writes to the same
collection are serialized by a per-collection asyncio.Lock, so concurrent
callers in one event loop never lose each other's records. Reads take no
lock; the store replaces whole blobs, so a read always sees a complete
snapshot.

CRITICAL: Only one process may write to a given store. Locks do not
reach across processes.
"""

import asyncio
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Optional, TypeVar

import pydantic

from src.audit import AuditLogger
from src.ledger.errors import GoalNotFoundError, ValidationError
from src.ledger.ids import MonotonicIdGenerator
from src.ledger.lifecycle import LedgerLifecycle
from src.models.ledger import Goal, Transaction, TransactionType
from src.services.storage import (
    CollectionKeys,
    PersistentStoreAdapter,
    SnapshotDecodeError,
    StorageError,
)


RecordModel = TypeVar("RecordModel", Transaction, Goal)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LedgerRepository:
    """
    Create/list operations over the ledger collections.

    Every operation first makes sure storage is initialized. With
    `auto_initialize=False` the repository instead requires an explicit
    `lifecycle.initialize()` and raises NotInitializedError otherwise.
    """

    def __init__(
        self,
        adapter: PersistentStoreAdapter,
        keys: Optional[CollectionKeys] = None,
        lifecycle: Optional[LedgerLifecycle] = None,
        audit_logger: Optional[AuditLogger] = None,
        id_generator: Optional[Callable[[], str]] = None,
        clock: Optional[Callable[[], datetime]] = None,
        auto_initialize: bool = True,
    ):
        self._adapter = adapter
        self._keys = keys or CollectionKeys.with_prefix()
        self._audit_logger = audit_logger
        self._lifecycle = lifecycle or LedgerLifecycle(
            adapter,
            self._keys,
            audit_logger,
        )
        self._id_generator = id_generator or MonotonicIdGenerator()
        self._clock = clock or _utcnow
        self._auto_initialize = auto_initialize
        self._locks = {key: asyncio.Lock() for key in self._keys.all()}

    @property
    def lifecycle(self) -> LedgerLifecycle:
        return self._lifecycle

    @property
    def keys(self) -> CollectionKeys:
        return self._keys

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    async def add_transaction(
        self,
        amount: Decimal | int | float | str,
        description: str,
        transaction_type: TransactionType | str,
        date: str | datetime,
        category: Optional[str] = None,
    ) -> str:
        """
        Record a transaction and return its new ID.

        Raises:
            ValidationError: If amount is not positive, description is
                blank, type is unknown or date is not ISO-8601
            StorageError: If the store fails
        """
        await self._ready()

        transaction = self._build(
            Transaction,
            "transaction",
            id=self._id_generator(),
            amount=amount,
            description=description,
            type=transaction_type,
            date=date,
            category=category,
        )
        await self._append(
            self._keys.transactions,
            transaction.id,
            transaction.to_record(),
        )

        if self._audit_logger:
            self._audit_logger.log_transaction_added(
                transaction_id=transaction.id,
                transaction_type=transaction.type.value,
                amount=str(transaction.amount),
            )
        return transaction.id

    async def list_transactions(self) -> list[Transaction]:
        """All transactions, newest `date` first. Ties keep insertion order."""
        await self._ready()
        transactions = await self._load(self._keys.transactions, Transaction)
        return sorted(transactions, key=lambda t: t.occurred_at, reverse=True)

    # -------------------------------------------------------------------------
    # Goals
    # -------------------------------------------------------------------------

    async def add_goal(
        self,
        title: str,
        target_amount: Decimal | int | float | str,
        current_amount: Decimal | int | float | str,
        deadline: Any,
    ) -> str:
        """
        Record a savings goal and return its new ID.

        `created_at` is stamped from the repository clock.

        Raises:
            ValidationError: If title is blank, target is not positive,
                current amount is negative or deadline is not a date
            StorageError: If the store fails
        """
        await self._ready()

        goal = self._build(
            Goal,
            "goal",
            id=self._id_generator(),
            title=title,
            target_amount=target_amount,
            current_amount=current_amount,
            deadline=deadline,
            created_at=self._clock(),
        )
        await self._append(self._keys.goals, goal.id, goal.to_record())

        if self._audit_logger:
            self._audit_logger.log_goal_added(
                goal_id=goal.id,
                title=goal.title,
                target_amount=str(goal.target_amount),
            )
        return goal.id

    async def list_goals(self) -> list[Goal]:
        """All goals, soonest deadline first. Ties keep insertion order."""
        await self._ready()
        goals = await self._load(self._keys.goals, Goal)
        return sorted(goals, key=lambda g: g.deadline)

    async def get_goal(self, goal_id: str) -> Goal:
        """
        Raises:
            GoalNotFoundError: If no goal has this ID
        """
        await self._ready()
        for goal in await self._load(self._keys.goals, Goal):
            if goal.id == goal_id:
                return goal
        raise GoalNotFoundError(f"Goal not found: {goal_id}")

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    async def _ready(self) -> None:
        if self._auto_initialize:
            await self._lifecycle.ensure_initialized()
        else:
            self._lifecycle.require_initialized()

    def _build(self, model: type[RecordModel], entity_type: str, **fields) -> RecordModel:
        try:
            return model(**fields)
        except pydantic.ValidationError as e:
            error = ValidationError.from_pydantic(entity_type, e)
            if self._audit_logger:
                self._audit_logger.log_validation_failed(entity_type, error.issues)
            raise error from e

    async def _load(self, key: str, model: type[RecordModel]) -> list[RecordModel]:
        try:
            records = await self._adapter.load_collection(key)
            try:
                return [model.model_validate(record) for record in records]
            except pydantic.ValidationError as e:
                raise SnapshotDecodeError(
                    f"Collection '{key}' holds an invalid record: {e}"
                ) from e
        except StorageError as e:
            if self._audit_logger:
                self._audit_logger.log_storage_error("load_collection", e, key)
            raise

    async def _append(self, key: str, record_id: str, record: dict) -> None:
        async with self._locks[key]:
            try:
                records = await self._adapter.load_collection(key)
                if any(
                    isinstance(existing, dict) and existing.get("id") == record_id
                    for existing in records
                ):
                    raise StorageError(f"Duplicate id {record_id} in '{key}'")
                records.append(record)
                await self._adapter.save_collection(key, records)
            except StorageError as e:
                if self._audit_logger:
                    self._audit_logger.log_storage_error("save_collection", e, key)
                raise
