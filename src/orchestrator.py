"""
Main Orchestrator for the MoneyFlow Ledger

This module ties the components together and exposes the operations that
screens and scripts call:
1. Records (init, add/list transactions, add/list goals)
2. Statistics (balance, monthly history, per-category month breakdown)
3. Goal projections

DESIGN DECISION: The old single statistics call that changed its return
shape depending on its arguments is split in two. get_monthly_statistics()
always returns a MonthlyStatisticsReport and get_category_statistics()
always returns a CategoryStatisticsReport.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from src.audit import AuditLogger, configure_log_level
from src.config import Settings, get_settings
from src.ledger import (
    LedgerLifecycle,
    LedgerRepository,
    compute_goal_progress,
    compute_monthly_statistics,
    compute_totals,
    rank_goals_by_progress,
    summarize_category_statistics,
)
from src.models.ledger import (
    CategoryStatisticsReport,
    Goal,
    GoalProgress,
    LedgerTotals,
    MonthlyStatisticsReport,
    Transaction,
    TransactionType,
)
from src.services.storage import (
    CollectionKeys,
    FileKeyValueStore,
    GoogleSheetsClient,
    GoogleSheetsKeyValueStore,
    InMemoryKeyValueStore,
    KeyValueStore,
    PersistentStoreAdapter,
)


class LedgerService:
    """
    Entry point for callers of the ledger.

    Storage is initialized on demand by every operation; calling
    init_database() at startup just makes it happen up front.
    """

    def __init__(self, repository: LedgerRepository):
        self._repository = repository

    @property
    def repository(self) -> LedgerRepository:
        return self._repository

    @property
    def lifecycle(self) -> LedgerLifecycle:
        return self._repository.lifecycle

    async def init_database(self) -> None:
        await self.lifecycle.initialize()

    # Records

    async def add_transaction(
        self,
        amount: Decimal | int | float | str,
        description: str,
        transaction_type: TransactionType | str,
        date: str | datetime,
        category: Optional[str] = None,
    ) -> str:
        return await self._repository.add_transaction(
            amount=amount,
            description=description,
            transaction_type=transaction_type,
            date=date,
            category=category,
        )

    async def list_transactions(self) -> list[Transaction]:
        return await self._repository.list_transactions()

    async def add_goal(
        self,
        title: str,
        target_amount: Decimal | int | float | str,
        current_amount: Decimal | int | float | str,
        deadline: Any,
    ) -> str:
        return await self._repository.add_goal(
            title=title,
            target_amount=target_amount,
            current_amount=current_amount,
            deadline=deadline,
        )

    async def list_goals(self) -> list[Goal]:
        return await self._repository.list_goals()

    async def list_goals_by_progress(self) -> list[Goal]:
        """Goals closest to completion first."""
        return rank_goals_by_progress(await self._repository.list_goals())

    # Statistics

    async def get_balance(self) -> LedgerTotals:
        return compute_totals(await self._repository.list_transactions())

    async def get_monthly_statistics(self) -> MonthlyStatisticsReport:
        """Full month-by-month history, most recent month first."""
        transactions = await self._repository.list_transactions()
        return MonthlyStatisticsReport(
            months=compute_monthly_statistics(transactions)
        )

    async def get_category_statistics(
        self,
        year: int,
        month: int,
    ) -> CategoryStatisticsReport:
        """
        Per-category breakdown for one month.

        Raises:
            ValidationError: If month or year is out of range
        """
        transactions = await self._repository.list_transactions()
        return summarize_category_statistics(transactions, year, month)

    # Goals

    async def get_goal_progress(
        self,
        goal_id: str,
        today: Optional[date] = None,
    ) -> GoalProgress:
        """
        Raises:
            GoalNotFoundError: If no goal has this ID
        """
        goal = await self._repository.get_goal(goal_id)
        return compute_goal_progress(goal, today)


def create_store(settings: Settings) -> KeyValueStore:
    """Build the key-value store selected by MONEYFLOW_STORAGE_BACKEND."""
    storage = settings.storage
    if storage.backend == "memory":
        return InMemoryKeyValueStore()
    if storage.backend == "google_sheets":
        return GoogleSheetsKeyValueStore(GoogleSheetsClient(settings.google_sheets))
    return FileKeyValueStore(storage.data_dir)


def create_ledger_service(
    settings: Optional[Settings] = None,
    store: Optional[KeyValueStore] = None,
) -> LedgerService:
    """
    Factory function to create all ledger components.

    Args:
        settings: Settings to use; defaults to get_settings()
        store: Explicit key-value store. When omitted, the backend named
               in the storage settings is built.

    Returns:
        A LedgerService sharing one lifecycle, adapter and audit logger
    """
    settings = settings or get_settings()
    configure_log_level(settings.app.log_level)

    audit_logger = AuditLogger()
    adapter = PersistentStoreAdapter(store or create_store(settings))
    keys = CollectionKeys.with_prefix(settings.storage.key_prefix)
    lifecycle = LedgerLifecycle(adapter, keys, audit_logger)

    repository = LedgerRepository(
        adapter,
        keys=keys,
        lifecycle=lifecycle,
        audit_logger=audit_logger,
    )
    return LedgerService(repository)
