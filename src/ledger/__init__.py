"""Ledger package: lifecycle, repository and aggregation."""

from src.ledger.aggregation import (
    compute_balance,
    compute_category_statistics,
    compute_goal_progress,
    compute_monthly_statistics,
    compute_totals,
    rank_goals_by_progress,
    summarize_category_statistics,
)
from src.ledger.errors import (
    GoalNotFoundError,
    LedgerError,
    NotInitializedError,
    ValidationError,
)
from src.ledger.ids import MonotonicIdGenerator
from src.ledger.lifecycle import LedgerLifecycle, LifecycleState
from src.ledger.repository import LedgerRepository

__all__ = [
    # Aggregation
    "compute_balance",
    "compute_category_statistics",
    "compute_goal_progress",
    "compute_monthly_statistics",
    "compute_totals",
    "rank_goals_by_progress",
    "summarize_category_statistics",
    # Errors
    "GoalNotFoundError",
    "LedgerError",
    "NotInitializedError",
    "ValidationError",
    # Components
    "LedgerLifecycle",
    "LedgerRepository",
    "LifecycleState",
    "MonotonicIdGenerator",
]
