"""
Data Models Package

This package contains all Pydantic models used by the MoneyFlow ledger.
All stored and derived data must conform to these schemas.
"""

from src.models.ledger import (
    CategoryStatistic,
    CategoryStatisticsReport,
    Goal,
    GoalProgress,
    LedgerTotals,
    MonthlyStatistic,
    MonthlyStatisticsReport,
    StatisticsReport,
    Transaction,
    TransactionType,
)
from src.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "CategoryStatistic",
    "CategoryStatisticsReport",
    "Goal",
    "GoalProgress",
    "LedgerTotals",
    "MonthlyStatistic",
    "MonthlyStatisticsReport",
    "StatisticsReport",
    "Transaction",
    "TransactionType",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
