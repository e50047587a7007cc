"""
Aggregation Engine

Pure functions over in-memory transactions and goals. Nothing here touches
storage; callers pass in what the repository returned.

Months are taken from the first seven characters of the stored `date`
("YYYY-MM") with no timezone adjustment, so a transaction lands in the
month the user wrote down.
"""

import math
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from src.ledger.errors import ValidationError
from src.models.ledger import (
    CategoryStatistic,
    CategoryStatisticsReport,
    Goal,
    GoalProgress,
    LedgerTotals,
    MonthlyStatistic,
    Transaction,
    TransactionType,
)


ZERO = Decimal("0")
HUNDRED = Decimal("100")


def compute_totals(transactions: Iterable[Transaction]) -> LedgerTotals:
    total_income = ZERO
    total_expense = ZERO
    for tx in transactions:
        if tx.type == TransactionType.INCOME:
            total_income += tx.amount
        else:
            total_expense += tx.amount
    return LedgerTotals(
        total_income=total_income,
        total_expense=total_expense,
        balance=total_income - total_expense,
    )


def compute_balance(transactions: Iterable[Transaction]) -> Decimal:
    """Sum of income minus sum of expenses."""
    return compute_totals(transactions).balance


def compute_monthly_statistics(
    transactions: Iterable[Transaction],
) -> list[MonthlyStatistic]:
    """
    Income and expense per calendar month, most recent month first.

    Only months that have transactions appear; gaps are not zero-filled.
    """
    buckets: dict[str, dict[str, Decimal]] = defaultdict(
        lambda: {"income": ZERO, "expense": ZERO}
    )
    for tx in transactions:
        buckets[tx.month_key][tx.type.value] += tx.amount

    return [
        MonthlyStatistic(
            month=month,
            total_income=totals["income"],
            total_expense=totals["expense"],
        )
        for month, totals in sorted(buckets.items(), reverse=True)
    ]


def _month_prefix(year: int, month: int) -> str:
    for field, value in (("year", year), ("month", month)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(
                f"{field.capitalize()} must be an integer, got {value!r}",
                [{"field": field, "message": "must be an integer"}],
            )
    if not 1 <= month <= 12:
        raise ValidationError(
            f"Month must be between 1 and 12, got {month}",
            [{"field": "month", "message": "out of range"}],
        )
    if not 1 <= year <= 9999:
        raise ValidationError(
            f"Year must be between 1 and 9999, got {year}",
            [{"field": "year", "message": "out of range"}],
        )
    return f"{year:04d}-{month:02d}"


def _category_sort_key(stat: CategoryStatistic) -> tuple:
    # Named categories alphabetically, uncategorized last
    name = stat.category or ""
    return (stat.category is None, name.casefold(), name)


def compute_category_statistics(
    transactions: Iterable[Transaction],
    year: int,
    month: int,
) -> list[CategoryStatistic]:
    """
    Per-category income and expense for one month.

    Transactions without a category are grouped under `category=None`.

    Raises:
        ValidationError: If month or year is out of range
    """
    prefix = _month_prefix(year, month)

    buckets: dict[Optional[str], dict[str, Decimal]] = defaultdict(
        lambda: {"income": ZERO, "expense": ZERO}
    )
    for tx in transactions:
        if tx.month_key == prefix:
            buckets[tx.category][tx.type.value] += tx.amount

    stats = [
        CategoryStatistic(
            category=category,
            total_income=totals["income"],
            total_expense=totals["expense"],
            type=(
                TransactionType.INCOME
                if totals["income"] > totals["expense"]
                else TransactionType.EXPENSE
            ),
        )
        for category, totals in buckets.items()
    ]
    return sorted(stats, key=_category_sort_key)


def summarize_category_statistics(
    transactions: Iterable[Transaction],
    year: int,
    month: int,
) -> CategoryStatisticsReport:
    """Category breakdown for a month plus the month's totals."""
    categories = compute_category_statistics(transactions, year, month)
    return CategoryStatisticsReport(
        year=year,
        month=month,
        categories=categories,
        total_income=sum((c.total_income for c in categories), ZERO),
        total_expense=sum((c.total_expense for c in categories), ZERO),
    )


def progress_percent(goal: Goal) -> Decimal:
    return goal.current_amount / goal.target_amount * HUNDRED


def compute_goal_progress(goal: Goal, today: Optional[date] = None) -> GoalProgress:
    """
    Progress, remaining amount, days left and required daily saving.

    The daily pace divides by at least one day, so a deadline that is
    today or already past asks for the whole remainder at once.
    """
    today = today or date.today()
    remaining = goal.target_amount - goal.current_amount
    days_left = (goal.deadline - today).days

    return GoalProgress(
        goal_id=goal.id,
        progress_percent=progress_percent(goal),
        remaining=remaining,
        days_left=days_left,
        daily_pace_required=math.ceil(remaining / max(days_left, 1)),
    )


def rank_goals_by_progress(goals: Sequence[Goal]) -> list[Goal]:
    """Goals closest to completion first. Ties keep their input order."""
    return sorted(goals, key=progress_percent, reverse=True)
