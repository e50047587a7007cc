"""
Core Data Models for the MoneyFlow Ledger

These models define the schemas for everything the ledger stores or derives.
They are designed to:
1. Reject invalid records before anything is persisted
2. Round-trip through the JSON snapshots without losing precision
3. Accept snapshots written by earlier versions of the app

DESIGN DECISION: Money is always Decimal. Snapshots store amounts as
strings; plain JSON numbers from older snapshots are still accepted.
"""

import re
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# Extended calendar form only; month grouping reads the "YYYY-MM" prefix
CALENDAR_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


# =============================================================================
# ENUMS
# =============================================================================

class TransactionType(str, Enum):
    """Direction of a transaction. Amounts are always positive."""
    INCOME = "income"
    EXPENSE = "expense"


# =============================================================================
# STORED RECORDS
# =============================================================================

class Transaction(BaseModel):
    """
    A single income or expense entry.

    `date` is kept exactly as the caller supplied it. Ordering uses the
    parsed timestamp, while monthly grouping uses the raw "YYYY-MM" prefix.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Unique transaction ID"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Positive amount; direction comes from `type`"
    )
    description: str = Field(
        ...,
        min_length=1,
        description="What the money was for"
    )
    type: TransactionType = Field(
        ...,
        description="income or expense"
    )
    date: str = Field(
        ...,
        description="ISO-8601 date or date-time when the transaction happened"
    )
    category: Optional[str] = Field(
        default=None,
        description="Free-text category; None means uncategorized"
    )

    @field_validator('description')
    @classmethod
    def reject_blank_description(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Description must not be blank")
        return v

    @field_validator('date', mode='before')
    @classmethod
    def coerce_date(cls, v):
        """Accept date/datetime objects and store their ISO form."""
        if isinstance(v, datetime):
            return v.isoformat()
        if isinstance(v, date):
            return v.isoformat()
        return v

    @field_validator('date')
    @classmethod
    def validate_iso_date(cls, v: str) -> str:
        if not CALENDAR_DATE_PATTERN.match(v[:10]):
            raise ValueError(f"Date must be ISO-8601 (YYYY-MM-DD...), got {v!r}")
        try:
            datetime.fromisoformat(v)
        except ValueError:
            raise ValueError(f"Date must be ISO-8601, got {v!r}")
        return v

    @field_validator('category', mode='before')
    @classmethod
    def blank_category_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def occurred_at(self) -> datetime:
        """Parsed `date`; values without an offset are taken as UTC."""
        parsed = datetime.fromisoformat(self.date)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed

    @property
    def month_key(self) -> str:
        """Calendar month as written in `date` ("YYYY-MM")."""
        return self.date[:7]

    @property
    def signed_amount(self) -> Decimal:
        return self.amount if self.type == TransactionType.INCOME else -self.amount

    def to_record(self) -> dict:
        """Snapshot form; absent category is omitted."""
        return self.model_dump(mode="json", exclude_none=True)


class Goal(BaseModel):
    """
    A savings goal.

    CRITICAL: `current_amount` is tracked by hand. Transactions never
    update it.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Unique goal ID"
    )
    title: str = Field(
        ...,
        min_length=1,
        description="What the user is saving for"
    )
    target_amount: Decimal = Field(
        ...,
        gt=0,
        description="Amount to reach"
    )
    current_amount: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Amount saved so far"
    )
    deadline: date = Field(
        ...,
        description="Calendar date the goal should be reached by"
    )
    created_at: datetime = Field(
        ...,
        description="When the goal was created (UTC)"
    )

    @field_validator('title')
    @classmethod
    def reject_blank_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title must not be blank")
        return v

    @field_validator('deadline', mode='before')
    @classmethod
    def truncate_deadline(cls, v):
        """Older snapshots may carry a full timestamp; keep the date part."""
        if isinstance(v, datetime):
            return v.date()
        if isinstance(v, str) and len(v) > 10:
            try:
                return datetime.fromisoformat(v).date()
            except ValueError:
                return v
        return v

    @field_validator('created_at')
    @classmethod
    def ensure_aware(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    def to_record(self) -> dict:
        return self.model_dump(mode="json")


# =============================================================================
# DERIVED VIEWS
# =============================================================================

class LedgerTotals(BaseModel):
    """Income, expense and balance over a set of transactions."""

    total_income: Decimal = Decimal("0")
    total_expense: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")


class MonthlyStatistic(BaseModel):
    """Income and expense totals for one calendar month."""

    month: str = Field(
        ...,
        description="Year and month as 'YYYY-MM'"
    )
    total_income: Decimal = Decimal("0")
    total_expense: Decimal = Decimal("0")

    @property
    def net(self) -> Decimal:
        return self.total_income - self.total_expense


class CategoryStatistic(BaseModel):
    """
    Income and expense totals for one category within a month.

    `type` is the dominant direction: income when the category took in
    more than it paid out, expense otherwise.
    """

    category: Optional[str] = Field(
        default=None,
        description="Category name; None for uncategorized transactions"
    )
    total_income: Decimal = Decimal("0")
    total_expense: Decimal = Decimal("0")
    type: TransactionType

    @property
    def is_uncategorized(self) -> bool:
        return self.category is None


class MonthlyStatisticsReport(BaseModel):
    """Month-by-month history, most recent month first."""

    kind: Literal["monthly"] = "monthly"
    months: list[MonthlyStatistic] = Field(default_factory=list)


class CategoryStatisticsReport(BaseModel):
    """Per-category breakdown for a single month."""

    kind: Literal["category"] = "category"
    year: int
    month: int
    categories: list[CategoryStatistic] = Field(default_factory=list)
    total_income: Decimal = Decimal("0")
    total_expense: Decimal = Decimal("0")

    @property
    def period(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


StatisticsReport = Annotated[
    Union[MonthlyStatisticsReport, CategoryStatisticsReport],
    Field(discriminator="kind"),
]


class GoalProgress(BaseModel):
    """
    Projections for one goal as of a given day.

    Nothing is clamped: progress can pass 100, remaining and days_left
    can go negative.
    """

    goal_id: str
    progress_percent: Decimal
    remaining: Decimal
    days_left: int
    daily_pace_required: int

    @property
    def is_achieved(self) -> bool:
        return self.remaining <= 0
