"""
Audit Models for the MoneyFlow Ledger

Every write and every failure in the ledger produces an audit event.
This provides:
1. Traceability of what was recorded and when
2. Debugging information when storage misbehaves
3. A record of rejected input

DESIGN DECISION: Audit events are emitted to the structured log only.
They are never stored in the ledger collections.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Lifecycle
    DATABASE_INITIALIZED = "database_initialized"
    COLLECTION_CREATED = "collection_created"

    # Persistence
    TRANSACTION_ADDED = "transaction_added"
    GOAL_ADDED = "goal_added"

    # Failures
    VALIDATION_FAILED = "validation_failed"
    STORAGE_ERROR = "storage_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """
    A single audit event.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'goal', 'collection')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID or storage key of the entity this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_type: Optional[str] = None
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_type": self.error_type,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_added(transaction_id, "expense", "120.50")
        event = AuditEventBuilder.storage_error("save_collection", error)
    """

    @staticmethod
    def database_initialized(created_keys: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATABASE_INITIALIZED,
            entity_type="ledger",
            description="Ledger storage initialized",
            details={
                "created_collections": created_keys,
            },
        )

    @staticmethod
    def collection_created(key: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COLLECTION_CREATED,
            entity_type="collection",
            entity_id=key,
            description=f"Created empty collection: {key}",
        )

    @staticmethod
    def transaction_added(
        transaction_id: str,
        transaction_type: str,
        amount: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction added: {transaction_type} {amount}",
            details={
                "type": transaction_type,
                "amount": amount,
            },
        )

    @staticmethod
    def goal_added(
        goal_id: str,
        title: str,
        target_amount: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.GOAL_ADDED,
            entity_type="goal",
            entity_id=goal_id,
            description=f"Goal added: {title}",
            details={
                "target_amount": target_amount,
            },
        )

    @staticmethod
    def validation_failed(
        entity_type: str,
        issues: list[dict],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type=entity_type,
            description=f"Rejected {entity_type} with {len(issues)} issues",
            details={
                "issues": issues,
            },
        )

    @staticmethod
    def storage_error(
        operation: str,
        error: Exception,
        key: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            entity_type="collection" if key else None,
            entity_id=key,
            description=f"Storage error during {operation}",
            error_type=type(error).__name__,
            error_message=str(error),
            details={
                "operation": operation,
            },
        )
