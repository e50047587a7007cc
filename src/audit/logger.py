"""
Audit Logger

DESIGN DECISION: Every ledger write and every failure is logged.
This provides:
1. Traceability of what was recorded
2. Debugging capability when storage fails

Logging never replaces error handling. Components log an event and then
re-raise; the caller still sees the exception.
"""

import logging
from typing import Optional

import structlog

from src.models.audit import AuditEvent, AuditEventBuilder


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_log_level(level: str) -> None:
    """Set the stdlib level that structlog's level filter honours."""
    logging.basicConfig(format="%(message)s")
    logging.getLogger("moneyflow").setLevel(level)


class AuditLogger:
    """
    Central audit logging service.

    Writes events to the structured local log.
    """

    def __init__(self, logger_name: str = "moneyflow.audit"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event at the level matching its severity."""
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif event.severity.value == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def log_database_initialized(self, created_keys: list[str]) -> None:
        self.log(AuditEventBuilder.database_initialized(created_keys))

    def log_collection_created(self, key: str) -> None:
        self.log(AuditEventBuilder.collection_created(key))

    def log_transaction_added(
        self,
        transaction_id: str,
        transaction_type: str,
        amount: str,
    ) -> None:
        """Log a persisted transaction."""
        self.log(AuditEventBuilder.transaction_added(
            transaction_id=transaction_id,
            transaction_type=transaction_type,
            amount=amount,
        ))

    def log_goal_added(
        self,
        goal_id: str,
        title: str,
        target_amount: str,
    ) -> None:
        """Log a persisted goal."""
        self.log(AuditEventBuilder.goal_added(
            goal_id=goal_id,
            title=title,
            target_amount=target_amount,
        ))

    def log_validation_failed(self, entity_type: str, issues: list[dict]) -> None:
        """Log rejected input."""
        self.log(AuditEventBuilder.validation_failed(entity_type, issues))

    def log_storage_error(
        self,
        operation: str,
        error: Exception,
        key: Optional[str] = None,
    ) -> None:
        """Log a storage failure."""
        self.log(AuditEventBuilder.storage_error(operation, error, key))
