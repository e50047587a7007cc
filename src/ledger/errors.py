"""Ledger error kinds. Storage failures live in src.services.storage."""

from typing import Optional

import pydantic


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class ValidationError(LedgerError):
    """
    Input to a create operation was rejected. Nothing was persisted.

    `issues` holds one {"field", "message"} dict per problem.
    """

    def __init__(self, message: str, issues: Optional[list[dict]] = None):
        super().__init__(message)
        self.issues = issues or []

    @classmethod
    def from_pydantic(
        cls,
        entity_type: str,
        error: pydantic.ValidationError,
    ) -> "ValidationError":
        issues = [
            {
                "field": ".".join(str(part) for part in err["loc"]) or entity_type,
                "message": err["msg"],
            }
            for err in error.errors()
        ]
        summary = "; ".join(f"{i['field']}: {i['message']}" for i in issues)
        return cls(f"Invalid {entity_type}: {summary}", issues)


class NotInitializedError(LedgerError):
    """A ledger operation ran before storage was initialized."""
    pass


class GoalNotFoundError(LedgerError, LookupError):
    """No goal with the requested ID exists."""
    pass
