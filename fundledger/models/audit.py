"""
Audit Models for the Three-Fund Ledger

Every significant ledger action is logged for audit purposes.
This provides:
1. Traceability of every balance change
2. Debugging information when a stored document is unreadable
3. A record of rejected operations and why they were rejected

DESIGN DECISION: Audit events are emitted, never edited.
The transaction log is the financial record; audit events describe
what happened around it.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Persistence
    STATE_LOADED = "state_loaded"
    STATE_INITIALIZED = "state_initialized"
    STATE_CORRUPT = "state_corrupt"
    STATE_SAVED = "state_saved"
    SAVE_FAILED = "save_failed"
    LEDGER_DRIFT = "ledger_drift"

    # Fund movements
    ALLOCATION_APPLIED = "allocation_applied"
    PLAY_SPENT = "play_spent"
    PERCENTAGES_UPDATED = "percentages_updated"

    # Dream goals
    GOAL_ADDED = "goal_added"
    GOAL_DELETED = "goal_deleted"
    GOAL_REALIZED = "goal_realized"

    # Rejections
    OPERATION_REJECTED = "operation_rejected"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
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
        description="Type of entity (e.g., 'transaction', 'goal', 'state')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
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

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

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
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.play_spent(transaction_id, amount, balance)
        event = AuditEventBuilder.operation_rejected("realize_goal", reason)
    """

    @staticmethod
    def state_loaded(
        transaction_count: int,
        goal_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_LOADED,
            entity_type="state",
            description=f"Ledger loaded with {transaction_count} transactions",
            details={
                "transaction_count": transaction_count,
                "goal_count": goal_count,
            },
        )

    @staticmethod
    def state_initialized(storage_key: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_INITIALIZED,
            entity_type="state",
            description="No saved ledger found, starting from defaults",
            details={"storage_key": storage_key},
        )

    @staticmethod
    def state_corrupt(
        storage_key: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_CORRUPT,
            severity=AuditSeverity.ERROR,
            entity_type="state",
            description="Saved ledger could not be read, falling back to defaults",
            error_message=error_message,
            details={"storage_key": storage_key},
        )

    @staticmethod
    def state_saved(
        storage_key: str,
        transaction_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_SAVED,
            severity=AuditSeverity.DEBUG,
            entity_type="state",
            description="Ledger saved",
            details={
                "storage_key": storage_key,
                "transaction_count": transaction_count,
            },
        )

    @staticmethod
    def save_failed(
        storage_key: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="state",
            description="Ledger could not be saved, change discarded",
            error_message=error_message,
            details={"storage_key": storage_key},
        )

    @staticmethod
    def ledger_drift(drift: dict[str, dict[str, str]]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_DRIFT,
            severity=AuditSeverity.WARNING,
            entity_type="state",
            description=f"Balances disagree with the transaction log for {len(drift)} fund(s)",
            details={"funds": drift},
        )

    @staticmethod
    def allocation_applied(
        transaction_ids: list[str],
        amounts: dict[str, Decimal],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ALLOCATION_APPLIED,
            entity_type="transaction",
            description=f"Income allocated across {len(transaction_ids)} fund(s)",
            details={
                "transaction_ids": transaction_ids,
                "amounts": {fund: str(amount) for fund, amount in amounts.items()},
            },
            is_user_action=True,
        )

    @staticmethod
    def play_spent(
        transaction_id: str,
        amount: Decimal,
        remaining: Decimal,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PLAY_SPENT,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Spent {amount} from the play fund",
            details={
                "amount": str(amount),
                "remaining": str(remaining),
            },
            is_user_action=True,
        )

    @staticmethod
    def percentages_updated(percentages: dict[str, Decimal]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PERCENTAGES_UPDATED,
            entity_type="percentages",
            description="Allocation percentages changed",
            details={fund: str(value) for fund, value in percentages.items()},
            is_user_action=True,
        )

    @staticmethod
    def goal_added(
        goal_id: str,
        name: str,
        cost: Decimal,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.GOAL_ADDED,
            entity_type="goal",
            entity_id=goal_id,
            description=f"Dream goal added: {name}",
            details={"cost": str(cost)},
            is_user_action=True,
        )

    @staticmethod
    def goal_deleted(goal_id: str, name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.GOAL_DELETED,
            entity_type="goal",
            entity_id=goal_id,
            description=f"Dream goal deleted: {name}",
            is_user_action=True,
        )

    @staticmethod
    def goal_realized(
        goal_id: str,
        name: str,
        transaction_id: str,
        cost: Decimal,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.GOAL_REALIZED,
            entity_type="goal",
            entity_id=goal_id,
            description=f"Dream realized: {name}",
            details={
                "transaction_id": transaction_id,
                "cost": str(cost),
            },
            is_user_action=True,
        )

    @staticmethod
    def operation_rejected(
        operation: str,
        reason: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.OPERATION_REJECTED,
            severity=AuditSeverity.WARNING,
            description=f"Operation rejected: {operation}",
            error_message=reason,
            details={"operation": operation, **(details or {})},
            is_user_action=True,
        )
