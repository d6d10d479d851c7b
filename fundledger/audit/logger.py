"""
Audit Logger

DESIGN DECISION: Every significant ledger action is logged.
This provides:
1. Traceability of every balance change
2. Debugging capability when a saved ledger cannot be read
3. A trail of rejected operations

The audit logger:
- Is synchronous, like the rest of the ledger
- Never raises (a logging problem must not undo a ledger change)
- Emits structured JSON through structlog
"""

import logging
from decimal import Decimal
from typing import Optional

import structlog

from fundledger.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


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


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output through stdlib logging at the given level."""
    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger().setLevel(level)


class AuditLogger:
    """
    Central audit logging service.

    Builds AuditEvents with AuditEventBuilder and writes them to the
    structured local log at the level matching their severity.
    """

    def __init__(self, name: str = "fundledger.audit"):
        self._logger = structlog.get_logger(name)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event."""
        log_dict = event.to_log_dict()
        event_name = log_dict.pop("event_type")

        if event.severity == AuditSeverity.ERROR:
            self._logger.error(event_name, **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning(event_name, **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug(event_name, **log_dict)
        else:
            self._logger.info(event_name, **log_dict)

    def log_state_loaded(self, transaction_count: int, goal_count: int) -> None:
        self.log(AuditEventBuilder.state_loaded(transaction_count, goal_count))

    def log_state_initialized(self, storage_key: str) -> None:
        self.log(AuditEventBuilder.state_initialized(storage_key))

    def log_state_corrupt(self, storage_key: str, error_message: str) -> None:
        """Log an unreadable saved ledger (the caller falls back to defaults)."""
        self.log(AuditEventBuilder.state_corrupt(storage_key, error_message))

    def log_state_saved(self, storage_key: str, transaction_count: int) -> None:
        self.log(AuditEventBuilder.state_saved(storage_key, transaction_count))

    def log_save_failed(self, storage_key: str, error_message: str) -> None:
        self.log(AuditEventBuilder.save_failed(storage_key, error_message))

    def log_ledger_drift(self, drift: dict[str, dict[str, str]]) -> None:
        self.log(AuditEventBuilder.ledger_drift(drift))

    def log_allocation_applied(
        self,
        transaction_ids: list[str],
        amounts: dict[str, Decimal],
    ) -> None:
        self.log(AuditEventBuilder.allocation_applied(transaction_ids, amounts))

    def log_play_spent(
        self,
        transaction_id: str,
        amount: Decimal,
        remaining: Decimal,
    ) -> None:
        self.log(AuditEventBuilder.play_spent(transaction_id, amount, remaining))

    def log_percentages_updated(self, percentages: dict[str, Decimal]) -> None:
        self.log(AuditEventBuilder.percentages_updated(percentages))

    def log_goal_added(self, goal_id: str, name: str, cost: Decimal) -> None:
        self.log(AuditEventBuilder.goal_added(goal_id, name, cost))

    def log_goal_deleted(self, goal_id: str, name: str) -> None:
        self.log(AuditEventBuilder.goal_deleted(goal_id, name))

    def log_goal_realized(
        self,
        goal_id: str,
        name: str,
        transaction_id: str,
        cost: Decimal,
    ) -> None:
        self.log(AuditEventBuilder.goal_realized(goal_id, name, transaction_id, cost))

    def log_rejected(
        self,
        operation: str,
        reason: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log an operation that was refused and left the ledger unchanged."""
        self.log(AuditEventBuilder.operation_rejected(operation, reason, details))
