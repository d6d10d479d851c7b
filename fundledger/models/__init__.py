"""
Data Models Package

This package contains all Pydantic models used by the ledger.
All data flowing through the system must conform to these schemas.
"""

from fundledger.models.ledger import (
    BALANCE_FIELDS,
    Allocation,
    DreamGoal,
    FundType,
    LedgerState,
    Percentages,
    Transaction,
    TransactionDraft,
    TransactionType,
    ValidationIssue,
)
from fundledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "BALANCE_FIELDS",
    "Allocation",
    "DreamGoal",
    "FundType",
    "LedgerState",
    "Percentages",
    "Transaction",
    "TransactionDraft",
    "TransactionType",
    "ValidationIssue",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
