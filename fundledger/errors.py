"""
Ledger Error Kinds

Every ledger error is recoverable: the operation is rejected,
the state is left exactly as it was, and the caller decides
how to tell the user.
"""

from decimal import Decimal
from typing import Optional

from fundledger.models.ledger import FundType


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class InsufficientFundsError(LedgerError):
    """Withdrawal is not covered by the fund balance."""

    def __init__(
        self,
        fund: FundType,
        requested: Decimal,
        available: Decimal,
        message: Optional[str] = None,
    ):
        self.fund = fund
        self.requested = requested
        self.available = available
        super().__init__(
            message
            or f"{fund.value} fund has {available}, cannot withdraw {requested}"
        )


class GoalNotFoundError(LedgerError):
    """No dream goal with the given id."""

    def __init__(self, goal_id: str):
        self.goal_id = goal_id
        super().__init__(f"Dream goal not found: {goal_id}")


class GoalImmutableError(LedgerError):
    """Achieved goals can no longer be changed or removed."""

    def __init__(self, goal_id: str, message: Optional[str] = None):
        self.goal_id = goal_id
        super().__init__(message or f"Dream goal already achieved: {goal_id}")


class InvalidInputError(LedgerError):
    """Raw input could not be accepted (blank, unparseable, non-positive)."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class PersistenceCorruptError(LedgerError):
    """The stored ledger document is malformed."""
    pass
