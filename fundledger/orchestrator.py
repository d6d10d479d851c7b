"""
Main Orchestrator for the Three-Fund Ledger

This module ties the components together behind one facade that a
presentation layer can drive with raw input:
1. Allocation (type income → preview split → adjust → confirm)
2. Play spending (amount + optional note → withdrawal)
3. Dream goals (add, delete with confirmation, realize)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Raw text is parsed here, never inside the store
- Previews never touch the ledger; only confirmations do
- Destructive actions need an explicit confirmation flag

The facade holds only the in-progress allocation draft. The ledger
itself is always read from the store.
"""

from decimal import Decimal
from typing import Any, Optional

import structlog

from fundledger.allocation import compute_allocation
from fundledger.audit import AuditLogger, configure_logging
from fundledger.config import get_settings
from fundledger.errors import InvalidInputError
from fundledger.ledger import GoalManager, LedgerStore
from fundledger.models.ledger import (
    Allocation,
    FundType,
    LedgerState,
    ValidationIssue,
)
from fundledger.services.storage import (
    InMemoryStorage,
    JsonFileStorage,
    StateStorageInterface,
    StorageError,
)
from fundledger.validation import (
    check_percentages,
    parse_amount,
    parse_lenient,
)


class LedgerSession:
    """
    Collaborator-facing facade over the store and goal manager.

    Flow for an income:
    1. preview_allocation("1000") → suggested split
    2. change_percentage / override_contribution → adjusted split
    3. confirm_allocation() → deposits recorded, draft reset

    Every method returning LedgerState returns the store's new current
    state, so callers can compare states by value to detect changes.
    """

    def __init__(
        self,
        store: LedgerStore,
        goals: Optional[GoalManager] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._audit_logger = audit_logger or AuditLogger()
        self._goals = goals or GoalManager(store, self._audit_logger)
        self._income = Decimal("0")
        self._allocation = Allocation()

    @property
    def state(self) -> LedgerState:
        return self._store.state

    @property
    def income(self) -> Decimal:
        return self._income

    @property
    def allocation(self) -> Allocation:
        """Current suggested (possibly user-edited) split."""
        return self._allocation

    # -------------------------------------------------------------------------
    # Allocation
    # -------------------------------------------------------------------------

    def preview_allocation(self, raw_income: Any) -> Allocation:
        """
        Recompute the split for a new income value.

        Unparseable input previews as zero. Negative income is rejected.
        """
        income = parse_lenient(raw_income)
        self._allocation = compute_allocation(income, self.state.percentages)
        self._income = income
        return self._allocation

    def change_percentage(self, fund: FundType, raw: Any) -> LedgerState:
        """Persist a new share for one fund and recompute the preview."""
        new_state = self._store.update_percentages(**{fund.value.lower(): parse_lenient(raw)})
        self._allocation = compute_allocation(self._income, new_state.percentages)
        return new_state

    def override_contribution(self, fund: FundType, raw: Any) -> Allocation:
        """Replace one suggested contribution with the user's own number."""
        self._allocation = self._allocation.with_amount(fund, parse_lenient(raw))
        return self._allocation

    def confirm_allocation(self) -> LedgerState:
        """
        Commit the current split and reset the draft.

        Raises:
            InvalidInputError: If no positive income was entered,
                or no contribution is positive
        """
        if self._income <= 0:
            self._audit_logger.log_rejected("confirm_allocation", "No income entered")
            raise InvalidInputError("Enter an income before allocating", field="income")

        new_state = self._store.apply_allocation(self._allocation)
        self._income = Decimal("0")
        self._allocation = Allocation()
        return new_state

    def percentage_issues(self) -> list[ValidationIssue]:
        """Non-blocking warnings about the current split."""
        return check_percentages(self.state.percentages)

    # -------------------------------------------------------------------------
    # Spending & goals
    # -------------------------------------------------------------------------

    def spend_play(self, raw_amount: Any, description: Any = "") -> LedgerState:
        """
        Spend from the play fund.

        Raises:
            InvalidInputError: If the amount is blank, unparseable or not positive
            InsufficientFundsError: If the play fund is too small
        """
        try:
            amount = parse_amount(raw_amount, "amount")
        except InvalidInputError as e:
            self._audit_logger.log_rejected("spend_play", str(e))
            raise
        return self._store.apply_play_spend(amount, "" if description is None else str(description))

    def add_goal(self, name: Any, raw_cost: Any) -> LedgerState:
        return self._goals.add_goal(name, raw_cost)

    def delete_goal(self, goal_id: str, confirmed: bool) -> LedgerState:
        return self._goals.delete_goal(goal_id, confirmed)

    def realize_goal(self, goal_id: str) -> LedgerState:
        return self._goals.realize_goal(goal_id)


def create_app_components(use_storage: bool = True) -> LedgerSession:
    """
    Factory function to create a ready-to-use session.

    Args:
        use_storage: Whether to persist to the JSON data directory.
                    Set to False for a throwaway in-memory ledger.

    Returns:
        A LedgerSession whose store has already loaded the saved ledger
    """
    settings = get_settings()
    configure_logging(settings.app.effective_log_level)
    audit_logger = AuditLogger()

    storage: StateStorageInterface
    if use_storage:
        try:
            storage = JsonFileStorage(settings.storage.data_dir)
        except StorageError as e:
            # Data directory not usable - continue without persistence
            structlog.get_logger(__name__).warning(
                "storage_unavailable", error=str(e)
            )
            storage = InMemoryStorage()
    else:
        storage = InMemoryStorage()

    store = LedgerStore(
        storage,
        audit_logger=audit_logger,
        storage_key=settings.storage.state_key,
        default_percentages=settings.allocation.default_percentages,
    )
    store.load()

    return LedgerSession(store, audit_logger=audit_logger)
