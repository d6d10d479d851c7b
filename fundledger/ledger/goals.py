"""
Goal Manager

Dream goals and the "realize a dream" withdrawal.

CRITICAL: Achievement is terminal. An achieved goal is never
un-achieved, never realized twice and never deleted.
"""

from typing import Any, Optional

from fundledger.audit import AuditLogger
from fundledger.errors import (
    GoalImmutableError,
    GoalNotFoundError,
    InsufficientFundsError,
    InvalidInputError,
)
from fundledger.ledger.recorder import unique_id
from fundledger.ledger.store import LedgerStore
from fundledger.models.ledger import (
    DreamGoal,
    FundType,
    LedgerState,
    TransactionDraft,
    TransactionType,
)
from fundledger.validation import parse_amount, require_text


REALIZE_DESCRIPTION = "Dream realized: {name}"


class GoalManager:
    """Adds, deletes and realizes dream goals through a LedgerStore."""

    def __init__(
        self,
        store: LedgerStore,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._audit_logger = audit_logger or AuditLogger()

    def _get(self, goal_id: str, operation: str) -> DreamGoal:
        goal = self._store.state.find_goal(goal_id)
        if goal is None:
            self._audit_logger.log_rejected(operation, "Goal not found", {"goal_id": goal_id})
            raise GoalNotFoundError(goal_id)
        return goal

    def add_goal(self, name: Any, cost: Any) -> LedgerState:
        """
        Append a new, unachieved goal.

        Raises:
            InvalidInputError: If name is blank or cost is not a positive number
        """
        try:
            name = require_text(name, "name")
            cost = parse_amount(cost, "cost")
        except InvalidInputError as e:
            self._audit_logger.log_rejected("add_goal", str(e))
            raise

        state = self._store.state
        goal_id, _ = unique_id(self._store.now(), {g.id for g in state.dream_goals})
        goal = DreamGoal(id=goal_id, name=name, cost=cost)

        new_state = state.model_copy(update={"dream_goals": state.dream_goals + (goal,)})
        self._store.save(new_state)
        self._audit_logger.log_goal_added(goal.id, goal.name, goal.cost)
        return new_state

    def delete_goal(self, goal_id: str, confirmed: bool) -> LedgerState:
        """
        Remove an unachieved goal.

        `confirmed` is the user's explicit answer to "delete this goal?".
        Without it nothing happens and the current state is returned.

        Raises:
            GoalNotFoundError: If no goal has this id
            GoalImmutableError: If the goal was already achieved
        """
        goal = self._get(goal_id, "delete_goal")
        if goal.is_achieved:
            self._audit_logger.log_rejected(
                "delete_goal", "Goal already achieved", {"goal_id": goal_id}
            )
            raise GoalImmutableError(goal_id, f"Achieved goal cannot be deleted: {goal.name}")
        if not confirmed:
            return self._store.state

        state = self._store.state
        new_state = state.model_copy(update={
            "dream_goals": tuple(g for g in state.dream_goals if g.id != goal_id)
        })
        self._store.save(new_state)
        self._audit_logger.log_goal_deleted(goal.id, goal.name)
        return new_state

    def realize_goal(self, goal_id: str) -> LedgerState:
        """
        Pay for a goal out of the dream fund and mark it achieved.

        Raises:
            GoalNotFoundError: If no goal has this id
            GoalImmutableError: If the goal was already achieved
            InsufficientFundsError: If the dream fund is below the goal cost
        """
        goal = self._get(goal_id, "realize_goal")
        state = self._store.state

        if goal.is_achieved:
            self._audit_logger.log_rejected(
                "realize_goal", "Goal already achieved", {"goal_id": goal_id}
            )
            raise GoalImmutableError(goal_id)
        if not state.can_afford(goal):
            self._audit_logger.log_rejected(
                "realize_goal",
                f"Dream fund has {state.dream_fund}, goal costs {goal.cost}",
                {"goal_id": goal_id},
            )
            raise InsufficientFundsError(FundType.DREAM, goal.cost, state.dream_fund)

        now = self._store.now()
        draft = TransactionDraft(
            amount=goal.cost,
            fund_type=FundType.DREAM,
            type=TransactionType.WITHDRAWAL,
            description=REALIZE_DESCRIPTION.format(name=goal.name),
        )
        new_state, transaction = self._store.recorder.record(state, draft, now)
        new_state = new_state.model_copy(update={
            "dream_fund": state.dream_fund - goal.cost,
            "dream_goals": tuple(
                g.achieve(now) if g.id == goal.id else g for g in state.dream_goals
            ),
        })

        self._store.save(new_state)
        self._audit_logger.log_goal_realized(goal.id, goal.name, transaction.id, goal.cost)
        return new_state
