"""Tests for dream goals."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from fundledger.errors import (
    GoalImmutableError,
    GoalNotFoundError,
    InsufficientFundsError,
    InvalidInputError,
)
from fundledger.ledger import GoalManager
from fundledger.ledger.goals import REALIZE_DESCRIPTION
from fundledger.models.ledger import Allocation, FundType, TransactionType


def fund_dream(store, amount):
    store.apply_allocation(Allocation(dream=Decimal(amount)))


class TestAddGoal:
    """Tests for GoalManager.add_goal."""

    def test_add_goal(self, goals, store):
        """Test a new goal is appended unachieved."""
        state = goals.add_goal("Laptop", "500")
        goal = state.dream_goals[-1]

        assert goal.name == "Laptop"
        assert goal.cost == Decimal("500")
        assert goal.is_achieved is False
        assert store.state == state

    def test_goals_keep_insertion_order(self, goals):
        """Test goals are listed in the order they were added."""
        goals.add_goal("Laptop", 500)
        state = goals.add_goal("Bike", 300)
        assert [g.name for g in state.dream_goals] == ["Laptop", "Bike"]

    def test_ids_unique_in_same_millisecond(self, goals):
        """Test goals added at the same instant get distinct ids."""
        goals.add_goal("A", 1)
        goals.add_goal("B", 1)
        state = goals.add_goal("C", 1)
        assert len({g.id for g in state.dream_goals}) == 3

    @pytest.mark.parametrize("name,cost,field", [
        ("", "500", "name"),
        ("   ", "500", "name"),
        ("Laptop", "", "cost"),
        ("Laptop", "abc", "cost"),
        ("Laptop", "0", "cost"),
        ("Laptop", "-10", "cost"),
    ])
    def test_invalid_input_rejected(self, goals, store, name, cost, field):
        """Test blank names and non-positive costs are refused."""
        before = store.state
        with pytest.raises(InvalidInputError) as exc_info:
            goals.add_goal(name, cost)
        assert exc_info.value.field == field
        assert store.state == before

    def test_does_not_move_money(self, goals, store):
        """Test adding a goal never touches balances or the log."""
        fund_dream(store, "100")
        before = store.state
        state = goals.add_goal("Laptop", "500")
        assert state.transactions == before.transactions
        assert state.dream_fund == before.dream_fund


class TestRealizeGoal:
    """Tests for GoalManager.realize_goal."""

    def test_realize_affordable_goal(self, goals, store, clock):
        """Test a 400 goal paid from a dream fund of 400."""
        fund_dream(store, "400")
        goal_id = goals.add_goal("Laptop", "400").dream_goals[0].id
        clock.advance(5)

        state = goals.realize_goal(goal_id)

        assert state.dream_fund == Decimal("0")
        goal = state.find_goal(goal_id)
        assert goal.is_achieved is True
        assert goal.achieved_date == clock.now

        newest = state.transactions[0]
        assert newest.type == TransactionType.WITHDRAWAL
        assert newest.fund_type == FundType.DREAM
        assert newest.amount == Decimal("400")
        assert newest.description == REALIZE_DESCRIPTION.format(name="Laptop")
        assert state.drifted_funds() == []

    def test_unaffordable_goal_rejected(self, goals, store):
        """Test a 500 goal with a dream fund of 400 is refused."""
        fund_dream(store, "400")
        goal_id = goals.add_goal("Laptop", "500").dream_goals[0].id
        before = store.state

        with pytest.raises(InsufficientFundsError) as exc_info:
            goals.realize_goal(goal_id)
        assert exc_info.value.fund == FundType.DREAM
        assert exc_info.value.requested == Decimal("500")
        assert exc_info.value.available == Decimal("400")
        assert store.state == before

    def test_realize_twice_rejected(self, goals, store):
        """Test an achieved goal cannot be paid for again."""
        fund_dream(store, "1000")
        goal_id = goals.add_goal("Laptop", "400").dream_goals[0].id
        goals.realize_goal(goal_id)
        before = store.state

        with pytest.raises(GoalImmutableError):
            goals.realize_goal(goal_id)
        assert store.state == before
        assert store.state.dream_fund == Decimal("600")

    def test_unknown_goal(self, goals):
        """Test realizing a missing goal raises GoalNotFoundError."""
        with pytest.raises(GoalNotFoundError) as exc_info:
            goals.realize_goal("nope")
        assert exc_info.value.goal_id == "nope"

    def test_other_funds_untouched(self, goals, store):
        """Test realizing a goal only moves the dream fund."""
        store.apply_allocation(Allocation(
            freedom=Decimal("500"), dream=Decimal("400"), play=Decimal("100")
        ))
        goal_id = goals.add_goal("Laptop", "400").dream_goals[0].id
        state = goals.realize_goal(goal_id)
        assert state.freedom_fund == Decimal("500")
        assert state.play_fund == Decimal("100")

    def test_audited(self, store):
        """Test realization is logged with the withdrawal id."""
        audit = MagicMock()
        manager = GoalManager(store, audit_logger=audit)
        fund_dream(store, "400")
        goal_id = manager.add_goal("Laptop", "400").dream_goals[0].id

        state = manager.realize_goal(goal_id)

        audit.log_goal_realized.assert_called_once_with(
            goal_id, "Laptop", state.transactions[0].id, Decimal("400")
        )


class TestDeleteGoal:
    """Tests for GoalManager.delete_goal."""

    def test_confirmed_delete(self, goals, store):
        """Test a confirmed delete removes the goal."""
        goal_id = goals.add_goal("Laptop", "500").dream_goals[0].id
        state = goals.delete_goal(goal_id, confirmed=True)
        assert state.dream_goals == ()
        assert store.state == state

    def test_unconfirmed_delete_is_noop(self, goals, store):
        """Test nothing happens without confirmation."""
        goal_id = goals.add_goal("Laptop", "500").dream_goals[0].id
        before = store.state
        assert goals.delete_goal(goal_id, confirmed=False) == before
        assert store.state == before

    def test_achieved_goal_cannot_be_deleted(self, goals, store):
        """Test achieved goals are immutable even when confirmed."""
        fund_dream(store, "400")
        goal_id = goals.add_goal("Laptop", "400").dream_goals[0].id
        goals.realize_goal(goal_id)

        with pytest.raises(GoalImmutableError):
            goals.delete_goal(goal_id, confirmed=True)
        assert store.state.find_goal(goal_id).is_achieved is True

    def test_unknown_goal(self, goals):
        """Test deleting a missing goal raises GoalNotFoundError."""
        with pytest.raises(GoalNotFoundError):
            goals.delete_goal("nope", confirmed=True)

    def test_delete_keeps_other_goals(self, goals):
        """Test only the chosen goal is removed."""
        goals.add_goal("Laptop", 500)
        state = goals.add_goal("Bike", 300)
        laptop_id = state.dream_goals[0].id

        state = goals.delete_goal(laptop_id, confirmed=True)
        assert [g.name for g in state.dream_goals] == ["Bike"]
