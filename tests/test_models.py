"""
Tests for the Fund Ledger models

Test strategy:
1. Unit tests for individual components (models, allocator, recorder)
2. Flow tests for the store, goals and session against in-memory storage
3. No real user data directory in tests (pytest tmp_path only)
"""

import json
from datetime import timedelta
from decimal import Decimal

import pytest
from pydantic import ValidationError

from fundledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from fundledger.models.ledger import (
    Allocation,
    DreamGoal,
    FundType,
    LedgerState,
    Percentages,
    Transaction,
    TransactionType,
    ValidationIssue,
)


def make_transaction(tx_id, amount, fund, tx_type=TransactionType.DEPOSIT):
    return Transaction(
        id=tx_id,
        amount=Decimal(amount),
        fund_type=fund,
        type=tx_type,
        description="test",
        date=1,
    )


class TestTransactionModel:
    """Tests for Transaction."""

    def test_transaction_creation(self):
        """Test Transaction model creation."""
        tx = make_transaction("t1", "500", FundType.FREEDOM)
        assert tx.amount == Decimal("500")
        assert tx.fund_type == FundType.FREEDOM
        assert tx.type == TransactionType.DEPOSIT

    def test_transaction_rejects_non_positive_amount(self):
        """Test that zero and negative amounts are rejected."""
        with pytest.raises(ValidationError):
            make_transaction("t1", "0", FundType.PLAY)
        with pytest.raises(ValidationError):
            make_transaction("t1", "-5", FundType.PLAY)

    def test_signed_amount(self):
        """Test withdrawals count negative."""
        deposit = make_transaction("t1", "100", FundType.PLAY)
        withdrawal = make_transaction("t2", "30", FundType.PLAY, TransactionType.WITHDRAWAL)
        assert deposit.signed_amount == Decimal("100")
        assert withdrawal.signed_amount == Decimal("-30")

    def test_transaction_is_frozen(self):
        """Test transactions cannot be modified."""
        tx = make_transaction("t1", "100", FundType.PLAY)
        with pytest.raises(ValidationError):
            tx.amount = Decimal("1")

    def test_transaction_accepts_camel_case(self):
        """Test the stored document shape is accepted."""
        tx = Transaction.model_validate({
            "id": "t1",
            "amount": 100,
            "fundType": "DREAM",
            "type": "WITHDRAWAL",
            "description": "x",
            "date": 5,
        })
        assert tx.fund_type == FundType.DREAM
        assert tx.type == TransactionType.WITHDRAWAL


class TestDreamGoalModel:
    """Tests for DreamGoal."""

    def test_goal_defaults(self):
        """Test a new goal is not achieved."""
        goal = DreamGoal(id="g1", name="Laptop", cost=Decimal("500"))
        assert goal.is_achieved is False
        assert goal.achieved_date is None

    def test_goal_achieve_returns_copy(self):
        """Test achieve() leaves the original untouched."""
        goal = DreamGoal(id="g1", name="Laptop", cost=Decimal("500"))
        achieved = goal.achieve(123)
        assert achieved.is_achieved is True
        assert achieved.achieved_date == 123
        assert goal.is_achieved is False

    def test_goal_rejects_zero_cost(self):
        """Test cost must be positive."""
        with pytest.raises(ValidationError):
            DreamGoal(id="g1", name="Laptop", cost=Decimal("0"))


class TestPercentagesAndAllocation:
    """Tests for Percentages and Allocation."""

    def test_default_percentages(self):
        """Test the default 50/40/10 split."""
        p = Percentages()
        assert (p.freedom, p.dream, p.play) == (Decimal("50"), Decimal("40"), Decimal("10"))
        assert p.total == Decimal("100")

    def test_percentages_sum_not_enforced(self):
        """Test an unbalanced split is accepted."""
        p = Percentages(freedom=70, dream=70, play=70)
        assert p.total == Decimal("210")

    def test_share_and_with_share(self):
        """Test per-fund access and replacement."""
        p = Percentages().with_share(FundType.PLAY, Decimal("25"))
        assert p.share(FundType.PLAY) == Decimal("25")
        assert p.share(FundType.FREEDOM) == Decimal("50")

    def test_allocation_override(self):
        """Test a manual override of one contribution."""
        allocation = Allocation(freedom=Decimal("500"), dream=Decimal("400"), play=Decimal("100"))
        edited = allocation.with_amount(FundType.DREAM, Decimal("350"))
        assert edited.amount_for(FundType.DREAM) == Decimal("350")
        assert edited.total == Decimal("950")
        assert allocation.dream == Decimal("400")


class TestLedgerState:
    """Tests for the LedgerState aggregate."""

    def test_default_state(self):
        """Test the empty ledger."""
        state = LedgerState()
        assert state.total_balance == Decimal("0")
        assert state.transactions == ()
        assert state.dream_goals == ()
        assert state.percentages == Percentages()

    def test_derived_balance_and_drift(self):
        """Test balances are checked against the log."""
        state = LedgerState(
            play_fund=Decimal("70"),
            dream_fund=Decimal("10"),
            transactions=(
                make_transaction("t2", "30", FundType.PLAY, TransactionType.WITHDRAWAL),
                make_transaction("t1", "100", FundType.PLAY),
            ),
        )
        assert state.derived_balance(FundType.PLAY) == Decimal("70")
        assert state.drifted_funds() == [FundType.DREAM]

    def test_goal_helpers(self):
        """Test goal lookup and affordability."""
        cheap = DreamGoal(id="g1", name="Book", cost=Decimal("20"))
        pricey = DreamGoal(id="g2", name="Car", cost=Decimal("9000"))
        done = DreamGoal(id="g3", name="Trip", cost=Decimal("5"), is_achieved=True, achieved_date=1)
        state = LedgerState(dream_fund=Decimal("100"), dream_goals=(cheap, pricey, done))

        assert state.find_goal("g2") == pricey
        assert state.find_goal("missing") is None
        assert state.pending_goals == [cheap, pricey]
        assert state.achieved_goals == [done]
        assert state.can_afford(cheap) is True
        assert state.can_afford(pricey) is False

    def test_document_uses_camel_case_and_numbers(self):
        """Test the persisted document shape."""
        state = LedgerState(
            freedom_fund=Decimal("500"),
            play_fund=Decimal("12.5"),
            dream_goals=(DreamGoal(id="g1", name="Laptop", cost=Decimal("500")),),
        )
        document = state.to_document()
        assert document["freedomFund"] == 500
        assert isinstance(document["freedomFund"], int)
        assert document["playFund"] == 12.5
        assert document["dreamGoals"][0]["isAchieved"] is False
        assert document["percentages"] == {"freedom": 50, "dream": 40, "play": 10}
        assert json.loads(state.to_json()) == document

    def test_unknown_fields_survive(self):
        """Test extra keys from a stored document are kept."""
        state = LedgerState.model_validate({"freedomFund": 1, "theme": "dark"})
        assert state.to_document()["theme"] == "dark"

    def test_states_compare_by_value(self):
        """Test equality-based change detection."""
        assert LedgerState() == LedgerState()
        assert LedgerState() != LedgerState(play_fund=Decimal("1"))


class TestValidationIssue:
    """Tests for ValidationIssue."""

    def test_severity_pattern(self):
        """Test only known severities are accepted."""
        ValidationIssue(field="f", issue_type="x", message="m", severity="warning")
        with pytest.raises(ValidationError):
            ValidationIssue(field="f", issue_type="x", message="m", severity="fatal")


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.STATE_LOADED,
            description="Ledger loaded",
        )
        assert event.severity == AuditSeverity.INFO
        assert event.is_user_action is False

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEventBuilder.play_spent("t1", Decimal("30"), Decimal("70"))
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "play_spent"
        assert log_dict["entity_id"] == "t1"
        assert log_dict["details"] == {"amount": "30", "remaining": "70"}
        assert log_dict["is_user_action"] is True

    def test_audit_event_timestamp_is_utc(self):
        """Test event timestamps carry the UTC zone."""
        event = AuditEventBuilder.state_initialized("key")
        assert event.timestamp.utcoffset() == timedelta(0)

    def test_operation_rejected_is_warning(self):
        """Test rejections are logged as warnings with their reason."""
        event = AuditEventBuilder.operation_rejected(
            "realize_goal", "Dream fund too small", {"goal_id": "g1"}
        )
        assert event.severity == AuditSeverity.WARNING
        assert event.error_message == "Dream fund too small"
        assert event.details == {"operation": "realize_goal", "goal_id": "g1"}

    def test_state_corrupt_is_error(self):
        """Test unreadable ledgers are logged as errors."""
        event = AuditEventBuilder.state_corrupt("key", "bad json")
        assert event.event_type == AuditEventType.STATE_CORRUPT
        assert event.severity == AuditSeverity.ERROR


class TestFundTypes:
    """Tests for the fund and transaction enums."""

    def test_values_are_persisted_tokens(self):
        """Test enum values match the stored strings."""
        assert [f.value for f in FundType] == ["FREEDOM", "DREAM", "PLAY"]
        assert TransactionType("WITHDRAWAL") is TransactionType.WITHDRAWAL


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
