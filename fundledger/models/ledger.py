"""
Core Data Models for the Three-Fund Ledger

These models define the strict schemas for all ledger data.
They are designed to:
1. Enforce type safety at runtime
2. Stay immutable (every change produces a new value)
3. Serialize to the exact persisted document shape
4. Keep balances traceable back to the transaction log

DESIGN DECISION: Money is Decimal everywhere. Floats only appear at the
JSON boundary so the persisted document keeps plain numbers.
"""

from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
)
from pydantic.alias_generators import to_camel


def _money_to_json(value: Decimal) -> Union[int, float]:
    if value == value.to_integral_value():
        return int(value)
    return float(value)


Money = Annotated[
    Decimal,
    PlainSerializer(_money_to_json, return_type=Union[int, float], when_used="json"),
]


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class FundType(str, Enum):
    """
    The three purpose-tagged funds.

    FREEDOM only ever grows: there is no withdrawal path for it.
    """
    FREEDOM = "FREEDOM"
    DREAM = "DREAM"
    PLAY = "PLAY"


class TransactionType(str, Enum):
    """Direction of a transaction."""
    DEPOSIT = "DEPOSIT"
    WITHDRAWAL = "WITHDRAWAL"


# Balance attribute on LedgerState for each fund
BALANCE_FIELDS = {
    FundType.FREEDOM: "freedom_fund",
    FundType.DREAM: "dream_fund",
    FundType.PLAY: "play_fund",
}


class LedgerModel(BaseModel):
    """
    Shared configuration for persisted ledger models.

    Python attributes are snake_case, the stored document is camelCase.
    Unknown keys from a stored document are kept so they survive a save.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="allow",
    )


# =============================================================================
# TRANSACTIONS
# =============================================================================

class TransactionDraft(BaseModel):
    """What a caller asks the recorder to write. Id and date are added later."""
    model_config = ConfigDict(frozen=True)

    amount: Money = Field(..., gt=0)
    fund_type: FundType
    type: TransactionType
    description: str = ""


class Transaction(LedgerModel):
    """
    A single ledger entry.

    CRITICAL: Transactions are never modified or deleted once recorded.
    """

    id: str = Field(
        ...,
        min_length=1,
        description="Unique across the whole log"
    )
    amount: Money = Field(
        ...,
        gt=0,
        description="Always positive; direction comes from `type`"
    )
    fund_type: FundType
    type: TransactionType = TransactionType.DEPOSIT
    description: str = ""
    date: int = Field(
        ...,
        description="Creation time in epoch milliseconds"
    )

    @property
    def signed_amount(self) -> Decimal:
        if self.type == TransactionType.WITHDRAWAL:
            return -self.amount
        return self.amount


# =============================================================================
# DREAM GOALS
# =============================================================================

class DreamGoal(LedgerModel):
    """
    A named target the dream fund is saving for.

    Achievement is terminal: an achieved goal is never un-achieved
    and never deleted.
    """

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    cost: Money = Field(
        ...,
        gt=0,
        description="Target amount, fixed at creation"
    )
    is_achieved: bool = False
    achieved_date: Optional[int] = Field(
        default=None,
        description="Epoch milliseconds, set only when achieved"
    )

    def achieve(self, when: int) -> "DreamGoal":
        return self.model_copy(update={"is_achieved": True, "achieved_date": when})


# =============================================================================
# PERCENTAGES & ALLOCATIONS
# =============================================================================

class Percentages(LedgerModel):
    """
    Share of each income that goes to each fund.

    The three shares are NOT required to sum to 100.
    See validation.check_percentages for the non-blocking warning.
    """

    freedom: Money = Decimal("50")
    dream: Money = Decimal("40")
    play: Money = Decimal("10")

    def share(self, fund: FundType) -> Decimal:
        return getattr(self, fund.value.lower())

    def with_share(self, fund: FundType, value: Decimal) -> "Percentages":
        return self.model_validate({**self.model_dump(), fund.value.lower(): value})

    @property
    def total(self) -> Decimal:
        return self.freedom + self.dream + self.play


class Allocation(BaseModel):
    """
    Suggested (or user-edited) contribution per fund for one income.

    Nothing forces the three amounts to add up to the income.
    """
    model_config = ConfigDict(frozen=True)

    freedom: Decimal = Decimal("0")
    dream: Decimal = Decimal("0")
    play: Decimal = Decimal("0")

    def amount_for(self, fund: FundType) -> Decimal:
        return getattr(self, fund.value.lower())

    def with_amount(self, fund: FundType, amount: Decimal) -> "Allocation":
        return self.model_validate({**self.model_dump(), fund.value.lower(): amount})

    @property
    def total(self) -> Decimal:
        return self.freedom + self.dream + self.play


# =============================================================================
# ROOT AGGREGATE
# =============================================================================

class LedgerState(LedgerModel):
    """
    The whole ledger: balances, log, goals and percentage config.

    Balances are a cache of the transaction log. Every operation that
    changes a balance prepends the matching transaction in the same
    new state value.
    """

    freedom_fund: Money = Decimal("0")
    dream_fund: Money = Decimal("0")
    play_fund: Money = Decimal("0")
    transactions: tuple[Transaction, ...] = Field(
        default_factory=tuple,
        description="Newest first"
    )
    dream_goals: tuple[DreamGoal, ...] = Field(
        default_factory=tuple,
        description="Insertion order"
    )
    percentages: Percentages = Field(default_factory=Percentages)

    def balance(self, fund: FundType) -> Decimal:
        return getattr(self, BALANCE_FIELDS[fund])

    def derived_balance(self, fund: FundType) -> Decimal:
        """Balance recomputed by folding the transaction log."""
        return sum(
            (t.signed_amount for t in self.transactions if t.fund_type == fund),
            Decimal("0"),
        )

    def drifted_funds(self) -> list[FundType]:
        """Funds whose cached balance disagrees with the log."""
        return [f for f in FundType if self.balance(f) != self.derived_balance(f)]

    @property
    def total_balance(self) -> Decimal:
        return self.freedom_fund + self.dream_fund + self.play_fund

    @property
    def pending_goals(self) -> list[DreamGoal]:
        return [g for g in self.dream_goals if not g.is_achieved]

    @property
    def achieved_goals(self) -> list[DreamGoal]:
        return [g for g in self.dream_goals if g.is_achieved]

    def find_goal(self, goal_id: str) -> Optional[DreamGoal]:
        for goal in self.dream_goals:
            if goal.id == goal_id:
                return goal
        return None

    def can_afford(self, goal: DreamGoal) -> bool:
        return self.dream_fund >= goal.cost

    def to_document(self) -> dict[str, Any]:
        """The JSON-ready persisted document (camelCase keys)."""
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single issue found while checking user input or config."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'unbalanced')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )
