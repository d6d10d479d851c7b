"""
Percentage Allocator

Turns one income amount into a suggested contribution per fund.

DESIGN DECISION: This is a pure preview. It never touches the ledger.
The suggestion is recomputed from the FULL income every time the income
or any percentage changes, so the three numbers are always consistent
with each other.

The three contributions are not forced to add up to the income:
with percentages that don't sum to 100, or after rounding, they won't.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from fundledger.errors import InvalidInputError
from fundledger.models.ledger import Allocation, FundType, Percentages


HUNDRED = Decimal("100")
WHOLE = Decimal("1")


def round_half_up(value: Decimal) -> Decimal:
    """Round to a whole amount, halves going up (2.5 -> 3)."""
    return value.quantize(WHOLE, rounding=ROUND_HALF_UP)


def contribution(income: Decimal, share: Decimal) -> Decimal:
    return round_half_up(income * share / HUNDRED)


def compute_allocation(income: Any, percentages: Percentages) -> Allocation:
    """
    Split an income across the three funds.

    Args:
        income: Non-negative income amount
        percentages: Share per fund (not required to sum to 100)

    Returns:
        Allocation with round(income * share / 100) per fund

    Raises:
        InvalidInputError: If income is negative
    """
    income = Decimal(str(income)) if not isinstance(income, Decimal) else income
    if income < 0:
        raise InvalidInputError("Income cannot be negative", field="income")

    return Allocation(**{
        fund.value.lower(): contribution(income, percentages.share(fund))
        for fund in FundType
    })
