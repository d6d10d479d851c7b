"""
Input Validation

Raw user input arrives as text (or loosely typed numbers) from the
presentation layer. This module turns it into Decimals and clean strings.

Three parsing modes:

STRICT (parse_amount, require_text):
- Used right before a ledger mutation
- Anything blank, unparseable or out of range raises InvalidInputError

EXACT (exact_decimal):
- Used by the store on every number it is about to persist
- Money is written to JSON as a plain number, so only values that
  survive the trip through a float are accepted

LENIENT (parse_lenient):
- Used for live previews: typing in the income box, editing a
  percentage, overriding one suggested contribution
- Anything unparseable counts as zero, so the preview never breaks

IMPORTANT: Percentage checks NEVER reject or fix anything.
They only report warnings for the user to look at.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from fundledger.errors import InvalidInputError
from fundledger.models.ledger import FundType, Percentages, ValidationIssue


HUNDRED = Decimal("100")

# Money keeps whole cents at most
MONEY_PLACES = 2
# A float keeps any decimal of up to 15 significant digits exactly
MAX_SIGNIFICANT_DIGITS = 15


def _to_decimal(raw: Any) -> Decimal:
    """Convert numbers or numeric text to a finite Decimal, or raise ValueError."""
    if isinstance(raw, bool):
        raise ValueError("booleans are not amounts")
    if isinstance(raw, Decimal):
        value = raw
    elif isinstance(raw, (int, float)):
        value = Decimal(str(raw))
    elif isinstance(raw, str):
        text = raw.strip()
        if not text:
            raise ValueError("empty")
        try:
            value = Decimal(text)
        except InvalidOperation as e:
            raise ValueError(f"not a number: {raw!r}") from e
    else:
        raise ValueError(f"unsupported type: {type(raw).__name__}")

    if not value.is_finite():
        raise ValueError(f"not a finite number: {raw!r}")
    return value


def exact_decimal(raw: Any, field: str, places: Optional[int] = MONEY_PLACES) -> Decimal:
    """
    Return raw as a Decimal that is stored and reloaded without change.

    Args:
        raw: Number or numeric text
        field: Reported on the error
        places: Maximum decimal places, None for no limit

    Raises:
        InvalidInputError: non-finite, too many decimal places,
            or more than MAX_SIGNIFICANT_DIGITS digits
    """
    try:
        value = _to_decimal(raw)
    except ValueError as e:
        raise InvalidInputError(f"{field} must be a number ({e})", field=field) from e

    _, digits, exponent = value.normalize().as_tuple()
    if places is not None and exponent < -places:
        raise InvalidInputError(
            f"{field} allows at most {places} decimal places", field=field
        )
    if len(digits) > MAX_SIGNIFICANT_DIGITS:
        raise InvalidInputError(
            f"{field} allows at most {MAX_SIGNIFICANT_DIGITS} significant digits",
            field=field,
        )
    return value


def parse_amount(raw: Any, field: str, allow_zero: bool = False) -> Decimal:
    """
    Strictly parse a money amount.

    Raises:
        InvalidInputError: blank, unparseable, negative, zero (unless
            allow_zero) or over-precise input
    """
    value = exact_decimal(raw, field)

    if value < 0 or (value == 0 and not allow_zero):
        raise InvalidInputError(f"{field} must be greater than zero", field=field)
    return value


def parse_lenient(raw: Any) -> Decimal:
    """Parse for previews: anything that is not a finite number is zero."""
    try:
        return _to_decimal(raw)
    except ValueError:
        return Decimal("0")


def require_text(raw: Any, field: str) -> str:
    """Return stripped text, rejecting blank input."""
    text = "" if raw is None else str(raw).strip()
    if not text:
        raise InvalidInputError(f"{field} is required", field=field)
    return text


def check_percentages(percentages: Percentages) -> list[ValidationIssue]:
    """
    Report non-blocking issues with the percentage split.

    An unbalanced split is allowed; the user may want it.
    """
    issues = []

    if percentages.total != HUNDRED:
        issues.append(ValidationIssue(
            field="percentages",
            issue_type="unbalanced",
            message=f"Percentages add up to {percentages.total}%, not 100%",
            severity="warning",
            suggested_fix="Part of each income will be left unallocated or over-allocated",
        ))

    for fund in FundType:
        share = percentages.share(fund)
        if share < 0:
            issues.append(ValidationIssue(
                field=f"percentages.{fund.value.lower()}",
                issue_type="negative",
                message=f"{fund.value} share is negative ({share}%)",
                severity="warning",
                suggested_fix="Negative shares produce no deposit for that fund",
            ))

    return issues
