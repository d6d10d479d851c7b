"""Input validation package."""

from fundledger.validation.validator import (
    check_percentages,
    exact_decimal,
    parse_amount,
    parse_lenient,
    require_text,
)

__all__ = [
    "check_percentages",
    "exact_decimal",
    "parse_amount",
    "parse_lenient",
    "require_text",
]
