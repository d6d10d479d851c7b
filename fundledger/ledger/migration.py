"""
Ledger Document Migration

Older saved ledgers predate some fields:
- `percentages` (the split was fixed)
- `dreamGoals` (no goals yet)
- transaction `type` (every entry was a deposit)

migrate_state back-fills whatever is missing and keeps every other
field as it was. It is idempotent: migrating a migrated ledger changes
nothing.
"""

from collections.abc import Mapping
from typing import Any, Optional, Union

from pydantic import ValidationError

from fundledger.errors import PersistenceCorruptError
from fundledger.models.ledger import LedgerState, Percentages, TransactionType


def default_state(percentages: Optional[Percentages] = None) -> LedgerState:
    """Empty ledger: zero balances, no transactions, no goals."""
    return LedgerState(percentages=percentages or Percentages())


def _migrate_transaction(raw: Any) -> dict[str, Any]:
    if not isinstance(raw, Mapping):
        raise PersistenceCorruptError(f"Transaction entry is not an object: {raw!r}")
    entry = dict(raw)
    if not entry.get("type"):
        entry["type"] = TransactionType.DEPOSIT.value
    return entry


def migrate_state(
    raw: Union[Mapping, LedgerState],
    default_percentages: Optional[Percentages] = None,
) -> LedgerState:
    """
    Bring a deserialized ledger document up to the current shape.

    Args:
        raw: Parsed JSON document, or an already migrated LedgerState
        default_percentages: Used when the document has no percentages

    Returns:
        A validated LedgerState

    Raises:
        PersistenceCorruptError: If the document cannot be made valid
    """
    if isinstance(raw, LedgerState):
        return raw
    if not isinstance(raw, Mapping):
        raise PersistenceCorruptError(
            f"Ledger document must be an object, got {type(raw).__name__}"
        )

    document = dict(raw)

    if not document.get("percentages"):
        document["percentages"] = (default_percentages or Percentages()).model_dump(
            mode="json", by_alias=True
        )
    if not document.get("dreamGoals"):
        document["dreamGoals"] = []

    transactions = document.get("transactions") or []
    if not isinstance(transactions, list):
        raise PersistenceCorruptError("`transactions` must be a list")
    document["transactions"] = [_migrate_transaction(t) for t in transactions]

    try:
        return LedgerState.model_validate(document)
    except ValidationError as e:
        raise PersistenceCorruptError(f"Ledger document is invalid: {e}") from e
