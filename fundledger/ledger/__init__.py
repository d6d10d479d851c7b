"""
Ledger Package

State ownership, transaction recording, migration and dream goals.
"""

from fundledger.ledger.goals import GoalManager
from fundledger.ledger.migration import default_state, migrate_state
from fundledger.ledger.recorder import TransactionRecorder, unique_id
from fundledger.ledger.store import (
    ALLOCATION_DESCRIPTION,
    DEFAULT_STORAGE_KEY,
    PLAY_SPEND_DESCRIPTION,
    LedgerStore,
    epoch_millis,
)

__all__ = [
    "ALLOCATION_DESCRIPTION",
    "DEFAULT_STORAGE_KEY",
    "PLAY_SPEND_DESCRIPTION",
    "GoalManager",
    "LedgerStore",
    "TransactionRecorder",
    "default_state",
    "epoch_millis",
    "migrate_state",
    "unique_id",
]
