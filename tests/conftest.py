"""
Shared fixtures.

Everything runs against in-memory storage and a fixed clock, so tests
never touch the user's data directory and timestamps are predictable.
"""

from typing import Optional

import pytest

from fundledger.ledger import GoalManager, LedgerStore
from fundledger.orchestrator import LedgerSession
from fundledger.services.storage import InMemoryStorage, StorageError


START_MS = 1_700_000_000_000


class FixedClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: int = START_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int = 1) -> int:
        self.now += ms
        return self.now


class FailingStorage(InMemoryStorage):
    """Reads work, writes fail once `fail_writes` is set."""

    def __init__(self, documents: Optional[dict[str, str]] = None):
        super().__init__(documents)
        self.fail_writes = False

    def write(self, key: str, document: str) -> None:
        if self.fail_writes:
            raise StorageError("disk full")
        super().write(key, document)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def store(storage, clock) -> LedgerStore:
    ledger_store = LedgerStore(storage, clock=clock)
    ledger_store.load()
    return ledger_store


@pytest.fixture
def goals(store) -> GoalManager:
    return GoalManager(store)


@pytest.fixture
def session(store, goals) -> LedgerSession:
    return LedgerSession(store, goals=goals)


@pytest.fixture
def failing_storage() -> FailingStorage:
    return FailingStorage()
