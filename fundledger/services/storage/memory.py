"""In-memory storage, used by tests and by sessions without a data directory."""

from typing import Optional

from fundledger.services.storage.interface import StateStorageInterface


class InMemoryStorage(StateStorageInterface):
    """Dict-backed storage. Nothing survives the process."""

    def __init__(self, documents: Optional[dict[str, str]] = None):
        self._documents: dict[str, str] = dict(documents or {})

    def read(self, key: str) -> Optional[str]:
        return self._documents.get(key)

    def write(self, key: str, document: str) -> None:
        self._documents[key] = document

    @property
    def documents(self) -> dict[str, str]:
        """A copy of everything stored, keyed by storage key."""
        return dict(self._documents)
