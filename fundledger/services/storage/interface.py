"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep the ledger logic unaware of where the document lives
2. Use in-memory storage for testing
3. Swap the local JSON file for another local key-value store later

The interface is intentionally tiny: the whole ledger is ONE document
stored under ONE key. There is nothing to query.
"""

from abc import ABC, abstractmethod
from typing import Optional


class StateStorageInterface(ABC):
    """
    Abstract key-value storage for the serialized ledger.

    Any storage implementation must implement these methods.
    Writes must be all-or-nothing: a reader never sees half a document.
    """

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """
        Read the document stored under a key.

        Args:
            key: Storage key

        Returns:
            The stored text, or None if nothing is stored under the key

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def write(self, key: str, document: str) -> None:
        """
        Replace the document stored under a key.

        Args:
            key: Storage key
            document: Serialized ledger

        Raises:
            StorageError: If the write fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass
