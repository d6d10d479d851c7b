"""
Storage Services Package

Provides the abstract key-value interface and concrete implementations.
The ledger is stored as a single JSON document under a single key.
"""

from fundledger.services.storage.interface import (
    StateStorageInterface,
    StorageError,
)
from fundledger.services.storage.json_file import JsonFileStorage
from fundledger.services.storage.memory import InMemoryStorage

__all__ = [
    # Interface
    "StateStorageInterface",
    # Exceptions
    "StorageError",
    # Implementations
    "InMemoryStorage",
    "JsonFileStorage",
]
