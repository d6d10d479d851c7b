"""Services package."""

from fundledger.services.storage import (
    InMemoryStorage,
    JsonFileStorage,
    StateStorageInterface,
    StorageError,
)

__all__ = [
    # Storage services
    "InMemoryStorage",
    "JsonFileStorage",
    "StateStorageInterface",
    "StorageError",
]
