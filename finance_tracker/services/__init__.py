"""Services package."""

from finance_tracker.services.storage import (
    InMemoryStorage,
    JsonFileStorage,
    StorageAdapter,
    StorageConnectionError,
    StorageError,
)

__all__ = [
    # Storage services
    "InMemoryStorage",
    "JsonFileStorage",
    "StorageAdapter",
    "StorageConnectionError",
    "StorageError",
]
