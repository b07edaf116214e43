"""
Storage Services Package

Provides the abstract key-value interface the store depends on and the
concrete backends: in-memory, local JSON file and Google Sheets.
"""

from finance_tracker.services.storage.interface import (
    StorageAdapter,
    StorageConnectionError,
    StorageError,
)
from finance_tracker.services.storage.memory import InMemoryStorage
from finance_tracker.services.storage.file_storage import JsonFileStorage

__all__ = [
    # Interface
    "StorageAdapter",
    # Exceptions
    "StorageConnectionError",
    "StorageError",
    # Implementations
    "InMemoryStorage",
    "JsonFileStorage",
]
