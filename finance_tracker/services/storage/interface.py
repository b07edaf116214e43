"""
Abstract Storage Interface

DESIGN DECISION: The store never talks to a concrete backend directly.
It depends on this tiny key-value interface, which lets us:
1. Keep the document in a local JSON file
2. Use in-memory storage for testing
3. Put it in Google Sheets so it can be viewed from anywhere

The interface knows nothing about the document's schema. It moves one
opaque serialized string in and out under a key.
"""

from abc import ABC, abstractmethod
from typing import Optional


class StorageAdapter(ABC):
    """
    Abstract key-value persistence.

    Implementations must make store() atomic with respect to reads from the
    same process: a reader sees either the old value or the new one.
    """

    @abstractmethod
    def load(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: Storage key

        Returns:
            The last stored value, or None if nothing was ever stored

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def store(self, key: str, value: str) -> None:
        """
        Durably store a value under a key, replacing any previous value.

        Args:
            key: Storage key
            value: Serialized document

        Raises:
            StorageError: If the write fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
