"""In-memory storage backend. Nothing survives the process."""

from typing import Optional

from finance_tracker.services.storage.interface import StorageAdapter


class InMemoryStorage(StorageAdapter):
    """Keeps values in a dict. Used for demos and tests."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._values: dict[str, str] = dict(initial or {})

    def load(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def store(self, key: str, value: str) -> None:
        self._values[key] = value
