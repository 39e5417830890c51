"""
Storage module - Key-value backends and the journal entry store.
"""

from audiojournal.services.storage.base import BaseKeyValueStorage
from audiojournal.services.storage.entry_store import EntryStore
from audiojournal.services.storage.memory import InMemoryStorage
from audiojournal.services.storage.preferences import WelcomeFlag

__all__ = [
    "BaseKeyValueStorage",
    "EntryStore",
    "InMemoryStorage",
    "WelcomeFlag",
    "create_storage",
]


def create_storage(backend: str, **kwargs) -> BaseKeyValueStorage:
    """
    Factory function to create a key-value storage backend.

    Args:
        backend: "sqlite" (async SQLAlchemy) or "memory"
        **kwargs: Backend-specific configuration (``url`` for sqlite)

    Returns:
        BaseKeyValueStorage implementation instance

    Raises:
        ValueError: If backend is unknown
    """
    if backend == "sqlite":
        from audiojournal.services.storage.sql import DatabaseStorage

        return DatabaseStorage(url=kwargs["url"])
    elif backend == "memory":
        return InMemoryStorage()
    else:
        raise ValueError(f"Unknown storage backend: {backend}")
