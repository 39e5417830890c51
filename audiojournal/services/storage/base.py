"""
Abstract base class for durable key-value storage.

The entry store writes its whole collection under one key, so backends only
need whole-value get / set with last-write-wins semantics.
"""

from abc import ABC, abstractmethod


class BaseKeyValueStorage(ABC):
    """Interface that every storage backend must implement."""

    async def initialize(self) -> None:
        """Prepare the backend (create tables, directories). Idempotent."""

    async def close(self) -> None:
        """Release backend resources."""

    @abstractmethod
    async def get(self, key: str) -> bytes | None:
        """Return the value stored under *key*, or None if absent.

        Raises:
            PersistenceError: If the backend cannot be read.
        """

    @abstractmethod
    async def set(self, key: str, value: bytes) -> None:
        """Replace the value stored under *key* in one write.

        Raises:
            PersistenceError: If the backend cannot be written.
        """
