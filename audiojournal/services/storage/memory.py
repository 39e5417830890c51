"""Process-local storage backend (nothing survives a restart)."""

from audiojournal.services.storage.base import BaseKeyValueStorage


class InMemoryStorage(BaseKeyValueStorage):
    """Dict-backed key-value storage for tests and ephemeral runs."""

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self._data: dict[str, bytes] = dict(initial or {})

    async def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    async def set(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)
