"""SQLite-backed key-value storage (async SQLAlchemy + aiosqlite)."""

import logging

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from audiojournal.core.exceptions import PersistenceError
from audiojournal.services.storage.base import BaseKeyValueStorage
from audiojournal.services.storage.database import (
    create_engine,
    create_session_factory,
    init_db,
    session_scope,
)
from audiojournal.services.storage.models_db import KeyValueRecord

logger = logging.getLogger(__name__)


def _is_locked(exc: BaseException) -> bool:
    """SQLite reports writer contention as ``OperationalError: database is locked``."""
    return isinstance(exc, OperationalError) and "locked" in str(exc).lower()


_retry_when_locked = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.05, min=0.05, max=0.5),
    retry=retry_if_exception(_is_locked),
    reraise=True,
)


class DatabaseStorage(BaseKeyValueStorage):
    """Stores each key as one row; ``set`` replaces the row in a single transaction.

    Args:
        url: Async SQLAlchemy connection string.
        engine: Optional pre-built engine (used in tests with in-memory SQLite).
    """

    def __init__(self, url: str | None = None, engine: AsyncEngine | None = None) -> None:
        if engine is None and url is None:
            raise ValueError("DatabaseStorage needs either a url or an engine")
        self._engine = engine or create_engine(url)
        self._owns_engine = engine is None
        self._session_factory = create_session_factory(self._engine)

    async def initialize(self) -> None:
        await init_db(self._engine)

    async def close(self) -> None:
        if self._owns_engine:
            await self._engine.dispose()

    @_retry_when_locked
    async def _read(self, key: str) -> bytes | None:
        async with session_scope(self._session_factory) as session:
            record = await session.get(KeyValueRecord, key)
            return None if record is None else record.value

    @_retry_when_locked
    async def _write(self, key: str, value: bytes) -> None:
        async with session_scope(self._session_factory) as session:
            await session.merge(KeyValueRecord(key=key, value=value))

    async def get(self, key: str) -> bytes | None:
        try:
            return await self._read(key)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not read key {key!r}: {exc}") from exc

    async def set(self, key: str, value: bytes) -> None:
        try:
            await self._write(key, bytes(value))
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not write key {key!r}: {exc}") from exc
        logger.debug("Stored %d bytes under %r", len(value), key)
