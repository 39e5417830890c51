"""Small persisted app flags stored next to the entry snapshot."""

import json
import logging

from audiojournal.services.storage.base import BaseKeyValueStorage

logger = logging.getLogger(__name__)


class WelcomeFlag:
    """Remembers whether the welcome screen has been dismissed.

    Read failures count as "not seen" so the worst case is showing the
    welcome screen again.
    """

    def __init__(self, storage: BaseKeyValueStorage, key: str = "hasSeenWelcome") -> None:
        self._storage = storage
        self._key = key

    async def get(self) -> bool:
        try:
            data = await self._storage.get(self._key)
        except Exception:
            logger.exception("Could not read %s", self._key)
            return False
        if data is None:
            return False
        try:
            return json.loads(data) is True
        except ValueError:
            logger.warning("Ignoring malformed %s value", self._key)
            return False

    async def set(self, seen: bool) -> None:
        await self._storage.set(self._key, json.dumps(bool(seen)).encode())
