"""
Entry store: the authoritative, newest-first collection of journal entries.

Every mutation rewrites the whole collection as one JSON snapshot under a
single storage key. The snapshot is small (personal journaling) and a reader
never sees a half-written collection.

Persistence problems never escape this module. ``load()`` falls back to an
empty collection and ``persist()`` keeps the in-memory list authoritative;
both log the failure and report it through their boolean result.
"""

import logging
from uuid import UUID

from pydantic import ValidationError

from audiojournal.core.exceptions import DuplicateEntryError
from audiojournal.core.models import EntryListAdapter, JournalEntry
from audiojournal.services.storage.base import BaseKeyValueStorage

logger = logging.getLogger(__name__)

DEFAULT_ENTRIES_KEY = "journalEntries"


class EntryStore:
    """In-memory entry list kept in sync with key-value storage.

    Use :meth:`open` to construct a store and load its snapshot in one step.

    Args:
        storage: Durable key-value backend.
        key: Storage key holding the serialized collection.
    """

    def __init__(self, storage: BaseKeyValueStorage, key: str = DEFAULT_ENTRIES_KEY) -> None:
        self._storage = storage
        self._key = key
        self._entries: list[JournalEntry] = []

    @classmethod
    async def open(
        cls, storage: BaseKeyValueStorage, key: str = DEFAULT_ENTRIES_KEY
    ) -> "EntryStore":
        """Create a store and load the persisted collection once."""
        store = cls(storage, key)
        await store.load()
        return store

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def entries(self) -> tuple[JournalEntry, ...]:
        """Read-only view of the collection, newest first."""
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, entry_id: UUID) -> JournalEntry | None:
        """Return the entry with *entry_id*, or None."""
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def _index_of(self, entry_id: UUID) -> int | None:
        for index, entry in enumerate(self._entries):
            if entry.id == entry_id:
                return index
        return None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def add(self, entry: JournalEntry) -> None:
        """Insert *entry* at the front and persist.

        Raises:
            DuplicateEntryError: If an entry with the same id is already stored.
                The collection is left untouched.
        """
        if self._index_of(entry.id) is not None:
            raise DuplicateEntryError(entry.id)
        self._entries.insert(0, entry)
        await self.persist()

    async def update(self, entry: JournalEntry) -> bool:
        """Apply *entry*'s transcript to the stored entry with the same id.

        Only the transcript is taken from *entry*; the stored id, date,
        synthesis and questions are kept, as is the entry's position.

        Returns:
            True if an entry was replaced; False (and nothing persisted) if
            no entry has that id.
        """
        index = self._index_of(entry.id)
        if index is None:
            logger.debug("Update ignored: no entry %s", entry.id)
            return False
        self._entries[index] = self._entries[index].with_transcript(entry.transcript)
        await self.persist()
        return True

    async def delete(self, entry: JournalEntry) -> bool:
        """Remove every entry sharing *entry*'s id and persist.

        Returns:
            True if anything was removed.
        """
        remaining = [e for e in self._entries if e.id != entry.id]
        if len(remaining) == len(self._entries):
            logger.debug("Delete ignored: no entry %s", entry.id)
            return False
        self._entries = remaining
        await self.persist()
        return True

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    async def load(self) -> bool:
        """Replace in-memory state with the persisted snapshot.

        Returns:
            True if a snapshot was read and decoded. False when nothing was
            stored or the snapshot was unreadable; the collection is then empty.
        """
        try:
            data = await self._storage.get(self._key)
        except Exception:
            logger.exception("Could not read journal entries; starting empty")
            self._entries = []
            return False

        if data is None:
            self._entries = []
            return False

        try:
            self._entries = EntryListAdapter.validate_json(data)
        except (ValidationError, ValueError):
            logger.warning("Stored journal entries could not be decoded; starting empty", exc_info=True)
            self._entries = []
            return False

        logger.info("Loaded %d journal entries", len(self._entries))
        return True

    async def persist(self) -> bool:
        """Write the whole collection under the storage key.

        Returns:
            True on success. On failure the error is logged and the in-memory
            collection stays authoritative until the next successful write.
        """
        try:
            data = EntryListAdapter.dump_json(self._entries)
            await self._storage.set(self._key, data)
        except Exception:
            logger.exception("Failed to persist %d journal entries", len(self._entries))
            return False
        return True
