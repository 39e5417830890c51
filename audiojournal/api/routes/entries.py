"""
Journal entry REST endpoints.

Create (typed fallback), list, read, edit and delete. All mutations go
through the ``EntryStore``, which persists after every change.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Response

from audiojournal.api.dependencies import get_annotator, get_store
from audiojournal.core.exceptions import EmptyTranscriptError, EntryNotFoundError
from audiojournal.core.models import EntryCreate, EntryUpdate, JournalEntry
from audiojournal.services.composer import compose_entry
from audiojournal.services.storage import EntryStore
from audiojournal.services.synthesis import BaseAnnotator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/entries", tags=["entries"])


def _require(store: EntryStore, entry_id: UUID) -> JournalEntry:
    entry = store.get(entry_id)
    if entry is None:
        raise EntryNotFoundError(entry_id)
    return entry


@router.get("", response_model=list[JournalEntry])
async def list_entries(store: EntryStore = Depends(get_store)):
    """List all entries, newest first."""
    return list(store.entries)


@router.post("", response_model=JournalEntry, status_code=201)
async def create_entry(
    body: EntryCreate,
    store: EntryStore = Depends(get_store),
    annotator: BaseAnnotator = Depends(get_annotator),
):
    """Save a typed entry (used when speech input is unavailable)."""
    entry = await compose_entry(body.transcript, annotator)
    await store.add(entry)
    return entry


@router.get("/{entry_id}", response_model=JournalEntry)
async def get_entry(entry_id: UUID, store: EntryStore = Depends(get_store)):
    """Return one entry."""
    return _require(store, entry_id)


@router.patch("/{entry_id}", response_model=JournalEntry)
async def update_entry(
    entry_id: UUID,
    body: EntryUpdate,
    store: EntryStore = Depends(get_store),
):
    """Replace an entry's transcript; its position in the list is kept."""
    text = body.transcript.strip()
    if not text:
        raise EmptyTranscriptError()
    updated = _require(store, entry_id).with_transcript(text)
    await store.update(updated)
    return updated


@router.delete("/{entry_id}", status_code=204)
async def delete_entry(entry_id: UUID, store: EntryStore = Depends(get_store)):
    """Delete an entry."""
    await store.delete(_require(store, entry_id))
    logger.info("Deleted entry %s", entry_id)
    return Response(status_code=204)
