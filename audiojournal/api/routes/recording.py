"""
Recording session endpoints.

Thin wrappers over ``RecordingSessionController``. Start failures are not
errors here: the response simply reports ``started: false`` and the
current state, which is how the client learns that recording never began.
"""

import logging

from fastapi import APIRouter, Depends

from audiojournal.api.dependencies import get_annotator, get_controller, get_store
from audiojournal.core.models import JournalEntry, RecordingSnapshot, StartRecordingResponse
from audiojournal.services.composer import compose_entry
from audiojournal.services.recording import RecordingSessionController
from audiojournal.services.storage import EntryStore
from audiojournal.services.synthesis import BaseAnnotator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recording", tags=["recording"])


@router.get("", response_model=RecordingSnapshot)
async def get_recording_state(
    controller: RecordingSessionController = Depends(get_controller),
):
    """Current authorization status, recording flag and live transcript."""
    return controller.snapshot()


@router.post("/authorize", response_model=RecordingSnapshot)
async def authorize(controller: RecordingSessionController = Depends(get_controller)):
    """Ask the host for microphone permission again."""
    await controller.request_authorization()
    return controller.snapshot()


@router.post("/start", response_model=StartRecordingResponse)
async def start_recording(controller: RecordingSessionController = Depends(get_controller)):
    """Begin a capture + transcription session."""
    started = controller.start_recording()
    return StartRecordingResponse(started=started, recording=controller.snapshot())


@router.post("/stop", response_model=RecordingSnapshot)
async def stop_recording(controller: RecordingSessionController = Depends(get_controller)):
    """End the session; the transcript stays available until the next start."""
    controller.stop_recording()
    return controller.snapshot()


@router.post("/save", response_model=JournalEntry, status_code=201)
async def save_recording(
    controller: RecordingSessionController = Depends(get_controller),
    store: EntryStore = Depends(get_store),
    annotator: BaseAnnotator = Depends(get_annotator),
):
    """Stop recording if needed and store the transcript as a new entry.

    The transcript is cleared once stored, so saving again without a new
    recording is rejected as empty.
    """
    controller.stop_recording()
    entry = await compose_entry(controller.transcript, annotator)
    await store.add(entry)
    controller.clear_transcript()
    logger.info("Saved recording as entry %s", entry.id)
    return entry
