"""
Application wiring and FastAPI dependencies.

``build_components()`` constructs the storage, entry store, annotator and
recording controller exactly once per application. They are kept on
``app.state.components`` and handed to routes through ``Depends`` getters;
nothing is looked up from module globals.
"""

import asyncio
import logging
from dataclasses import dataclass, field

from fastapi import Request

from audiojournal.core.config import Settings
from audiojournal.core.models import AudioFormat
from audiojournal.services.audio import BaseAudioCapture, create_audio_capture
from audiojournal.services.recording import (
    BaseAuthorizer,
    RecordingSessionController,
    create_authorizer,
)
from audiojournal.services.storage import (
    BaseKeyValueStorage,
    EntryStore,
    WelcomeFlag,
    create_storage,
)
from audiojournal.services.synthesis import BaseAnnotator, create_annotator
from audiojournal.services.transcription import BaseSpeechBackend, create_speech_backend

logger = logging.getLogger(__name__)


@dataclass
class AppComponents:
    """Everything the API layer talks to, built once at startup."""

    settings: Settings
    storage: BaseKeyValueStorage
    store: EntryStore
    welcome: WelcomeFlag
    annotator: BaseAnnotator
    capture: BaseAudioCapture
    controller: RecordingSessionController
    background: set[asyncio.Task] = field(default_factory=set)


async def build_components(
    settings: Settings,
    *,
    storage: BaseKeyValueStorage | None = None,
    capture: BaseAudioCapture | None = None,
    backend: BaseSpeechBackend | None = None,
    authorizer: BaseAuthorizer | None = None,
    annotator: BaseAnnotator | None = None,
) -> AppComponents:
    """Create and connect all services.

    Any collaborator passed explicitly is used as-is; the rest are created
    from *settings* through the module factories.
    """
    storage = storage or create_storage(settings.storage_backend, url=settings.database_url)
    await storage.initialize()
    store = await EntryStore.open(storage, key=settings.entries_storage_key)

    capture = capture or create_audio_capture(
        settings.capture_provider, device=settings.capture_device
    )
    backend = backend or create_speech_backend(settings.speech_provider, settings=settings)
    authorizer = authorizer or create_authorizer(
        settings.authorization_mode, device=settings.capture_device
    )
    annotator = annotator or create_annotator(settings.annotator_provider, settings=settings)

    controller = RecordingSessionController(
        capture,
        backend,
        authorizer,
        locale=settings.speech_locale or None,
        buffer_size=settings.capture_buffer_size,
        audio_format=AudioFormat(
            sample_rate=settings.capture_sample_rate,
            channels=settings.capture_channels,
        ),
    )
    logger.info(
        "Components ready: storage=%s capture=%s speech=%s entries=%d",
        settings.storage_backend,
        settings.capture_provider,
        settings.speech_provider,
        len(store),
    )
    return AppComponents(
        settings=settings,
        storage=storage,
        store=store,
        welcome=WelcomeFlag(storage, key=settings.welcome_storage_key),
        annotator=annotator,
        capture=capture,
        controller=controller,
    )


async def shutdown_components(components: AppComponents) -> None:
    """Stop recording, cancel background work, and close storage."""
    for task in components.background:
        task.cancel()
    await asyncio.gather(*components.background, return_exceptions=True)
    components.background.clear()
    await components.controller.aclose()
    await components.storage.close()


# ---------------------------------------------------------------------------
# Route dependencies
# ---------------------------------------------------------------------------


def get_components(request: Request) -> AppComponents:
    return request.app.state.components


def get_store(request: Request) -> EntryStore:
    return get_components(request).store


def get_controller(request: Request) -> RecordingSessionController:
    return get_components(request).controller


def get_annotator(request: Request) -> BaseAnnotator:
    return get_components(request).annotator


def get_welcome(request: Request) -> WelcomeFlag:
    return get_components(request).welcome
