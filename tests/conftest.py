"""Shared pytest fixtures for the AudioJournal test suite.

Provides in-memory storage, scripted speech-recognition fakes, and PCM
audio samples so the controller, store and API can be exercised without a
microphone, a Whisper model, or a database file.
"""

import asyncio

import numpy as np
import pytest

from audiojournal.core.exceptions import RecognitionError
from audiojournal.core.models import AudioFormat, AuthorizationStatus, RecognitionResult
from audiojournal.services.audio.capture import StreamAudioCapture
from audiojournal.services.recording.authorization import StaticAuthorizer
from audiojournal.services.recording.controller import RecordingSessionController
from audiojournal.services.storage.memory import InMemoryStorage
from audiojournal.services.transcription.base import BaseRecognitionSession, BaseSpeechBackend

# ---------------------------------------------------------------------------
# Speech recognition fakes
# ---------------------------------------------------------------------------


class FakeRecognitionSession(BaseRecognitionSession):
    """Recognition session whose results are scripted by the test."""

    def __init__(self, locale=None, partial_results=True) -> None:
        self.locale = locale
        self.partial_results = partial_results
        self.fed: list[bytes] = []
        self.finalized = False
        self.cancelled = False
        self._queue: asyncio.Queue = asyncio.Queue()

    def feed(self, data: bytes) -> None:
        self.fed.append(data)

    def finalize(self) -> None:
        self.finalized = True

    def cancel(self) -> None:
        self.cancelled = True
        self._queue.put_nowait(None)

    def emit(self, text: str, is_final: bool = False) -> None:
        """Deliver a recognition result (even after cancellation)."""
        self._queue.put_nowait(RecognitionResult(text=text, is_final=is_final))

    def fail(self, detail: str = "recognizer crashed") -> None:
        self._queue.put_nowait(RecognitionError(detail))

    async def results(self):
        while True:
            item = await self._queue.get()
            if item is None:
                return
            if isinstance(item, BaseException):
                raise item
            yield item


class FakeSpeechBackend(BaseSpeechBackend):
    """Backend that hands out FakeRecognitionSession objects."""

    def __init__(self) -> None:
        self.sessions: list[FakeRecognitionSession] = []
        self.open_error: Exception | None = None

    @property
    def current(self) -> FakeRecognitionSession:
        return self.sessions[-1]

    def open_session(self, locale=None, partial_results=True, audio_format=None):
        if self.open_error is not None:
            raise self.open_error
        session = FakeRecognitionSession(locale=locale, partial_results=partial_results)
        self.sessions.append(session)
        return session


async def settle(rounds: int = 10) -> None:
    """Let pending tasks and queued callbacks run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


# ---------------------------------------------------------------------------
# Controller fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def speech_backend():
    return FakeSpeechBackend()


@pytest.fixture
def stream_capture():
    return StreamAudioCapture()


@pytest.fixture
def authorizer():
    return StaticAuthorizer(AuthorizationStatus.authorized)


@pytest.fixture
def controller(stream_capture, speech_backend, authorizer):
    """Controller wired to a push-fed capture and a scripted backend."""
    return RecordingSessionController(
        stream_capture,
        speech_backend,
        authorizer,
        locale="en",
        buffer_size=512,
        audio_format=AudioFormat(),
    )


@pytest.fixture
async def authorized_controller(controller):
    await controller.request_authorization()
    return controller


# ---------------------------------------------------------------------------
# Storage fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def memory_storage():
    return InMemoryStorage()


@pytest.fixture
async def db_engine():
    """Create an in-memory SQLite async engine with tables, dispose after test."""
    from sqlalchemy.ext.asyncio import create_async_engine

    from audiojournal.services.storage.database import init_db

    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    await init_db(engine)
    yield engine
    await engine.dispose()


# ---------------------------------------------------------------------------
# Audio fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_pcm_bytes():
    """One second of a 440 Hz tone at half scale, 16 kHz int16 mono."""
    t = np.arange(16000) / 16000
    return (16000 * np.sin(2 * np.pi * 440.0 * t)).astype("<i2").tobytes()


@pytest.fixture
def silent_pcm_bytes():
    """One second of digital silence in the same format."""
    return bytes(2 * 16000)
