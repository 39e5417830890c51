"""Recording session controller.

Owns the lifecycle of one capture session: microphone input is pumped
into a streaming recognition session and every recognition result
replaces the live transcript.

State machine::

    unauthorized --(authorized)--> idle --start--> recording
    recording --(stop / final result / backend error / input lost)--> idle
    any --(permission denied or revoked)--> unauthorized

All state lives on the asyncio event loop. Adapters that produce data on
other threads marshal it onto the loop before it reaches this module, so
observers always see updates in delivery order. Each session carries a
cancellation token; anything a session emits after it stopped being the
active one is discarded.

Usage::

    controller = RecordingSessionController(capture, backend, authorizer)
    await controller.request_authorization()
    updates = controller.subscribe()
    controller.start_recording()
    ...
    controller.stop_recording()
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass

from audiojournal.core.models import (
    AudioFormat,
    AuthorizationStatus,
    RecordingSnapshot,
    SessionState,
)
from audiojournal.services.audio.capture import AudioStream, BaseAudioCapture
from audiojournal.services.recording.authorization import BaseAuthorizer
from audiojournal.services.transcription.base import BaseRecognitionSession, BaseSpeechBackend

logger = logging.getLogger(__name__)

# Snapshots buffered per observer before the oldest are dropped
SUBSCRIBER_BACKLOG = 64


@dataclass
class _ActiveSession:
    """Resources held by one recording session plus its cancellation token."""

    session_id: int
    capture: AudioStream | None = None
    recognition: BaseRecognitionSession | None = None
    pump_task: asyncio.Task | None = None
    recognition_task: asyncio.Task | None = None
    cancelled: bool = False


def _quietly(action: Callable[[], None], what: str, session_id: int) -> None:
    """Run a teardown step; a failing step must not block the others."""
    try:
        action()
    except Exception:
        logger.exception("Failed to %s for session %d", what, session_id)


class RecordingSessionController:
    """Mediates microphone access and streaming recognition.

    Args:
        capture: Audio input provider.
        backend: Streaming speech-recognition backend.
        authorizer: Host permission provider.
        locale: Recognition language (None = auto-detect).
        buffer_size: Frames per captured audio buffer.
        audio_format: PCM format requested from the capture device.
    """

    def __init__(
        self,
        capture: BaseAudioCapture,
        backend: BaseSpeechBackend,
        authorizer: BaseAuthorizer,
        *,
        locale: str | None = None,
        buffer_size: int = 1024,
        audio_format: AudioFormat | None = None,
    ) -> None:
        self._capture = capture
        self._backend = backend
        self._authorizer = authorizer
        self._locale = locale or None
        self._buffer_size = buffer_size
        self._audio_format = audio_format or AudioFormat()

        self._authorization_status = AuthorizationStatus.not_determined
        self._is_recording = False
        self._transcript = ""
        self._active: _ActiveSession | None = None
        self._session_counter = 0
        self._subscribers: set[asyncio.Queue[RecordingSnapshot]] = set()

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def authorization_status(self) -> AuthorizationStatus:
        return self._authorization_status

    @property
    def is_recording(self) -> bool:
        return self._is_recording

    @property
    def transcript(self) -> str:
        return self._transcript

    @property
    def state(self) -> SessionState:
        if self._authorization_status is not AuthorizationStatus.authorized:
            return SessionState.unauthorized
        return SessionState.recording if self._is_recording else SessionState.idle

    def snapshot(self) -> RecordingSnapshot:
        """Return the current state as an immutable model."""
        return RecordingSnapshot(
            authorization_status=self._authorization_status,
            is_recording=self._is_recording,
            transcript=self._transcript,
            state=self.state,
        )

    def subscribe(self) -> asyncio.Queue[RecordingSnapshot]:
        """Register an observer queue, primed with the current snapshot.

        The queue holds at most ``SUBSCRIBER_BACKLOG`` snapshots; when a
        slow observer lets it fill up, the oldest snapshot is dropped.
        """
        queue: asyncio.Queue[RecordingSnapshot] = asyncio.Queue(maxsize=SUBSCRIBER_BACKLOG)
        queue.put_nowait(self.snapshot())
        self._subscribers.add(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue[RecordingSnapshot]) -> None:
        self._subscribers.discard(queue)

    def _publish(self) -> None:
        snapshot = self.snapshot()
        for queue in list(self._subscribers):
            if queue.full():
                queue.get_nowait()
            queue.put_nowait(snapshot)

    # ------------------------------------------------------------------
    # Authorization
    # ------------------------------------------------------------------

    async def request_authorization(self) -> AuthorizationStatus:
        """Ask the host for permission and apply its answer.

        Safe to call repeatedly; whichever answer arrives last wins. A
        failing provider leaves the current status untouched.

        Returns:
            The authorization status after the answer was applied.
        """
        try:
            status = await self._authorizer.request_authorization()
        except Exception:
            logger.exception("Authorization request failed")
            return self._authorization_status
        self._apply_authorization(status)
        return self._authorization_status

    def _apply_authorization(self, status: AuthorizationStatus) -> None:
        changed = status != self._authorization_status
        self._authorization_status = status
        logger.info("Authorization status: %s", status)
        if status is not AuthorizationStatus.authorized and self._active is not None:
            logger.warning("Microphone access withdrawn during session %d", self._active.session_id)
            self.stop_recording()
        elif changed:
            self._publish()

    # ------------------------------------------------------------------
    # Recording lifecycle
    # ------------------------------------------------------------------

    def start_recording(self) -> bool:
        """Open a capture + recognition session and begin streaming.

        A no-op unless authorization is ``authorized``. Any session still
        holding the microphone is torn down first. If configuring the input,
        opening the recognition request or starting capture fails, every
        resource acquired so far is released and the controller stays idle.

        Returns:
            True if the controller is now recording.
        """
        if self._authorization_status is not AuthorizationStatus.authorized:
            logger.info("Recording not started: authorization is %s", self._authorization_status)
            return False
        # Raises before anything is acquired when called outside the event loop
        asyncio.get_running_loop()

        previous = self._active
        if previous is not None:
            self._active = None
            self._release(previous)

        self._session_counter += 1
        session = _ActiveSession(session_id=self._session_counter)
        try:
            session.capture = self._capture.acquire(self._buffer_size, self._audio_format)
            session.recognition = self._backend.open_session(
                locale=self._locale,
                partial_results=True,
                audio_format=self._audio_format,
            )
            session.capture.start()
        except Exception:
            logger.exception("Could not start recording session %d", session.session_id)
            self._release(session)
            if self._is_recording:
                self._is_recording = False
                self._publish()
            return False

        self._active = session
        self._transcript = ""
        self._is_recording = True
        session.pump_task = asyncio.create_task(self._pump_audio(session))
        session.recognition_task = asyncio.create_task(self._consume_results(session))
        logger.info("Recording session %d started", session.session_id)
        self._publish()
        return True

    def stop_recording(self) -> None:
        """End the active session and release its resources.

        Idempotent: does nothing (and publishes nothing) when idle.
        """
        session = self._active
        if session is None:
            return
        self._active = None
        self._release(session)
        self._is_recording = False
        logger.info("Recording session %d stopped", session.session_id)
        self._publish()

    def clear_transcript(self) -> None:
        """Forget a saved transcript. No-op while recording."""
        if self._is_recording or not self._transcript:
            return
        self._transcript = ""
        self._publish()

    async def aclose(self) -> None:
        """Stop recording, wait for session tasks to unwind, drop observers."""
        session = self._active
        tasks = []
        if session is not None:
            tasks = [t for t in (session.pump_task, session.recognition_task) if t is not None]
        self.stop_recording()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._subscribers.clear()

    def _release(self, session: _ActiveSession) -> None:
        """Tear down a session: capture, audio consumer, request, recognition task."""
        session.cancelled = True
        current = asyncio.current_task()
        sid = session.session_id

        capture, recognition = session.capture, session.recognition
        if capture is not None:
            _quietly(capture.stop, "stop audio capture", sid)
        if session.pump_task is not None and session.pump_task is not current:
            session.pump_task.cancel()
        if recognition is not None:
            _quietly(recognition.finalize, "end recognition audio", sid)
        if session.recognition_task is not None and session.recognition_task is not current:
            session.recognition_task.cancel()
        if recognition is not None:
            _quietly(recognition.cancel, "cancel recognition", sid)

        session.capture = None
        session.recognition = None
        session.pump_task = None
        session.recognition_task = None

    def _finish(self, session: _ActiveSession) -> None:
        """Stop on behalf of a session task, unless that session is already stale."""
        if session is self._active:
            self.stop_recording()

    async def _pump_audio(self, session: _ActiveSession) -> None:
        """Forward captured buffers into the recognition request."""
        capture, recognition = session.capture, session.recognition
        try:
            async for buffer in capture:
                if session.cancelled:
                    return
                recognition.feed(buffer)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Audio pump failed for session %d", session.session_id)
        else:
            if not session.cancelled:
                logger.warning("Audio input ended during session %d", session.session_id)
        self._finish(session)

    async def _consume_results(self, session: _ActiveSession) -> None:
        """Apply recognition results; a final result or an error ends the session."""
        recognition = session.recognition
        try:
            async for result in recognition.results():
                if session.cancelled:
                    return
                self._transcript = result.text
                self._publish()
                if result.is_final:
                    logger.info("Final transcription received for session %d", session.session_id)
                    break
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.warning(
                "Recognition ended with an error for session %d: %s", session.session_id, exc
            )
        self._finish(session)
