"""
Pydantic v2 models shared by the services and the API layer.

Domain: JournalEntry, EntryAnnotation
Recording: AuthorizationStatus, SessionState, RecordingSnapshot, AudioFormat
Recognition: RecognitionResult
API: request / response envelopes
"""

from datetime import UTC, datetime
from enum import StrEnum
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

# ---------------------------------------------------------------------------
# Journal entries
# ---------------------------------------------------------------------------


class JournalEntry(BaseModel):
    """One journaled unit of content.

    ``id``, ``date`` and ``questions`` are fixed at creation; only
    ``transcript`` is edited afterwards (see :meth:`with_transcript`).
    """

    id: UUID = Field(default_factory=uuid4, frozen=True)
    date: datetime = Field(default_factory=lambda: datetime.now(UTC), frozen=True)
    transcript: str
    synthesis: str | None = None
    questions: tuple[str, ...] = Field(default=(), frozen=True)

    def with_transcript(self, transcript: str) -> "JournalEntry":
        """Return a copy of this entry carrying an edited transcript."""
        return self.model_copy(update={"transcript": transcript})


# Codec for the persisted snapshot: a JSON array of entries.
EntryListAdapter = TypeAdapter(list[JournalEntry])


class EntryAnnotation(BaseModel):
    """Synthesis text and reflection questions attached to a new entry."""

    synthesis: str | None = None
    questions: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Recording session
# ---------------------------------------------------------------------------


class AuthorizationStatus(StrEnum):
    """Microphone / speech-recognition permission as reported by the host."""

    not_determined = "not_determined"
    denied = "denied"
    restricted = "restricted"
    authorized = "authorized"


class SessionState(StrEnum):
    """Observable state of the recording session controller."""

    unauthorized = "unauthorized"
    idle = "idle"
    recording = "recording"


class RecordingSnapshot(BaseModel):
    """Immutable view of the controller state delivered to observers."""

    model_config = ConfigDict(frozen=True)

    authorization_status: AuthorizationStatus
    is_recording: bool
    transcript: str
    state: SessionState


class AudioFormat(BaseModel):
    """PCM format requested from the capture device (16-bit signed)."""

    model_config = ConfigDict(frozen=True)

    sample_rate: int = 16000
    channels: int = 1
    sample_width: int = 2

    @property
    def bytes_per_second(self) -> int:
        return self.sample_rate * self.channels * self.sample_width


# ---------------------------------------------------------------------------
# Recognition
# ---------------------------------------------------------------------------


class RecognitionResult(BaseModel):
    """A transcription hypothesis emitted by a recognition session.

    Each result carries the backend's best guess for the whole utterance
    so far, not a delta.
    """

    text: str
    is_final: bool = False
    confidence: float = 0.0


# ---------------------------------------------------------------------------
# API
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """GET /health response."""

    status: str = "ok"
    version: str = "0.1.0"
    timestamp: datetime


class EntryCreate(BaseModel):
    """POST /entries request body (typed entry fallback)."""

    transcript: str = Field(max_length=100_000)


class EntryUpdate(BaseModel):
    """PATCH /entries/{id} request body."""

    transcript: str = Field(max_length=100_000)


class StartRecordingResponse(BaseModel):
    """Result of POST /recording/start."""

    started: bool
    recording: RecordingSnapshot


class OnboardingState(BaseModel):
    """Whether the welcome screen has already been shown."""

    has_seen_welcome: bool = False


class PromptsResponse(BaseModel):
    """GET /prompts response."""

    prompts: list[str] = Field(default_factory=list)


class WebSocketMessageType(StrEnum):
    """Discriminator for messages sent over the recording WebSocket."""

    connected = "connected"
    state = "state"
    error = "error"


class WebSocketMessage(BaseModel):
    """JSON message sent from server to client over WebSocket."""

    type: WebSocketMessageType
    data: dict = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error envelope returned by the API."""

    detail: str
    code: str
    timestamp: str
