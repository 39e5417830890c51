"""
AudioJournal exception hierarchy.

All application-specific exceptions inherit from AudioJournalError,
enabling centralized error handling in the API middleware layer.
Platform failures (capture, recognition, persistence) are raised by the
adapters and absorbed at the controller / store boundary.
"""

from datetime import UTC, datetime
from uuid import UUID


class AudioJournalError(Exception):
    """Base exception for all AudioJournal errors."""

    def __init__(
        self,
        detail: str = "An unexpected error occurred",
        code: str = "AUDIOJOURNAL_ERROR",
        status_code: int = 500,
    ) -> None:
        self.detail = detail
        self.code = code
        self.status_code = status_code
        self.timestamp = datetime.now(UTC).isoformat()
        super().__init__(detail)


class EntryNotFoundError(AudioJournalError):
    """Raised when a journal entry ID does not exist."""

    def __init__(self, entry_id: UUID | str) -> None:
        super().__init__(
            detail=f"Entry not found: {entry_id}",
            code="ENTRY_NOT_FOUND",
            status_code=404,
        )


class DuplicateEntryError(AudioJournalError):
    """Raised when adding an entry whose ID is already stored."""

    def __init__(self, entry_id: UUID | str) -> None:
        super().__init__(
            detail=f"Entry already exists: {entry_id}",
            code="DUPLICATE_ENTRY",
            status_code=409,
        )


class EmptyTranscriptError(AudioJournalError):
    """Raised when an entry would be created from blank text."""

    def __init__(self) -> None:
        super().__init__(
            detail="Cannot save an entry with an empty transcript",
            code="EMPTY_TRANSCRIPT",
            status_code=422,
        )


class AudioCaptureError(AudioJournalError):
    """Raised when the audio input cannot be configured or started."""

    def __init__(self, detail: str = "Audio capture failed") -> None:
        super().__init__(detail=detail, code="AUDIO_CAPTURE_ERROR", status_code=500)


class RecognitionError(AudioJournalError):
    """Raised when a recognition session cannot be opened or fails mid-stream."""

    def __init__(self, detail: str = "Speech recognition failed") -> None:
        super().__init__(detail=detail, code="RECOGNITION_ERROR", status_code=500)


class TranscriptionError(RecognitionError):
    """Raised when the STT model fails to decode audio."""

    def __init__(self, detail: str = "Transcription failed") -> None:
        super().__init__(detail=detail)
        self.code = "TRANSCRIPTION_ERROR"


class PersistenceError(AudioJournalError):
    """Raised by storage backends when a read or write fails."""

    def __init__(self, detail: str = "Storage operation failed") -> None:
        super().__init__(detail=detail, code="PERSISTENCE_ERROR", status_code=500)
