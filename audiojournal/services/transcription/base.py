"""
Abstract base classes for streaming speech recognition.

A backend opens one ``BaseRecognitionSession`` per recording. The session
receives raw PCM through ``feed()`` and emits zero or more partial results
followed by exactly one terminal item: a result with ``is_final=True`` or a
raised :class:`~audiojournal.core.exceptions.RecognitionError`.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from audiojournal.core.models import AudioFormat, RecognitionResult


class BaseRecognitionSession(ABC):
    """Handle to one streaming recognition request."""

    @abstractmethod
    def feed(self, data: bytes) -> None:
        """Append a buffer of captured PCM audio to the request."""

    @abstractmethod
    def finalize(self) -> None:
        """Signal end of audio; the session will emit its final result."""

    @abstractmethod
    def cancel(self) -> None:
        """Abort the session; no further results are delivered."""

    @abstractmethod
    def results(self) -> AsyncIterator[RecognitionResult]:
        """Iterate recognition results as they become available.

        Yields:
            RecognitionResult objects, each replacing the previous hypothesis.

        Raises:
            RecognitionError: If the backend fails mid-stream.
        """


class BaseSpeechBackend(ABC):
    """Interface that every speech-recognition provider must implement."""

    @abstractmethod
    def open_session(
        self,
        locale: str | None = None,
        partial_results: bool = True,
        audio_format: AudioFormat | None = None,
    ) -> BaseRecognitionSession:
        """Open a streaming recognition session.

        Args:
            locale: ISO language code or None for auto-detect.
            partial_results: Emit interim hypotheses before the final one.
            audio_format: PCM format of the buffers that will be fed.

        Returns:
            A live :class:`BaseRecognitionSession`.

        Raises:
            RecognitionError: If the session cannot be created.
        """
