"""Utterance buffering for streaming recognition.

Accumulates every PCM byte of one recognition session so the recognizer
can re-decode the whole utterance each time enough new audio has arrived.
Re-decoding the full buffer is what lets later partial results revise
earlier ones.
"""

import numpy as np

from audiojournal.services.audio.processor import AudioProcessor


class UtteranceBuffer:
    """Accumulates PCM audio bytes for one utterance.

    Tracks how much audio arrived since the last decode so the caller can
    decide when a new partial hypothesis is worth computing.
    """

    def __init__(
        self,
        sample_rate: int = 16000,
        sample_width: int = 2,
        channels: int = 1,
        max_duration: float = 600.0,
    ) -> None:
        self._sample_rate = sample_rate
        self._sample_width = sample_width
        self._channels = channels
        self._max_bytes = int(max_duration * self._bytes_per_second)
        self._buffer = bytearray()
        self._decoded_bytes = 0
        self._processor = AudioProcessor(sample_rate, sample_width, channels)

    @property
    def _bytes_per_second(self) -> int:
        return self._sample_rate * self._sample_width * self._channels

    @property
    def pending_duration(self) -> float:
        """Seconds of audio added since the last :meth:`mark_decoded`."""
        return (len(self._buffer) - self._decoded_bytes) / self._bytes_per_second

    def add_bytes(self, data: bytes) -> None:
        """Append raw PCM bytes, keeping at most ``max_duration`` of the newest audio."""
        self._buffer.extend(data)
        overflow = len(self._buffer) - self._max_bytes
        if overflow > 0:
            # Trim whole frames from the front
            overflow += (-overflow) % self._processor.frame_size
            del self._buffer[:overflow]
            self._decoded_bytes = max(self._decoded_bytes - overflow, 0)

    def snapshot(self) -> np.ndarray:
        """Return the whole utterance as a float32 array (frame-aligned)."""
        return self._processor.pcm_to_ndarray(self._processor.align(bytes(self._buffer)))

    def mark_decoded(self) -> None:
        """Record that everything buffered so far has been decoded."""
        self._decoded_bytes = len(self._buffer)
