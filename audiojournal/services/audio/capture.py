"""Audio capture streams.

An ``AudioStream`` is the handle the recording controller holds while a
session is live: ``start()`` begins capture, ``stop()`` releases the input,
and async iteration yields raw PCM buffers until the stream is stopped.

Buffers may be produced on any thread (PortAudio invokes its callback on
its own thread); :meth:`AudioStream.deliver` marshals them onto the event
loop that started the stream.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from audiojournal.core.exceptions import AudioCaptureError
from audiojournal.core.models import AudioFormat

logger = logging.getLogger(__name__)

_END_OF_STREAM = None


class AudioStream:
    """Queue-backed stream of PCM buffers.

    Args:
        buffer_size: Frames per buffer requested from the device.
        audio_format: PCM format of the delivered bytes.
        max_pending: Buffers kept before the oldest new ones are dropped.
    """

    def __init__(
        self,
        buffer_size: int,
        audio_format: AudioFormat,
        max_pending: int = 256,
    ) -> None:
        self.buffer_size = buffer_size
        self.audio_format = audio_format
        self._queue: asyncio.Queue[bytes | None] = asyncio.Queue(maxsize=max_pending)
        self._loop: asyncio.AbstractEventLoop | None = None
        self._active = False
        self._released = False

    @property
    def active(self) -> bool:
        return self._active

    def start(self) -> None:
        """Begin capturing. Must be called from the event loop thread.

        Raises:
            AudioCaptureError: If the stream was already released or the
                underlying input cannot be started.
        """
        if self._released:
            raise AudioCaptureError("Audio stream has already been released")
        self._loop = asyncio.get_running_loop()
        self._open()
        self._active = True

    def stop(self) -> None:
        """Stop capturing and end iteration. Safe to call more than once."""
        if self._released:
            return
        self._released = True
        self._active = False
        try:
            self._close()
        finally:
            self._enqueue(_END_OF_STREAM)

    def deliver(self, data: bytes) -> None:
        """Hand a captured buffer to the stream from any thread."""
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        try:
            loop.call_soon_threadsafe(self._enqueue, data)
        except RuntimeError:
            # Loop shut down between the check and the call
            logger.debug("Dropping audio buffer: event loop is closed")

    def _enqueue(self, item: bytes | None) -> None:
        if item is not _END_OF_STREAM and not self._active:
            return
        if self._queue.full():
            if item is _END_OF_STREAM:
                self._queue.get_nowait()
            else:
                logger.warning("Audio consumer is falling behind; dropping %d bytes", len(item))
                return
        self._queue.put_nowait(item)

    def _open(self) -> None:
        """Hook for subclasses that drive real hardware."""

    def _close(self) -> None:
        """Hook for subclasses that drive real hardware."""

    async def __aiter__(self) -> AsyncIterator[bytes]:
        while True:
            item = await self._queue.get()
            if item is _END_OF_STREAM:
                return
            yield item


class BaseAudioCapture(ABC):
    """Interface that every audio input provider must implement."""

    @abstractmethod
    def acquire(self, buffer_size: int, audio_format: AudioFormat) -> AudioStream:
        """Configure the input and return a stream that is not yet started.

        Args:
            buffer_size: Frames per captured buffer.
            audio_format: Requested PCM format.

        Returns:
            An :class:`AudioStream` ready for ``start()``.

        Raises:
            AudioCaptureError: If the input cannot be configured.
        """


class StreamAudioCapture(BaseAudioCapture):
    """Audio input fed by a remote client instead of local hardware.

    The API WebSocket pushes the PCM frames it receives through
    :meth:`push`; they reach whichever stream is currently active.
    """

    def __init__(self, max_pending: int = 256) -> None:
        self._max_pending = max_pending
        self._current: AudioStream | None = None

    def acquire(self, buffer_size: int, audio_format: AudioFormat) -> AudioStream:
        stream = AudioStream(buffer_size, audio_format, max_pending=self._max_pending)
        self._current = stream
        return stream

    def push(self, data: bytes) -> bool:
        """Deliver client audio to the active stream.

        Returns:
            True if a capture session accepted the data.
        """
        stream = self._current
        if stream is None or not stream.active:
            return False
        stream.deliver(data)
        return True
