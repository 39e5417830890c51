"""Streaming speech recognition using faster-whisper.

Whisper has no native streaming mode, so each recognition session keeps
the whole utterance in an :class:`UtteranceBuffer` and re-decodes it every
``partial_interval`` seconds of new audio. The WhisperModel is loaded
lazily and cached at module level to avoid repeated initialization overhead.
"""

import asyncio
import logging
import math
from collections.abc import AsyncIterator

import numpy as np
from faster_whisper import WhisperModel

from audiojournal.core.config import get_settings
from audiojournal.core.exceptions import RecognitionError, TranscriptionError
from audiojournal.core.models import AudioFormat, RecognitionResult
from audiojournal.services.audio.buffer import UtteranceBuffer
from audiojournal.services.audio.processor import AudioProcessor
from audiojournal.services.transcription.base import BaseRecognitionSession, BaseSpeechBackend

logger = logging.getLogger(__name__)

_model_cache: WhisperModel | None = None

_END = None


class WhisperSpeechBackend(BaseSpeechBackend):
    """Opens streaming recognition sessions decoded by faster-whisper.

    Unset arguments fall back to the ``whisper_*`` and
    ``partial_result_interval`` settings.
    """

    def __init__(
        self,
        model_size: str | None = None,
        device: str | None = None,
        compute_type: str | None = None,
        partial_interval: float | None = None,
        settings=None,
    ) -> None:
        self._settings = settings or get_settings()
        self._model_size = model_size or self._settings.whisper_model
        self._device = device or self._settings.whisper_device
        self._compute_type = compute_type or self._settings.whisper_compute_type
        self._partial_interval = (
            partial_interval
            if partial_interval is not None
            else self._settings.partial_result_interval
        )

    def _get_model(self) -> WhisperModel:
        """Load the model on first use; later backends share it."""
        global _model_cache  # noqa: PLW0603
        if _model_cache is None:
            logger.info(
                "Loading Whisper model: %s (device=%s, compute=%s)",
                self._model_size,
                self._device,
                self._compute_type,
            )
            _model_cache = WhisperModel(
                self._model_size,
                device=self._device,
                compute_type=self._compute_type,
            )
        return _model_cache

    def _run_transcription(
        self,
        audio: np.ndarray,
        language: str | None = None,
        beam_size: int = 1,
    ) -> tuple:
        """Blocking decode; runs in a worker thread.

        Segments are consumed here since the generator is lazy and must not
        be iterated from the event loop.
        """
        model = self._get_model()
        segments_iter, info = model.transcribe(
            audio,
            language=language,
            beam_size=beam_size,
            vad_filter=False,
        )
        segments = list(segments_iter)
        return segments, info

    @staticmethod
    def _logprob_to_confidence(avg_logprob: float) -> float:
        """Map a mean token log-probability onto [0, 1]."""
        return max(0.0, min(1.0, math.exp(avg_logprob)))

    async def transcribe_ndarray(
        self,
        audio: np.ndarray,
        language: str | None = None,
        beam_size: int = 1,
    ) -> RecognitionResult:
        """Decode a float32 audio array into a (non-final) recognition result.

        Raises:
            TranscriptionError: If the model fails.
        """
        try:
            segments, _info = await asyncio.to_thread(
                self._run_transcription,
                audio,
                language=language,
                beam_size=beam_size,
            )
        except Exception as exc:
            raise TranscriptionError(detail=f"Whisper transcription failed: {exc}") from exc

        texts = [seg.text.strip() for seg in segments if seg.text.strip()]
        confidence = 0.0
        if texts:
            avg_logprob = sum(seg.avg_logprob for seg in segments) / len(segments)
            confidence = self._logprob_to_confidence(avg_logprob)
        return RecognitionResult(text=" ".join(texts), confidence=confidence)

    def open_session(
        self,
        locale: str | None = None,
        partial_results: bool = True,
        audio_format: AudioFormat | None = None,
    ) -> "WhisperRecognitionSession":
        return WhisperRecognitionSession(
            self,
            language=locale or None,
            partial_results=partial_results,
            partial_interval=self._partial_interval,
            audio_format=audio_format or AudioFormat(),
        )


class WhisperRecognitionSession(BaseRecognitionSession):
    """One streaming request against :class:`WhisperSpeechBackend`.

    A background task wakes whenever ``partial_interval`` seconds of new
    audio are buffered, decodes the full utterance and queues the result.
    ``finalize()`` makes it decode once more and emit the final result.
    """

    def __init__(
        self,
        backend: WhisperSpeechBackend,
        language: str | None,
        partial_results: bool,
        partial_interval: float,
        audio_format: AudioFormat,
    ) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError as exc:
            raise RecognitionError("Recognition sessions require a running event loop") from exc

        self._backend = backend
        self._language = language
        self._partial_results = partial_results
        self._interval = partial_interval
        self._buffer = UtteranceBuffer(
            sample_rate=audio_format.sample_rate,
            sample_width=audio_format.sample_width,
            channels=audio_format.channels,
        )
        self._processor = AudioProcessor()
        self._results: asyncio.Queue = asyncio.Queue()
        self._wakeup = asyncio.Event()
        self._finalizing = False
        self._closed = False
        self._last = RecognitionResult(text="")
        self._worker = asyncio.create_task(self._decode_loop())

    def feed(self, data: bytes) -> None:
        if self._finalizing or self._closed:
            return
        self._buffer.add_bytes(data)
        if self._partial_results and self._buffer.pending_duration >= self._interval:
            self._wakeup.set()

    def finalize(self) -> None:
        if self._finalizing or self._closed:
            return
        self._finalizing = True
        self._wakeup.set()

    def cancel(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._worker.cancel()
        self._results.put_nowait(_END)

    async def results(self) -> AsyncIterator[RecognitionResult]:
        while True:
            item = await self._results.get()
            if item is _END:
                return
            if isinstance(item, BaseException):
                raise item
            yield item

    async def _decode_loop(self) -> None:
        try:
            while True:
                await self._wakeup.wait()
                self._wakeup.clear()
                if self._finalizing:
                    break
                if self._buffer.pending_duration < self._interval:
                    continue
                result = await self._decode()
                if result.text and result.text != self._last.text:
                    self._last = result
                    self._results.put_nowait(result)

            final = await self._decode()
            self._results.put_nowait(final.model_copy(update={"is_final": True}))
        except asyncio.CancelledError:
            raise
        except RecognitionError as exc:
            logger.warning("Recognition session failed: %s", exc.detail)
            self._results.put_nowait(exc)
        except Exception as exc:
            logger.exception("Unexpected error in recognition session")
            self._results.put_nowait(RecognitionError(f"Recognition failed: {exc}"))
        self._results.put_nowait(_END)

    async def _decode(self) -> RecognitionResult:
        """Decode the whole buffered utterance, skipping silence."""
        self._buffer.mark_decoded()
        audio = self._buffer.snapshot()
        if self._processor.is_silent(audio):
            return self._last
        return await self._backend.transcribe_ndarray(audio, language=self._language)
