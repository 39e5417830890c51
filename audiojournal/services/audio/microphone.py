"""Local microphone capture through sounddevice (PortAudio).

``sounddevice`` loads the PortAudio shared library at import time, so it is
imported when a stream is configured rather than when this module loads.
"""

import logging

from audiojournal.core.exceptions import AudioCaptureError
from audiojournal.core.models import AudioFormat
from audiojournal.services.audio.capture import AudioStream, BaseAudioCapture

logger = logging.getLogger(__name__)


class MicrophoneStream(AudioStream):
    """AudioStream backed by a ``sounddevice.RawInputStream``.

    PortAudio invokes :meth:`_callback` on its own thread; buffers are
    forwarded with :meth:`AudioStream.deliver`.
    """

    def __init__(self, buffer_size: int, audio_format: AudioFormat, device=None) -> None:
        super().__init__(buffer_size, audio_format)
        self._device = device
        self._input = None

    def _open(self) -> None:
        import sounddevice as sd

        try:
            stream = sd.RawInputStream(
                samplerate=self.audio_format.sample_rate,
                channels=self.audio_format.channels,
                dtype="int16",
                blocksize=self.buffer_size,
                device=self._device,
                callback=self._callback,
            )
        except sd.PortAudioError as exc:
            raise AudioCaptureError(f"Could not open microphone: {exc}") from exc
        try:
            stream.start()
        except sd.PortAudioError as exc:
            stream.close()
            raise AudioCaptureError(f"Could not start microphone: {exc}") from exc
        self._input = stream

    def _close(self) -> None:
        if self._input is None:
            return
        import sounddevice as sd

        stream, self._input = self._input, None
        try:
            stream.stop()
            stream.close()
        except sd.PortAudioError:
            logger.warning("Error while closing microphone stream", exc_info=True)

    def _callback(self, indata, frames, _time, status) -> None:
        if status:
            logger.warning("Audio input status: %s", status)
        self.deliver(bytes(indata))


class MicrophoneCapture(BaseAudioCapture):
    """Captures 16-bit PCM from a local input device.

    Args:
        device: sounddevice device index or name (None = system default).
    """

    def __init__(self, device: int | str | None = None) -> None:
        self._device = device

    def acquire(self, buffer_size: int, audio_format: AudioFormat) -> MicrophoneStream:
        import sounddevice as sd

        try:
            sd.check_input_settings(
                device=self._device,
                channels=audio_format.channels,
                dtype="int16",
                samplerate=audio_format.sample_rate,
            )
        except (sd.PortAudioError, ValueError) as exc:
            raise AudioCaptureError(f"Input device rejected the audio format: {exc}") from exc
        logger.debug(
            "Configured microphone: device=%s rate=%s channels=%s",
            self._device,
            audio_format.sample_rate,
            audio_format.channels,
        )
        return MicrophoneStream(buffer_size, audio_format, device=self._device)
