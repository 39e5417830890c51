"""PCM helpers shared by the capture and recognition code.

Turns 16-bit interleaved PCM into the mono float32 arrays Whisper expects
and measures signal energy to skip decoding silence.
"""

import numpy as np

# int16 full scale
_PCM16_SCALE = 32768.0


class AudioProcessor:
    """Conversion and analysis for one PCM format.

    Args:
        sample_rate: Frames per second.
        sample_width: Bytes per sample; only 2 (int16) is decoded.
        channels: Interleaved channel count.
    """

    def __init__(
        self,
        sample_rate: int = 16000,
        sample_width: int = 2,
        channels: int = 1,
    ) -> None:
        self.sample_rate = sample_rate
        self.sample_width = sample_width
        self.channels = channels

    @property
    def frame_size(self) -> int:
        """Bytes per frame (one sample for every channel)."""
        return self.sample_width * self.channels

    def align(self, pcm_data: bytes) -> bytes:
        """Drop a trailing partial frame so the data can be decoded."""
        return pcm_data[: len(pcm_data) - (len(pcm_data) % self.frame_size)]

    def pcm_to_ndarray(self, pcm_data: bytes) -> np.ndarray:
        """Decode PCM into mono float32 samples in [-1.0, 1.0].

        Multi-channel frames are averaged into one sample.

        Raises:
            ValueError: If *pcm_data* ends in the middle of a frame.
        """
        if len(pcm_data) % self.frame_size:
            raise ValueError(
                f"{len(pcm_data)} bytes of PCM is not aligned to {self.frame_size}-byte frames"
            )
        samples = np.frombuffer(pcm_data, dtype=np.int16).astype(np.float32) / _PCM16_SCALE
        if self.channels > 1:
            samples = samples.reshape(-1, self.channels).mean(axis=1)
        return samples

    def is_silent(self, audio: np.ndarray, threshold: float = 0.01) -> bool:
        """True when the RMS energy of *audio* is below *threshold* (or it is empty)."""
        if audio.size == 0:
            return True
        rms = np.sqrt(np.mean(np.square(audio)))
        return float(rms) < threshold
