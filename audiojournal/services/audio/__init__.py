"""
Audio module - PCM utilities, utterance buffering, and capture adapters.
"""

from .buffer import UtteranceBuffer
from .capture import AudioStream, BaseAudioCapture, StreamAudioCapture
from .processor import AudioProcessor

__all__ = [
    "AudioProcessor",
    "AudioStream",
    "BaseAudioCapture",
    "StreamAudioCapture",
    "UtteranceBuffer",
    "create_audio_capture",
]


def create_audio_capture(provider: str, **kwargs) -> BaseAudioCapture:
    """
    Factory function to create an audio capture provider.

    Args:
        provider: Capture provider name ("sounddevice" / "microphone", "stream")
        **kwargs: Provider-specific configuration

    Returns:
        BaseAudioCapture implementation instance

    Raises:
        ValueError: If provider is unknown
    """
    if provider in ("sounddevice", "microphone"):
        from .microphone import MicrophoneCapture

        device = kwargs.get("device")
        if isinstance(device, str) and device.isdigit():
            device = int(device)
        return MicrophoneCapture(device=device)
    elif provider == "stream":
        return StreamAudioCapture()
    else:
        raise ValueError(f"Unknown audio capture provider: {provider}")
