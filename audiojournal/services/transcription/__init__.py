"""
Transcription module - Streaming speech-recognition abstraction layer.

Factory function for creating speech backends based on provider configuration.
"""

from .base import BaseRecognitionSession, BaseSpeechBackend

__all__ = ["BaseRecognitionSession", "BaseSpeechBackend", "create_speech_backend"]


def create_speech_backend(provider: str, **kwargs) -> BaseSpeechBackend:
    """
    Factory function to create a speech backend based on provider.

    Args:
        provider: Speech provider name ("whisper" or "local")
        **kwargs: Provider-specific configuration

    Returns:
        BaseSpeechBackend implementation instance

    Raises:
        ValueError: If provider is unknown
    """
    if provider == "whisper" or provider == "local":
        from .whisper import WhisperSpeechBackend
        return WhisperSpeechBackend(**kwargs)
    else:
        raise ValueError(f"Unknown speech provider: {provider}")
