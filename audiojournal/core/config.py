"""
AudioJournal configuration (pydantic-settings).

Defaults run the API locally with the microphone, faster-whisper and a
SQLite file under ``data/``. Every field can be set from the environment or
a ``.env`` file; read it through ``get_settings()``.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings; env var names match the field names, any case.

    Attributes:
        storage_backend: Durable key-value backend ("sqlite" or "memory").
        speech_provider: Streaming recognizer ("whisper" for faster-whisper).
        capture_provider: Audio source ("sounddevice" or "stream").
        authorization_mode: How microphone permission is decided
            ("device", "granted", "denied").
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Storage ---
    # Entries are written as one JSON snapshot under a single key
    storage_backend: str = "sqlite"
    database_url: str = "sqlite+aiosqlite:///data/audiojournal.db"
    entries_storage_key: str = "journalEntries"
    welcome_storage_key: str = "hasSeenWelcome"

    # --- Speech recognition ---
    speech_provider: str = "whisper"
    whisper_model: str = "base"  # Model size: tiny, base, small, medium, large-v3
    whisper_device: str = "cpu"
    whisper_compute_type: str = "int8"
    speech_locale: str = ""  # Empty = auto-detect; ISO 639-1 code e.g. "en"
    partial_result_interval: float = 1.0  # Seconds of new audio between partial results

    # --- Audio capture ---
    # "sounddevice" = local microphone, "stream" = PCM pushed over WebSocket
    capture_provider: str = "sounddevice"
    capture_device: str | None = None  # None = system default input
    capture_sample_rate: int = 16000
    capture_channels: int = 1
    capture_buffer_size: int = 1024  # Frames per captured buffer

    # --- Permissions ---
    authorization_mode: str = "device"

    # --- Entry annotation ---
    annotator_provider: str = "placeholder"
    placeholder_synthesis: str = "Your thoughts have been captured. Synthesis coming soon!"
    default_questions: list[str] = Field(
        default_factory=lambda: [
            "What emotions came up for you while journaling today?",
            "How does this connect to what you shared yesterday?",
        ]
    )

    # --- Application ---
    app_host: str = "127.0.0.1"
    app_port: int = 8000
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Load settings once per process and reuse them."""
    return Settings()
