"""AudioJournal - speech-driven personal journaling backend."""

__version__ = "0.1.0"
