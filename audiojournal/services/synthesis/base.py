"""
Abstract base class for entry annotators.

An annotator turns a confirmed transcript into the synthesis text and
reflection questions stored with a new entry. The entry store never calls
annotators; the caller composing the entry does.
"""

from abc import ABC, abstractmethod

from audiojournal.core.models import EntryAnnotation


class BaseAnnotator(ABC):
    """Interface that every annotation provider must implement."""

    @abstractmethod
    async def annotate(self, transcript: str) -> EntryAnnotation:
        """Produce synthesis and questions for a transcript.

        Args:
            transcript: The non-empty entry text.

        Returns:
            EntryAnnotation with optional synthesis and ordered questions.
        """
