"""
Builds new journal entries from confirmed text.

Used both when a recording is saved and for the typed-entry fallback.
"""

import logging

from audiojournal.core.exceptions import EmptyTranscriptError
from audiojournal.core.models import JournalEntry
from audiojournal.services.synthesis.base import BaseAnnotator

logger = logging.getLogger(__name__)


async def compose_entry(transcript: str, annotator: BaseAnnotator) -> JournalEntry:
    """Create a fresh entry (new id, current date) with annotations attached.

    Args:
        transcript: The text to save; surrounding whitespace is stripped.
        annotator: Supplies synthesis text and reflection questions.

    Returns:
        A new, not yet stored JournalEntry.

    Raises:
        EmptyTranscriptError: If the text is blank.
    """
    text = transcript.strip()
    if not text:
        raise EmptyTranscriptError()

    annotation = await annotator.annotate(text)
    entry = JournalEntry(
        transcript=text,
        synthesis=annotation.synthesis,
        questions=tuple(annotation.questions),
    )
    logger.debug("Composed entry %s (%d chars)", entry.id, len(text))
    return entry
