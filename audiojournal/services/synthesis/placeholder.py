"""Fixed placeholder annotation used until a real synthesis service exists."""

from audiojournal.core.config import get_settings
from audiojournal.core.models import EntryAnnotation
from audiojournal.services.synthesis.base import BaseAnnotator


class PlaceholderAnnotator(BaseAnnotator):
    """Attaches the same synthesis text and questions to every entry.

    Args:
        synthesis: Placeholder synthesis (defaults to settings).
        questions: Reflection questions (defaults to settings).
    """

    def __init__(
        self,
        synthesis: str | None = None,
        questions: list[str] | None = None,
        settings=None,
    ) -> None:
        settings = settings or get_settings()
        self._synthesis = synthesis if synthesis is not None else settings.placeholder_synthesis
        self._questions = list(questions if questions is not None else settings.default_questions)

    async def annotate(self, transcript: str) -> EntryAnnotation:
        return EntryAnnotation(synthesis=self._synthesis, questions=list(self._questions))
