"""Tests for entry composition, annotators and the journal prompts."""

from unittest.mock import AsyncMock

import pytest

from audiojournal.core.config import Settings
from audiojournal.core.exceptions import EmptyTranscriptError
from audiojournal.core.models import EntryAnnotation
from audiojournal.services.composer import compose_entry
from audiojournal.services.prompts import JOURNAL_PROMPTS, get_prompts
from audiojournal.services.synthesis import BaseAnnotator, create_annotator
from audiojournal.services.synthesis.placeholder import PlaceholderAnnotator


class TestPlaceholderAnnotator:
    async def test_defaults_from_settings(self):
        settings = Settings(_env_file=None)
        annotation = await PlaceholderAnnotator(settings=settings).annotate("anything")
        assert annotation.synthesis == "Your thoughts have been captured. Synthesis coming soon!"
        assert annotation.questions == [
            "What emotions came up for you while journaling today?",
            "How does this connect to what you shared yesterday?",
        ]

    async def test_overrides(self):
        annotator = PlaceholderAnnotator(synthesis="Noted.", questions=["Why?"])
        annotation = await annotator.annotate("text")
        assert annotation == EntryAnnotation(synthesis="Noted.", questions=["Why?"])

    async def test_returned_questions_are_copies(self):
        annotator = PlaceholderAnnotator(questions=["Why?"])
        first = await annotator.annotate("a")
        first.questions.append("mutated")
        second = await annotator.annotate("b")
        assert second.questions == ["Why?"]

    def test_factory(self):
        assert isinstance(create_annotator("placeholder"), PlaceholderAnnotator)

    def test_factory_unknown(self):
        with pytest.raises(ValueError, match="Unknown annotator provider"):
            create_annotator("gpt")


class TestComposeEntry:
    """compose_entry strips text and attaches annotations to a fresh entry."""

    async def test_builds_entry(self):
        annotator = PlaceholderAnnotator(synthesis="Summary", questions=["Q1", "Q2"])
        entry = await compose_entry("  Today was good.  ", annotator)
        assert entry.transcript == "Today was good."
        assert entry.synthesis == "Summary"
        assert entry.questions == ("Q1", "Q2")

    async def test_fresh_identity(self):
        annotator = PlaceholderAnnotator()
        first = await compose_entry("same text", annotator)
        second = await compose_entry("same text", annotator)
        assert first.id != second.id
        assert second.date >= first.date

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    async def test_blank_text_rejected(self, text):
        annotator = AsyncMock(spec=BaseAnnotator)
        with pytest.raises(EmptyTranscriptError):
            await compose_entry(text, annotator)
        annotator.annotate.assert_not_called()

    async def test_annotator_receives_stripped_text(self):
        annotator = AsyncMock(spec=BaseAnnotator)
        annotator.annotate.return_value = EntryAnnotation()
        entry = await compose_entry(" hi ", annotator)
        annotator.annotate.assert_awaited_once_with("hi")
        assert entry.synthesis is None
        assert entry.questions == ()


class TestPrompts:
    def test_eight_prompts_in_order(self):
        prompts = get_prompts()
        assert len(prompts) == 8
        assert prompts[0] == "What are you grateful for today?"
        assert prompts[-1] == "What do you need to let go of?"

    def test_returns_copy(self):
        prompts = get_prompts()
        prompts.clear()
        assert len(JOURNAL_PROMPTS) == 8
        assert len(get_prompts()) == 8
