"""Static writing prompts offered when the user does not know where to start."""

JOURNAL_PROMPTS: tuple[str, ...] = (
    "What are you grateful for today?",
    "What challenge did you face recently, and what did you learn from it?",
    "Describe a moment when you felt truly present.",
    "What would you tell your younger self?",
    "What's weighing on your mind right now?",
    "What made you smile today?",
    "How have you grown in the past month?",
    "What do you need to let go of?",
)


def get_prompts() -> list[str]:
    """Return the journal prompts in display order."""
    return list(JOURNAL_PROMPTS)
