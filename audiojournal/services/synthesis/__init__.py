"""
Synthesis module - Annotation of new journal entries.
"""

from .base import BaseAnnotator

__all__ = ["BaseAnnotator", "create_annotator"]


def create_annotator(provider: str, **kwargs) -> BaseAnnotator:
    """
    Factory function to create an annotator based on provider.

    Args:
        provider: Annotator name ("placeholder")
        **kwargs: Provider-specific configuration

    Returns:
        BaseAnnotator implementation instance

    Raises:
        ValueError: If provider is unknown
    """
    if provider == "placeholder":
        from .placeholder import PlaceholderAnnotator
        return PlaceholderAnnotator(**kwargs)
    else:
        raise ValueError(f"Unknown annotator provider: {provider}")
