"""Effective view mode: shared by the preview form and the display block."""

from typing import Optional


def effective_view_mode(
    entity_type_tag: str,
    configured: Optional[str],
    full_view_mode_type: str = "learn_article",
    default: str = "full",
) -> str:
    """
    Pick the view mode an entity is rendered in.

    Long-form articles always render ``full``; everything else uses the
    configured view mode, falling back to ``default`` when none is set.
    """
    if entity_type_tag == full_view_mode_type:
        return "full"
    return configured or default
