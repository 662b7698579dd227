"""
Entity Display Repository: known view modes and per-type field displays.

A display lists which fields a content type shows in a view mode. Content
types without a display for a view mode fall back to the ``default``
display, and without that, to every field.
"""

from typing import Dict, List, Optional


DEFAULT_VIEW_MODES: Dict[str, Dict[str, dict]] = {
    "node": {
        "full": {"label": "Full content"},
        "teaser": {"label": "Teaser"},
        "rss": {"label": "RSS"},
        "search_index": {"label": "Search index"},
        "search_result": {"label": "Search result highlighting input"},
    },
}


class EntityDisplayRepository:

    def __init__(self, view_modes: Optional[Dict[str, Dict[str, dict]]] = None):
        source = view_modes if view_modes is not None else DEFAULT_VIEW_MODES
        self._view_modes = {
            entity_type: dict(modes) for entity_type, modes in source.items()
        }
        self._displays: Dict[tuple, List[str]] = {}

    def get_view_mode_options(self, entity_type_id: str) -> Dict[str, str]:
        """View mode machine name -> label, for select lists."""
        return {
            mode: info.get("label", mode)
            for mode, info in self._view_modes.get(entity_type_id, {}).items()
        }

    def has_view_mode(self, entity_type_id: str, view_mode: str) -> bool:
        return view_mode in self._view_modes.get(entity_type_id, {})

    def register_view_mode(
        self, entity_type_id: str, view_mode: str, label: str
    ) -> None:
        self._view_modes.setdefault(entity_type_id, {})[view_mode] = {"label": label}

    def set_display(
        self, node_type: str, view_mode: str, fields: List[str]
    ) -> None:
        """Configure which fields, in order, ``node_type`` shows in ``view_mode``."""
        self._displays[(node_type, view_mode)] = list(fields)

    def get_display_fields(
        self, node_type: str, view_mode: str
    ) -> Optional[List[str]]:
        """Fields shown in a view mode, or None meaning all of them."""
        fields = self._displays.get((node_type, view_mode))
        if fields is None:
            fields = self._displays.get((node_type, "default"))
        return fields
