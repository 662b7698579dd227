"""Block Configuration: which entity the display block shows, and how."""

from typing import Dict, Optional

from pydantic import BaseModel


NID_PREFIX = "nid_"


class BlockConfiguration(BaseModel):
    """
    Settings of a placed live preview block.

    Persisted flat, one ``nid_<type>`` key per content type plus a single
    ``view_mode``. See ``to_settings`` / ``from_settings``.
    """

    node_ids: Dict[str, Optional[str]] = {}
    view_mode: Optional[str] = None

    def node_id_for(self, node_type: str) -> Optional[str]:
        return self.node_ids.get(node_type) or None

    def to_settings(self) -> dict:
        settings = {
            f"{NID_PREFIX}{node_type}": nid
            for node_type, nid in self.node_ids.items()
        }
        settings["view_mode"] = self.view_mode
        return settings

    @classmethod
    def from_settings(cls, settings: dict) -> "BlockConfiguration":
        node_ids = {
            key[len(NID_PREFIX):]: (str(value) if value not in (None, "") else None)
            for key, value in settings.items()
            if key.startswith(NID_PREFIX)
        }
        return cls(node_ids=node_ids, view_mode=settings.get("view_mode") or None)
