"""
Config Store: named configuration objects with dotted-key access.

Holds block placements such as ``block.block.livepreviewblock``.
"""

from typing import Any, Dict


class ConfigStore:
    """In-memory configuration storage."""

    def __init__(self, initial: Dict[str, dict] = None):
        self._objects: Dict[str, dict] = {}
        for name, data in (initial or {}).items():
            self.set(name, data)

    def get(self, name: str, key: str = None, default: Any = None) -> Any:
        """
        Read a configuration object, or one dotted key within it.

        ``get("block.block.x", "settings.view_mode")`` walks nested dicts
        and returns ``default`` as soon as a level is missing.
        """
        data = self._objects.get(name)
        if data is None:
            return default
        if key is None:
            return data
        current: Any = data
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current

    def set(self, name: str, data: dict) -> None:
        """Replace a whole configuration object."""
        self._objects[name] = dict(data)

    def update(self, name: str, key: str, value: Any) -> None:
        """Set one dotted key, creating intermediate levels as needed."""
        current = self._objects.setdefault(name, {})
        parts = key.split(".")
        for part in parts[:-1]:
            current = current.setdefault(part, {})
        current[parts[-1]] = value
