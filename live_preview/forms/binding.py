"""
Form binding: turns submitted form values into an entity, and validates them.

The binder only understands plain field values. Sub-entities edited in
inline widgets are not part of ``values`` and are merged separately.
"""

import logging
from typing import Any, Dict, List, Optional

from live_preview.models.entity import Entity, FieldDefinition, FieldType, NodeType
from live_preview.storage.entity_store import EntityStore

logger = logging.getLogger(__name__)


def _as_list(value: Any) -> List[Any]:
    if value is None or value == "":
        return []
    if isinstance(value, (list, tuple)):
        return [v for v in value if v not in (None, "")]
    return [value]


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or value == [] or value == ()


class EntityFormBinder:
    """Builds transient entities from form values."""

    def __init__(self, entity_store: EntityStore):
        self.entity_store = entity_store

    def build_entity(
        self,
        node_type_id: str,
        values: Dict[str, Any],
        original: Optional[Entity] = None,
    ) -> Entity:
        """
        Apply ``values`` onto a copy of ``original`` (or a new entity).

        The result is never saved here; the caller decides what to do
        with it. Values for undeclared fields are ignored.
        """
        node_type = self.entity_store.get_node_type(node_type_id)
        if original is not None:
            entity = original.model_copy(deep=True)
            entity.field_definitions = [f.model_copy() for f in node_type.fields]
        else:
            entity = self.entity_store.create(node_type_id)

        if "title" in values:
            entity.title = str(values["title"] or "")

        for definition in node_type.fields:
            if definition.name not in values:
                continue
            entity.set_value(
                definition.name,
                self._coerce(definition, values[definition.name]),
            )
        return entity

    def _coerce(self, definition: FieldDefinition, raw: Any) -> Any:
        if definition.type == FieldType.ENTITY_REFERENCE:
            return self._resolve_references(definition, raw)
        if definition.type == FieldType.INTEGER:
            try:
                return int(raw) if not _is_empty(raw) else None
            except (ValueError, TypeError):
                return raw
        if definition.type == FieldType.BOOLEAN:
            return bool(raw)
        return None if raw is None else str(raw)

    def _resolve_references(self, definition: FieldDefinition, raw: Any) -> List[Entity]:
        resolved = []
        for item in _as_list(raw):
            if isinstance(item, Entity):
                resolved.append(item)
            elif isinstance(item, dict):
                resolved.append(Entity.model_validate(item))
            else:
                entity = self.entity_store.load(str(item))
                if entity is None:
                    logger.debug(
                        "Dropping unresolvable reference %s in %s",
                        item, definition.name,
                    )
                    continue
                resolved.append(entity)
        return resolved


class FormValidator:
    """Generic node form validation."""

    def __init__(self, entity_store: EntityStore):
        self.entity_store = entity_store

    def validate(self, node_type: NodeType, values: Dict[str, Any]) -> Dict[str, str]:
        """Return field name -> message for every problem found."""
        errors: Dict[str, str] = {}

        if _is_empty(values.get("title")):
            errors["title"] = "Title field is required."

        for definition in node_type.fields:
            value = values.get(definition.name)
            label = definition.label or definition.name

            if _is_empty(value):
                if definition.required:
                    errors[definition.name] = f"{label} field is required."
                continue

            items = _as_list(value)
            if definition.cardinality != -1 and len(items) > definition.cardinality:
                errors[definition.name] = (
                    f"{label}: this field cannot hold more than "
                    f"{definition.cardinality} values."
                )
                continue

            if definition.type == FieldType.INTEGER:
                try:
                    int(value)
                except (ValueError, TypeError):
                    errors[definition.name] = f"{label} must be a number."
            elif definition.type == FieldType.ENTITY_REFERENCE:
                missing = [
                    str(i) for i in items
                    if not isinstance(i, (Entity, dict))
                    and not self.entity_store.exists(str(i))
                ]
                if missing:
                    errors[definition.name] = (
                        f"{label}: there are no entities matching "
                        f"\"{', '.join(missing)}\"."
                    )

        return errors
