"""
Entity Store: content types and saved entities.

Updated by: Node form submissions
Queried by: Form binder, Display block, API
"""

import logging
from typing import Dict, List, Optional
from uuid import uuid4

from live_preview.errors import EntityNotFoundError, UnknownNodeTypeError
from live_preview.models.entity import (
    Entity,
    FieldDefinition,
    FieldType,
    NodeType,
    PreviewMode,
)

logger = logging.getLogger(__name__)


class EntityStore:
    """
    In-memory entity storage.
    Production would sit in front of the platform's database.
    """

    def __init__(self, node_types: Optional[List[NodeType]] = None):
        self._node_types: Dict[str, NodeType] = {}
        self._entities: Dict[str, Entity] = {}
        for node_type in node_types or []:
            self.add_node_type(node_type)

    # --- Content types ---

    def add_node_type(self, node_type: NodeType) -> None:
        """Register a content type, replacing any with the same id."""
        self._node_types[node_type.id] = node_type

    def get_node_type(self, node_type_id: str) -> NodeType:
        """Get a content type, raising if it is not registered."""
        node_type = self._node_types.get(node_type_id)
        if node_type is None:
            raise UnknownNodeTypeError(node_type_id)
        return node_type

    def list_node_types(self) -> List[NodeType]:
        """All registered content types, in registration order."""
        return list(self._node_types.values())

    # --- Entities ---

    def create(self, node_type_id: str) -> Entity:
        """A new, unsaved entity of the given type with no values."""
        node_type = self.get_node_type(node_type_id)
        return Entity(
            type=node_type.id,
            field_definitions=[f.model_copy() for f in node_type.fields],
        )

    def load(self, entity_id: Optional[str]) -> Optional[Entity]:
        """Load a copy of a saved entity, or None."""
        if not entity_id:
            return None
        entity = self._entities.get(str(entity_id))
        if entity is None:
            return None
        return entity.model_copy(deep=True)

    def load_or_fail(self, entity_id: str) -> Entity:
        """Load a copy of a saved entity, raising if it does not exist."""
        entity = self.load(entity_id)
        if entity is None:
            raise EntityNotFoundError(entity_id)
        return entity

    def exists(self, entity_id: str) -> bool:
        """Whether an entity with this ID has been saved."""
        return str(entity_id) in self._entities

    def save(self, entity: Entity) -> Entity:
        """Persist an entity, assigning an ID when it is new."""
        if entity.in_preview:
            raise ValueError("Entities in preview are never saved")
        if entity.id is None:
            entity.id = uuid4().hex[:8]
        self._entities[entity.id] = entity.model_copy(deep=True)
        logger.info("Saved %s %s (%s)", entity.type, entity.id, entity.title)
        return entity


def default_node_types() -> List[NodeType]:
    """Content types the service starts with when none are supplied."""
    tags = FieldDefinition(
        name="field_tags", type=FieldType.ENTITY_REFERENCE, label="Tags",
        target_type="taxonomy_term", cardinality=-1,
    )
    return [
        NodeType(
            id="learn_article",
            label="Learn Article",
            preview_mode=PreviewMode.REQUIRED,
            fields=[
                FieldDefinition(
                    name="field_paragraph_body", type=FieldType.TEXT_LONG,
                    label="Body", required=True,
                ),
                FieldDefinition(
                    name="field_learning_content", type=FieldType.ENTITY_REFERENCE,
                    label="Learning content", target_type="node", cardinality=-1,
                ),
                tags,
            ],
        ),
        NodeType(
            id="article",
            label="Article",
            fields=[
                FieldDefinition(name="body", type=FieldType.TEXT_LONG, label="Body"),
                FieldDefinition(
                    name="field_related", type=FieldType.ENTITY_REFERENCE,
                    label="Related", target_type="node", cardinality=-1,
                ),
                tags.model_copy(),
            ],
        ),
        NodeType(
            id="page",
            label="Basic page",
            preview_mode=PreviewMode.OPTIONAL,
            fields=[FieldDefinition(name="body", type=FieldType.TEXT_LONG, label="Body")],
        ),
    ]
