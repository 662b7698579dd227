"""Entity: the content object being edited, previewed and displayed."""

from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

from pydantic import BaseModel


class FieldType(str, Enum):
    STRING = "string"
    TEXT_LONG = "text_long"                 # Trusted HTML body
    ENTITY_REFERENCE = "entity_reference"
    INTEGER = "integer"
    BOOLEAN = "boolean"


class PreviewMode(int, Enum):
    """Per content type preview policy."""
    DISABLED = 0
    OPTIONAL = 1
    REQUIRED = 2


class FieldDefinition(BaseModel):
    """Declared shape of a single field on a content type."""

    name: str                               # e.g., "field_tags"
    type: FieldType
    label: str = ""
    required: bool = False
    target_type: Optional[str] = None       # Only for entity references
    cardinality: int = 1                    # -1 = unlimited


class NodeType(BaseModel):
    """A content type: its label, preview policy and field set."""

    id: str                                 # e.g., "learn_article"
    label: str
    preview_mode: PreviewMode = PreviewMode.OPTIONAL
    fields: List[FieldDefinition] = []

    def get_field_definition(self, name: str) -> Optional[FieldDefinition]:
        for definition in self.fields:
            if definition.name == name:
                return definition
        return None


class Entity(BaseModel):
    """
    A unit of structured content.

    While previewing, an Entity is transient: built from form input,
    flagged ``in_preview`` and never handed back to storage.
    """

    id: Optional[str] = None                # None until saved
    entity_type_id: str = "node"
    type: str                               # Content type tag
    title: str = ""
    values: Dict[str, Any] = {}
    field_definitions: List[FieldDefinition] = []
    in_preview: bool = False
    preview_view_mode: Optional[str] = None

    def iter_fields(self) -> Iterator[Tuple[FieldDefinition, Any]]:
        """Yield (definition, current value) for every declared field."""
        for definition in self.field_definitions:
            yield definition, self.values.get(definition.name)

    def get_value(self, name: str, default: Any = None) -> Any:
        return self.values.get(name, default)

    def set_value(self, name: str, value: Any) -> None:
        self.values[name] = value

    @property
    def is_new(self) -> bool:
        return self.id is None

    @property
    def url(self) -> Optional[str]:
        if self.id is None:
            return None
        return "/" + self.entity_type_id.replace("_", "/") + f"/{self.id}"
