"""Form state: the in-progress node edit form as submitted by the editor."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from live_preview.models.entity import Entity


PREVIEW_OP = "Preview"
SAVE_OP = "Save"


class InlineWidgetState(BaseModel):
    """Pending sub-entity edits held by one inline entity form widget."""

    instance_name: Optional[str] = None     # Field the widget is bound to
    entities: List[Entity] = []


class FormState(BaseModel):
    """Values, triggering op and bookkeeping for one node form submission."""

    op: str = SAVE_OP
    values: Dict[str, Any] = {}
    inline_entity_form: Dict[str, InlineWidgetState] = {}
    errors: Dict[str, str] = {}
    has_been_previewed: bool = False

    @property
    def is_preview(self) -> bool:
        return self.op == PREVIEW_OP

    def set_error(self, name: str, message: str) -> None:
        self.errors[name] = message

    def clear_errors(self) -> None:
        self.errors = {}

    def has_errors(self) -> bool:
        return bool(self.errors)


class FormAction(BaseModel):
    """A button on the node form."""

    name: str
    label: str
    access: bool = True
    ajax_callback: Optional[str] = None
    submit_handlers: List[str] = []


class FormElement(BaseModel):
    """A single element of a configuration form."""

    name: str
    type: str                               # "entity_autocomplete" | "select"
    title: str
    description: str = ""
    required: bool = False
    target_type: Optional[str] = None
    options: Dict[str, str] = {}
    default_value: Any = None
