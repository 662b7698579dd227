"""Live preview data models."""

from live_preview.models.ajax import AjaxCommand, AjaxResponse, InvokeCommand, ReplaceCommand
from live_preview.models.block import BlockConfiguration
from live_preview.models.context import CreatingContext, ResolutionContext, ViewingContext
from live_preview.models.entity import (
    Entity,
    FieldDefinition,
    FieldType,
    NodeType,
    PreviewMode,
)
from live_preview.models.form import (
    PREVIEW_OP,
    SAVE_OP,
    FormAction,
    FormElement,
    FormState,
    InlineWidgetState,
)
from live_preview.models.render import CACHE_PERMANENT, RenderArray

__all__ = [
    "AjaxCommand",
    "AjaxResponse",
    "BlockConfiguration",
    "CACHE_PERMANENT",
    "CreatingContext",
    "Entity",
    "FieldDefinition",
    "FieldType",
    "FormAction",
    "FormElement",
    "FormState",
    "InlineWidgetState",
    "InvokeCommand",
    "NodeType",
    "PREVIEW_OP",
    "PreviewMode",
    "RenderArray",
    "ReplaceCommand",
    "ResolutionContext",
    "SAVE_OP",
    "ViewingContext",
]
