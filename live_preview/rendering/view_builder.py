"""
View Builder: renders an entity in a view mode.

Output is a RenderArray; callers attach libraries, classes and cache
policy before it reaches the page.
"""

import logging
from pathlib import Path
from typing import Any, List, Optional

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape
from markupsafe import Markup
from pydantic import ValidationError

from live_preview.errors import RenderError
from live_preview.models.entity import Entity, FieldDefinition, FieldType
from live_preview.models.render import RenderArray
from live_preview.rendering.display_repository import EntityDisplayRepository

logger = logging.getLogger(__name__)

_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


def _get_env() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(_TEMPLATES_DIR)),
        autoescape=select_autoescape(["html", "xml"]),
    )


def _css_name(name: str) -> str:
    return name.replace("_", "-")


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or value == []


class ViewBuilder:
    """Builds markup for node entities through a Jinja2 template."""

    template_name = "node.html"

    def __init__(self, display_repository: Optional[EntityDisplayRepository] = None):
        self.display_repository = display_repository or EntityDisplayRepository()
        self._env = _get_env()

    def view(self, entity: Entity, view_mode: str = "full") -> RenderArray:
        """
        Render ``entity`` in ``view_mode``.

        Raises RenderError when a field value cannot be rendered or the
        template fails. Unknown view modes render with the default display.
        """
        if not self.display_repository.has_view_mode(entity.entity_type_id, view_mode):
            logger.debug(
                "View mode %s unknown for %s, using default display",
                view_mode, entity.entity_type_id,
            )

        shown = self.display_repository.get_display_fields(entity.type, view_mode)
        fields = []
        for definition, value in entity.iter_fields():
            if shown is not None and definition.name not in shown:
                continue
            if _is_empty(value):
                continue
            fields.append({
                "name": definition.name,
                "css_name": _css_name(definition.name),
                "type_class": _css_name(definition.type.value),
                "label": definition.label,
                "field_items": self._render_items(definition, value),
            })
        if shown is not None:
            fields.sort(key=lambda f: shown.index(f["name"]))

        try:
            markup = self._env.get_template(self.template_name).render(
                type_class=_css_name(entity.type),
                view_mode_class=_css_name(view_mode),
                in_preview=entity.in_preview,
                title=entity.title,
                url=entity.url,
                link_title=view_mode != "full",
                fields=fields,
            )
        except (TemplateError, TypeError) as e:
            raise RenderError(
                f"Failed to render {entity.type} {entity.id or '(new)'}: {e}"
            ) from e

        return RenderArray(markup=markup)

    def _render_items(self, definition: FieldDefinition, value: Any) -> List[Any]:
        values = value if isinstance(value, list) else [value]
        if definition.type == FieldType.ENTITY_REFERENCE:
            return [self._render_reference(definition, v) for v in values]
        if definition.type == FieldType.TEXT_LONG:
            return [Markup(str(v)) for v in values]
        if definition.type == FieldType.BOOLEAN:
            return ["On" if v else "Off" for v in values]
        return [str(v) for v in values]

    def _render_reference(self, definition: FieldDefinition, value: Any) -> Markup:
        if isinstance(value, dict):
            try:
                value = Entity.model_validate(value)
            except ValidationError as e:
                raise RenderError(
                    f"Invalid referenced entity in {definition.name}: {e}"
                ) from e
        if not isinstance(value, Entity):
            raise RenderError(
                f"Cannot render {type(value).__name__} in reference field "
                f"{definition.name}"
            )
        if value.url:
            return Markup('<a href="{}">{}</a>').format(value.url, value.title)
        return Markup("<span>{}</span>").format(value.title)
